"""Validation error helpers shared by the JSON controllers."""

from __future__ import annotations

from pydantic import ValidationError


def jsonable_errors(exc: ValidationError) -> list[dict]:
    errors = exc.errors()
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
    return errors


def validation_failed(exc: ValidationError) -> tuple[dict, int]:
    return {"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}, 400
