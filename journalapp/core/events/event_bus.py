"""Simple in-process event bus."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

EventHandler = Callable[[str, Dict[str, Any]], None]


class EventBus:
    """Synchronous publish/subscribe; a failing handler never reaches the publisher."""

    def __init__(self) -> None:
        self._subscribers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Register ``handler``; the returned callable unsubscribes it."""
        self._subscribers.append(handler)

        def unsubscribe() -> None:
            if handler in self._subscribers:
                self._subscribers.remove(handler)

        return unsubscribe

    def publish(self, event_type: str, payload: Dict[str, Any]) -> None:
        for handler in list(self._subscribers):
            try:
                handler(event_type, payload)
            except Exception:  # noqa: BLE001 - observers must not break the transition
                logger.exception("Handler %r failed for %s", handler, event_type)

    def __len__(self) -> int:
        return len(self._subscribers)
