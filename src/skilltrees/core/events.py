"""Fire-and-forget event notification.

Subscribers receive the event payload and return nothing. A subscriber that
raises is logged with its traceback and skipped; the remaining subscribers
and the emitting operation carry on.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

INITIALIZED = "initialized"
TREE_GENERATED = "tree-generated"
PROGRESSION_UPDATED = "progression-updated"
PATH_GENERATED = "path-generated"

Listener = Callable[[Any], None]


class EventBus:
    """Named-event publish/subscribe registry."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, event: str, callback: Listener) -> None:
        """Register ``callback`` for ``event``. Duplicates are called twice."""
        self._listeners[event].append(callback)

    def unsubscribe(self, event: str, callback: Listener) -> None:
        """Remove one registration of ``callback``; unknown callbacks are ignored."""
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event: str, payload: Any = None) -> None:
        """Notify every subscriber of ``event`` in registration order."""
        for callback in list(self._listeners.get(event, [])):
            try:
                callback(payload)
            except Exception:
                logger.warning("Subscriber failed for event: %s", event, exc_info=True)
