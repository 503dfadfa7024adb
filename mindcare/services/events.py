# in-process publish/subscribe bus for "something changed, re-read the store"
# subscribers get the event name and the payload dict

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

DATA_UPDATED = "data-updated"
THERAPY_PROGRESS_UPDATED = "therapy-progress-updated"
PATIENT_PROGRESS_UPDATE = "patient-progress-update"

Handler = Callable[[str, Dict[str, Any]], None]


class EventBus:
    """synchronous observer registry.

    delivery happens inline in publish(), in subscription order. a handler
    that raises is logged and skipped so the rest still get the event.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, event: str, handler: Handler) -> Callable[[], None]:
        """register a handler; returns a callable that unsubscribes it"""
        self._handlers[event].append(handler)
        return lambda: self.unsubscribe(event, handler)

    def unsubscribe(self, event: str, handler: Handler):
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: str, payload: Optional[Dict[str, Any]] = None):
        payload = payload or {}
        handlers = list(self._handlers.get(event, []))
        logger.debug(f"Publishing '{event}' to {len(handlers)} subscriber(s)")
        for handler in handlers:
            try:
                handler(event, payload)
            except Exception:
                logger.exception(f"Subscriber {handler!r} failed while handling '{event}'")