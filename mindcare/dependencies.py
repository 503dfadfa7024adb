# fastapi dependency injection
# one store, one event bus, and the engines built on them, shared per process

import logging
from typing import Optional

from mindcare.services.activity import ActivityRecorder
from mindcare.services.clock import Clock, local_now
from mindcare.services.events import EventBus
from mindcare.services.progress import TherapyProgressEngine
from mindcare.services.reports import TherapistNotifier
from mindcare.services.store import KeyValueStore, create_store
from mindcare.services.streak import StreakEngine

logger = logging.getLogger(__name__)


class Services:
    """the engines wired to a single store and bus"""

    def __init__(self, store: KeyValueStore, bus: Optional[EventBus] = None, clock: Clock = local_now):
        self.store = store
        self.bus = bus if bus is not None else EventBus()
        self.clock = clock
        self.streak = StreakEngine(store, clock=clock)
        self.notifier = TherapistNotifier(store, self.bus, clock=clock)
        self.progress = TherapyProgressEngine(store, self.bus, notifier=self.notifier, clock=clock)
        self.activities = ActivityRecorder(store, self.bus, self.streak, self.progress, clock=clock)


_services: Optional[Services] = None


def init_services(store: Optional[KeyValueStore] = None) -> Services:
    """build the process-wide services (from settings unless a store is given)"""
    global _services
    _services = Services(store if store is not None else create_store())
    logger.info(f"Services ready on {type(_services.store).__name__}")
    return _services


def get_services() -> Services:
    if _services is None:
        return init_services()
    return _services
