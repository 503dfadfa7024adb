# shared fixtures for the mindcare test suite
# in-memory store, a controllable clock, recorded events, and an httpx client

from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from mindcare.dependencies import Services, get_services
from mindcare.main import app
from mindcare.services.activity import ActivityRecorder
from mindcare.services.events import EventBus
from mindcare.services.progress import TherapyProgressEngine
from mindcare.services.reports import TherapistNotifier
from mindcare.services.store import InMemoryStore, StoreError
from mindcare.services.streak import StreakEngine


PATIENT_ID = "patient-001"
PATIENT_2_ID = "patient-002"
THERAPIST_ID = "therapist-001"


class FakeClock:
    """callable clock that only moves when told to"""

    def __init__(self, start=None):
        self.now = start or datetime(2025, 6, 10, 9, 30)

    def __call__(self):
        return self.now

    def advance(self, days=0, hours=0, minutes=0):
        self.now = self.now + timedelta(days=days, hours=hours, minutes=minutes)


class RecordingSubscriber:
    """collects every event it receives, in order"""

    def __init__(self):
        self.events = []

    def __call__(self, event, payload):
        self.events.append((event, payload))

    def names(self):
        return [name for name, _ in self.events]

    def payloads(self, name):
        return [payload for event, payload in self.events if event == name]


class FailingStore(InMemoryStore):
    """raises on writes to the listed keys"""

    def __init__(self, fail_keys=()):
        super().__init__()
        self.fail_keys = set(fail_keys)

    def set(self, key, value):
        if key in self.fail_keys:
            raise StoreError(f"quota exceeded writing {key}")
        super().set(key, value)


def make_booking(patient_id=PATIENT_ID, therapist_id=THERAPIST_ID, date="2025-06-01", **extra):
    booking = {
        "id": extra.pop("id", f"b-{patient_id}-{date}"),
        "patientId": patient_id,
        "therapistId": therapist_id,
        "patientName": extra.pop("patientName", "Alex Rivera"),
        "date": date,
        "createdAt": extra.pop("createdAt", f"{date}T08:00:00"),
    }
    booking.update(extra)
    return booking


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorder(bus):
    """subscriber attached to all three change events"""
    rec = RecordingSubscriber()
    for name in ("data-updated", "therapy-progress-updated", "patient-progress-update"):
        bus.subscribe(name, rec)
    return rec


@pytest.fixture
def streak_engine(store, clock):
    return StreakEngine(store, clock=clock)


@pytest.fixture
def notifier(store, bus, clock):
    return TherapistNotifier(store, bus, clock=clock)


@pytest.fixture
def progress_engine(store, bus, notifier, clock):
    return TherapyProgressEngine(store, bus, notifier=notifier, clock=clock)


@pytest.fixture
def activity_recorder(store, bus, streak_engine, progress_engine, clock):
    return ActivityRecorder(store, bus, streak_engine, progress_engine, clock=clock)


@pytest.fixture
def services(store, bus, clock):
    """services wired to the test store and clock"""
    return Services(store, bus, clock=clock)


@pytest_asyncio.fixture
async def client(services):
    """httpx async test client with the services dependency overridden"""

    def override_get_services():
        return services

    app.dependency_overrides[get_services] = override_get_services

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
