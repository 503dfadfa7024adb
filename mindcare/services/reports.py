# therapist notification fan-out
# turns a patient's progress into a report for their most recent therapist,
# appends it to a capped log, and tells therapist dashboards about it

import logging
import uuid
from collections import deque
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from mindcare.catalog import BOOKINGS_KEY, REPORTS_KEY
from mindcare.config import settings
from mindcare.models.progress import PatientTherapyProgress
from mindcare.models.report import (
    Booking,
    ModuleBreakdown,
    ProgressSummary,
    TherapistProgressReport,
)
from mindcare.services.clock import Clock, local_now
from mindcare.services.events import PATIENT_PROGRESS_UPDATE, EventBus
from mindcare.services.store import KeyValueStore, read_json_list, write_json
from mindcare.utils import percent_of

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 5


def booking_time(booking: Booking) -> datetime:
    """sort key for bookings: date, else createdAt, else the earliest time.
    date-only values mean utc midnight; all times end up local and naive."""
    raw = booking.date or booking.created_at
    if not raw:
        return datetime.min
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return datetime.min
    if len(raw) == 10:
        parsed = parsed.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def load_bookings(store: KeyValueStore) -> List[Booking]:
    bookings = []
    for item in read_json_list(store, BOOKINGS_KEY):
        try:
            bookings.append(Booking.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping invalid booking: {e}")
    return bookings


def latest_booking(bookings: List[Booking], patient_id: str) -> Optional[Booking]:
    """most recent booking for a patient. the sort is stable, so bookings
    with identical times keep their stored order."""
    patient_bookings = [b for b in bookings if b.patient_id == patient_id]
    if not patient_bookings:
        return None
    return sorted(patient_bookings, key=booking_time, reverse=True)[0]


def build_summary(progress: PatientTherapyProgress) -> ProgressSummary:
    breakdown = [
        ModuleBreakdown(
            name=m.name,
            completed=m.completed_sessions,
            total=m.total_sessions,
            progress=percent_of(m.completed_sessions, m.total_sessions),
            lastCompleted=m.last_completed_date,
        )
        for m in progress.modules
    ]
    recent = sorted(
        (m for m in progress.modules if m.last_completed_date),
        key=lambda m: m.last_completed_date,
        reverse=True,
    )[:RECENT_ACTIVITY_LIMIT]
    return ProgressSummary(
        totalCompletedSessions=progress.total_completed_sessions,
        overallProgress=progress.overall_progress,
        streakDays=progress.streak_days,
        moduleBreakdown=breakdown,
        recentActivity=[m.model_copy() for m in recent],
    )


class TherapistNotifier:

    def __init__(
        self,
        store: KeyValueStore,
        bus: EventBus,
        clock: Clock = local_now,
        cap: Optional[int] = None,
    ):
        self.store = store
        self.bus = bus
        self.clock = clock
        self.cap = cap if cap is not None else settings.REPORT_LOG_CAP

    def send_progress_to_therapist(self, progress: PatientTherapyProgress) -> Optional[TherapistProgressReport]:
        """append a progress report for the patient's latest therapist.
        returns None (and writes nothing) when the patient has no booking."""
        booking = latest_booking(load_bookings(self.store), progress.user_id)
        if booking is None:
            logger.debug(f"No booking for patient {progress.user_id}; skipping therapist report")
            return None

        therapist_id = booking.therapist_id or booking.therapist_name
        report = TherapistProgressReport(
            id=uuid.uuid4().hex,
            patientId=progress.user_id,
            patientName=booking.patient_name,
            therapistId=therapist_id,
            timestamp=self.clock().isoformat(),
            summary=build_summary(progress),
        )
        self.append_report(report)

        self.bus.publish(PATIENT_PROGRESS_UPDATE, {
            "therapistId": therapist_id,
            "progressSummary": report.model_dump(by_alias=True),
        })
        logger.info(f"Progress report for patient {progress.user_id} sent to therapist {therapist_id}")
        return report

    def append_report(self, report: TherapistProgressReport):
        """push onto the log, dropping the oldest entries beyond the cap"""
        log = deque(read_json_list(self.store, REPORTS_KEY), maxlen=self.cap)
        log.append(report.model_dump(by_alias=True))
        write_json(self.store, REPORTS_KEY, list(log))

    def get_all_reports(self) -> List[TherapistProgressReport]:
        reports = []
        for item in read_json_list(self.store, REPORTS_KEY):
            try:
                reports.append(TherapistProgressReport.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping invalid therapist report: {e}")
        return reports

    def get_therapist_progress_reports(self, therapist_id: str) -> List[TherapistProgressReport]:
        return [r for r in self.get_all_reports() if r.therapist_id == therapist_id]
