# therapy progress engine: per-patient module completion counters
# the per-user record is authoritative; all-patient-progress is a
# denormalized index for therapist-side reads, rewritten on every save
#
# both writes are plain read-modify-write with no version check, so two
# writers racing on the same user resolve last-write-wins, and a failure
# between the two writes leaves the index one save behind

import logging
from typing import Dict, Optional

from pydantic import ValidationError

from mindcare.catalog import ALL_PROGRESS_KEY, DEFAULT_TOTAL_SESSIONS, THERAPY_MODULES, progress_key
from mindcare.models.progress import ModuleCompletionStats, PatientTherapyProgress, TherapyModule
from mindcare.services.clock import Clock, days_between, local_now, parse_day
from mindcare.services.events import THERAPY_PROGRESS_UPDATED, EventBus
from mindcare.services.reports import TherapistNotifier
from mindcare.services.store import KeyValueStore, read_json, read_json_object, write_json
from mindcare.utils import percent_of

logger = logging.getLogger(__name__)


def compute_overall_progress(progress: PatientTherapyProgress) -> int:
    completed = sum(m.completed_sessions for m in progress.modules)
    total = sum(m.total_sessions for m in progress.modules)
    return percent_of(completed, total)


class TherapyProgressEngine:

    def __init__(
        self,
        store: KeyValueStore,
        bus: EventBus,
        notifier: Optional[TherapistNotifier] = None,
        clock: Clock = local_now,
    ):
        self.store = store
        self.bus = bus
        self.clock = clock
        self.notifier = notifier if notifier is not None else TherapistNotifier(store, bus, clock=clock)

    # record lifecycle

    def initialize_patient_progress(self, user_id: str) -> PatientTherapyProgress:
        modules = [
            TherapyModule(
                id=m["id"],
                name=m["name"],
                category=m["category"],
                totalSessions=m["total_sessions"],
                completedSessions=0,
            )
            for m in THERAPY_MODULES
        ]
        return PatientTherapyProgress(
            userId=user_id,
            modules=modules,
            totalCompletedSessions=0,
            overallProgress=0,
            lastUpdated=self.clock().isoformat(),
            streakDays=0,
        )

    def _load(self, user_id: str) -> Optional[PatientTherapyProgress]:
        doc = read_json(self.store, progress_key(user_id))
        if doc is None:
            return None
        try:
            return PatientTherapyProgress.model_validate(doc)
        except ValidationError as e:
            logger.warning(f"Discarding invalid progress record for {user_id}: {e}")
            return None

    def get_patient_progress(self, user_id: str) -> PatientTherapyProgress:
        """stored progress for the patient, created and saved on first access"""
        progress = self._load(user_id)
        if progress is not None:
            return progress

        logger.info(f"Initializing therapy progress for {user_id}")
        progress = self.initialize_patient_progress(user_id)
        self.save_patient_progress(progress)
        return progress

    def save_patient_progress(self, progress: PatientTherapyProgress):
        doc = progress.model_dump(by_alias=True)
        write_json(self.store, progress_key(progress.user_id), doc)

        all_progress = read_json_object(self.store, ALL_PROGRESS_KEY)
        all_progress[progress.user_id] = doc
        write_json(self.store, ALL_PROGRESS_KEY, all_progress)

        self.bus.publish(THERAPY_PROGRESS_UPDATED, {"userId": progress.user_id, "progress": doc})

    def get_all_patient_progress(self) -> Dict[str, PatientTherapyProgress]:
        result = {}
        for user_id, doc in read_json_object(self.store, ALL_PROGRESS_KEY).items():
            try:
                result[user_id] = PatientTherapyProgress.model_validate(doc)
            except ValidationError as e:
                logger.warning(f"Skipping invalid indexed progress for {user_id}: {e}")
        return result

    # completion

    def update_therapy_completion(self, user_id: str, module_id: str) -> PatientTherapyProgress:
        """count one completed session of module_id for the patient.

        unknown modules and modules already at their session cap are left
        alone and the record comes back unchanged; callers that care compare
        completed_sessions before and after.
        """
        progress = self.get_patient_progress(user_id)
        module = progress.find_module(module_id)
        if module is None:
            logger.debug(f"Ignoring completion for unknown module '{module_id}'")
            return progress
        if module.completed_sessions >= module.total_sessions:
            logger.debug(f"Module '{module_id}' already capped at {module.total_sessions} for {user_id}")
            return progress

        now = self.clock()
        today = now.date()

        module.completed_sessions += 1
        module.last_completed_date = today.isoformat()

        progress.total_completed_sessions = sum(m.completed_sessions for m in progress.modules)
        progress.overall_progress = compute_overall_progress(progress)

        # independent of the streak engine's counter
        last_day = parse_day(progress.last_updated)
        if last_day is not None and last_day != today:
            days_diff = days_between(last_day, today)
            if days_diff == 1:
                progress.streak_days += 1
            elif days_diff > 1:
                progress.streak_days = 1

        progress.last_updated = now.isoformat()

        self.save_patient_progress(progress)
        self.notifier.send_progress_to_therapist(progress)
        logger.info(
            f"Completed {module_id} session {module.completed_sessions}/{module.total_sessions} "
            f"for {user_id} (overall {progress.overall_progress}%)"
        )
        return progress

    def get_module_completion_stats(self, user_id: str, module_id: str) -> ModuleCompletionStats:
        progress = self.get_patient_progress(user_id)
        module = progress.find_module(module_id)
        if module is None:
            return ModuleCompletionStats(completed=0, total=DEFAULT_TOTAL_SESSIONS, percentage=0)
        percentage = percent_of(module.completed_sessions, module.total_sessions)
        return ModuleCompletionStats(
            completed=module.completed_sessions,
            total=module.total_sessions,
            percentage=percentage,
        )
