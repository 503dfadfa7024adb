# activity recorder: the save flow shared by every therapy module
# append the entry to the module's own log, bump the streak, count the
# session toward therapy progress, then announce that data changed

import logging
import uuid
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from mindcare.catalog import ACTIVITY_KEYS
from mindcare.models.progress import PatientTherapyProgress
from mindcare.models.streak import StreakRecord
from mindcare.services.clock import Clock, local_now
from mindcare.services.events import DATA_UPDATED, EventBus
from mindcare.services.progress import TherapyProgressEngine
from mindcare.services.store import KeyValueStore, read_json_list, write_json
from mindcare.services.streak import StreakEngine

logger = logging.getLogger(__name__)


class ActivityResult(BaseModel):
    entry: Dict[str, Any]
    streak: StreakRecord
    progress: Optional[PatientTherapyProgress] = None

    model_config = {"populate_by_name": True}


def activity_key(module_id: str) -> str:
    try:
        return ACTIVITY_KEYS[module_id]
    except KeyError:
        raise KeyError(f"Unknown therapy module '{module_id}'") from None


class ActivityRecorder:

    def __init__(
        self,
        store: KeyValueStore,
        bus: EventBus,
        streak_engine: StreakEngine,
        progress_engine: TherapyProgressEngine,
        clock: Clock = local_now,
    ):
        self.store = store
        self.bus = bus
        self.streak_engine = streak_engine
        self.progress_engine = progress_engine
        self.clock = clock

    def record_activity(
        self,
        module_id: str,
        entry: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None,
    ) -> ActivityResult:
        """save one completed activity. without a user id the entry and the
        streak are still recorded, but no therapy progress is counted."""
        key = activity_key(module_id)
        now = self.clock()

        saved = dict(entry or {})
        saved.setdefault("id", uuid.uuid4().hex)
        saved.setdefault("createdAt", now.isoformat())
        if user_id:
            saved["userId"] = user_id

        entries = read_json_list(self.store, key)
        entries.append(saved)
        write_json(self.store, key, entries)

        streak = self.streak_engine.update_streak()
        progress = None
        if user_id:
            progress = self.progress_engine.update_therapy_completion(user_id, module_id)

        self.bus.publish(DATA_UPDATED)
        logger.info(f"Recorded {module_id} activity ({len(entries)} entries in '{key}')")
        return ActivityResult(entry=saved, streak=streak, progress=progress)

    def get_activity_entries(self, module_id: str, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        entries = [e for e in read_json_list(self.store, activity_key(module_id)) if isinstance(e, dict)]
        if user_id is None:
            return entries
        return [e for e in entries if e.get("userId") == user_id]
