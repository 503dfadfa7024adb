# streak engine: consecutive-day activity streak from the streak-data record
# called once per completed activity, regardless of module or user

import logging
from typing import Optional

from pydantic import ValidationError

from mindcare.catalog import STREAK_KEY
from mindcare.models.streak import StreakRecord
from mindcare.services.clock import Clock, days_between, local_now, parse_day
from mindcare.services.store import KeyValueStore, read_json, write_json

logger = logging.getLogger(__name__)


class StreakEngine:

    def __init__(self, store: KeyValueStore, clock: Clock = local_now):
        self.store = store
        self.clock = clock

    def _load(self) -> Optional[StreakRecord]:
        doc = read_json(self.store, STREAK_KEY)
        if doc is None:
            return None
        try:
            return StreakRecord.model_validate(doc)
        except ValidationError as e:
            logger.warning(f"Discarding invalid streak record: {e}")
            return None

    def get_streak_data(self) -> StreakRecord:
        """current streak record, zeroed when nothing has been logged yet"""
        return self._load() or StreakRecord()

    def update_streak(self) -> StreakRecord:
        """record one activity for today and advance or reset the streak.

        same day keeps the streak, the next day extends it, any other
        difference (a gap, or a stored date ahead of today) restarts it at 1.
        totalActivities always goes up by one.
        """
        today = self.clock().date()
        existing = self._load()
        last_day = parse_day(existing.last_activity_date) if existing else None

        if existing is None or last_day is None:
            record = StreakRecord(
                currentStreak=1,
                lastActivityDate=today.isoformat(),
                longestStreak=max(1, existing.longest_streak if existing else 0),
                totalActivities=(existing.total_activities if existing else 0) + 1,
            )
        else:
            days_diff = days_between(last_day, today)
            if days_diff == 0:
                record = existing.model_copy(update={"total_activities": existing.total_activities + 1})
            elif days_diff == 1:
                new_streak = existing.current_streak + 1
                record = StreakRecord(
                    currentStreak=new_streak,
                    lastActivityDate=today.isoformat(),
                    longestStreak=max(existing.longest_streak, new_streak),
                    totalActivities=existing.total_activities + 1,
                )
            else:
                if days_diff < 0:
                    logger.warning(
                        f"Stored activity date {last_day} is ahead of today ({today}); restarting streak"
                    )
                record = StreakRecord(
                    currentStreak=1,
                    lastActivityDate=today.isoformat(),
                    longestStreak=max(existing.longest_streak, 1),
                    totalActivities=existing.total_activities + 1,
                )

        write_json(self.store, STREAK_KEY, record.model_dump(by_alias=True))
        logger.debug(
            f"Streak updated: current={record.current_streak} longest={record.longest_streak} "
            f"total={record.total_activities}"
        )
        return record
