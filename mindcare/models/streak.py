# streak models: daily activity streak record
# stored under the streak-data key with camelCase field names

from pydantic import BaseModel, Field


class StreakRecord(BaseModel):
    """consecutive-day activity streak for the local user"""
    current_streak: int = Field(0, ge=0, alias="currentStreak")
    last_activity_date: str = Field("", alias="lastActivityDate")
    longest_streak: int = Field(0, ge=0, alias="longestStreak")
    total_activities: int = Field(0, ge=0, alias="totalActivities")

    model_config = {"populate_by_name": True}
