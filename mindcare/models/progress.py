# progress models: per-patient therapy module completion
# mirrors the therapy-progress-<userId> document layout

from typing import Optional
from pydantic import BaseModel, Field


class TherapyModule(BaseModel):
    """one catalog module with its session counter"""
    id: str
    name: str = ""
    category: str = ""
    total_sessions: int = Field(30, ge=0, alias="totalSessions")
    completed_sessions: int = Field(0, ge=0, alias="completedSessions")
    last_completed_date: Optional[str] = Field(None, alias="lastCompletedDate")

    model_config = {"populate_by_name": True}


class PatientTherapyProgress(BaseModel):
    """aggregate of all module completion state for one patient"""
    user_id: str = Field(..., alias="userId")
    modules: list[TherapyModule] = Field(default_factory=list)
    total_completed_sessions: int = Field(0, ge=0, alias="totalCompletedSessions")
    overall_progress: int = Field(0, ge=0, le=100, alias="overallProgress")
    last_updated: str = Field("", alias="lastUpdated")
    streak_days: int = Field(0, ge=0, alias="streakDays")

    model_config = {"populate_by_name": True}

    def find_module(self, module_id: str) -> Optional[TherapyModule]:
        for module in self.modules:
            if module.id == module_id:
                return module
        return None


class ModuleCompletionStats(BaseModel):
    completed: int
    total: int
    percentage: int
