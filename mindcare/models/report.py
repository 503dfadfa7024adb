# report models: therapist progress reports and the bookings they come from
# bookings are written by the booking flow; this package only reads them

from typing import Optional
from pydantic import BaseModel, Field

from mindcare.models.progress import PatientTherapyProgress, TherapyModule


class Booking(BaseModel):
    """a session booking linking a patient to a therapist"""
    patient_id: str = Field(..., alias="patientId")
    therapist_id: Optional[str] = Field(None, alias="therapistId")
    therapist_name: Optional[str] = Field(None, alias="therapistName")
    patient_name: Optional[str] = Field(None, alias="patientName")
    date: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")

    model_config = {"populate_by_name": True, "extra": "allow"}


class ModuleBreakdown(BaseModel):
    name: str
    completed: int
    total: int
    progress: int
    last_completed: Optional[str] = Field(None, alias="lastCompleted")

    model_config = {"populate_by_name": True}


class ProgressSummary(BaseModel):
    """snapshot of a patient's progress at report time"""
    total_completed_sessions: int = Field(0, alias="totalCompletedSessions")
    overall_progress: int = Field(0, alias="overallProgress")
    streak_days: int = Field(0, alias="streakDays")
    module_breakdown: list[ModuleBreakdown] = Field(default_factory=list, alias="moduleBreakdown")
    recent_activity: list[TherapyModule] = Field(default_factory=list, alias="recentActivity")

    model_config = {"populate_by_name": True}


class TherapistProgressReport(BaseModel):
    id: str
    patient_id: str = Field(..., alias="patientId")
    patient_name: Optional[str] = Field(None, alias="patientName")
    therapist_id: Optional[str] = Field(None, alias="therapistId")
    timestamp: str
    summary: ProgressSummary

    model_config = {"populate_by_name": True}


class TherapistPatient(BaseModel):
    """a patient on a therapist's list, with their latest progress if any"""
    patient_id: str = Field(..., alias="patientId")
    patient_name: Optional[str] = Field(None, alias="patientName")
    last_booking_date: Optional[str] = Field(None, alias="lastBookingDate")
    progress: Optional[PatientTherapyProgress] = None

    model_config = {"populate_by_name": True}
