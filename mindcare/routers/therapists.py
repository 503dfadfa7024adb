# therapists router: progress reports and the patient list for a therapist
# therapist ids are whatever bookings carry (therapistId or therapistName)

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from mindcare.dependencies import Services, get_services
from mindcare.models.report import TherapistPatient, TherapistProgressReport
from mindcare.services.patients import get_therapist_patients

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/therapists", tags=["therapists"])


@router.get("/{therapist_id}/reports", response_model=list[TherapistProgressReport])
async def list_reports(
    therapist_id: str,
    patient_id: Optional[str] = Query(None, alias="patientId"),
    limit: int = Query(100, ge=1, le=100),
    services: Services = Depends(get_services),
):
    """newest reports first, optionally for a single patient"""
    reports = services.notifier.get_therapist_progress_reports(therapist_id)
    if patient_id:
        reports = [r for r in reports if r.patient_id == patient_id]
    return list(reversed(reports))[:limit]


@router.get("/{therapist_id}/patients", response_model=list[TherapistPatient])
async def list_patients(therapist_id: str, services: Services = Depends(get_services)):
    return get_therapist_patients(services.progress, therapist_id)
