# progress router: per-patient therapy progress, module stats, analytics
# reads lazily initialize the record, like the progress page did

import logging
from fastapi import APIRouter, Depends

from mindcare.analytics.progress_analytics import compute_progress_analytics
from mindcare.catalog import ACTIVITY_KEYS
from mindcare.dependencies import Services, get_services
from mindcare.models.progress import ModuleCompletionStats, PatientTherapyProgress

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("", response_model=dict[str, PatientTherapyProgress])
async def list_all_progress(services: Services = Depends(get_services)):
    """the all-patient-progress index, keyed by user id"""
    return services.progress.get_all_patient_progress()


@router.get("/{user_id}", response_model=PatientTherapyProgress)
async def get_progress(user_id: str, services: Services = Depends(get_services)):
    return services.progress.get_patient_progress(user_id)


@router.post("/{user_id}/modules/{module_id}/complete", response_model=PatientTherapyProgress)
async def complete_module_session(user_id: str, module_id: str, services: Services = Depends(get_services)):
    """count one session. unknown or capped modules return the record unchanged"""
    return services.progress.update_therapy_completion(user_id, module_id)


@router.get("/{user_id}/modules/{module_id}/stats", response_model=ModuleCompletionStats)
async def get_module_stats(user_id: str, module_id: str, services: Services = Depends(get_services)):
    return services.progress.get_module_completion_stats(user_id, module_id)


@router.get("/{user_id}/analytics")
async def get_progress_analytics(user_id: str, services: Services = Depends(get_services)):
    """category breakdown, module rows and daily activity for one patient"""
    progress = services.progress.get_patient_progress(user_id)
    entries = []
    for module_id in ACTIVITY_KEYS:
        entries.extend(services.activities.get_activity_entries(module_id, user_id=user_id))
    return compute_progress_analytics(progress, entries)
