# activities router: save a module activity and list a module's entries
# saving runs the full flow: log entry, streak, progress, data-updated event

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from mindcare.catalog import ACTIVITY_KEYS, THERAPY_MODULES
from mindcare.dependencies import Services, get_services
from mindcare.services.activity import ActivityResult

logger = logging.getLogger(__name__)
router = APIRouter(tags=["activities"])


def _require_module(module_id: str):
    if module_id not in ACTIVITY_KEYS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown therapy module '{module_id}'",
        )


@router.get("/modules")
async def list_modules():
    """the fixed therapy module catalog"""
    return [
        {"id": m["id"], "name": m["name"], "category": m["category"], "totalSessions": m["total_sessions"]}
        for m in THERAPY_MODULES
    ]


@router.post(
    "/activities/{module_id}",
    response_model=ActivityResult,
    status_code=status.HTTP_201_CREATED,
)
async def record_activity(
    module_id: str,
    entry: Optional[dict[str, Any]] = Body(None),
    user_id: Optional[str] = Query(None, alias="userId"),
    services: Services = Depends(get_services),
):
    _require_module(module_id)
    return services.activities.record_activity(module_id, entry, user_id=user_id)


@router.get("/activities/{module_id}")
async def list_activities(
    module_id: str,
    user_id: Optional[str] = Query(None, alias="userId"),
    services: Services = Depends(get_services),
):
    _require_module(module_id)
    return services.activities.get_activity_entries(module_id, user_id=user_id)
