# streak router: read the streak or log an activity against it

from fastapi import APIRouter, Depends

from mindcare.dependencies import Services, get_services
from mindcare.models.streak import StreakRecord

router = APIRouter(prefix="/streak", tags=["streak"])


@router.get("", response_model=StreakRecord)
async def get_streak(services: Services = Depends(get_services)):
    return services.streak.get_streak_data()


@router.post("", response_model=StreakRecord)
async def update_streak(services: Services = Depends(get_services)):
    """log one activity for today"""
    return services.streak.update_streak()
