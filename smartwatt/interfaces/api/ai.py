"""AI API routes — model-backed recommendations and device tips."""

from typing import Optional

from fastapi import APIRouter, Depends

from smartwatt.ai.advisor import EnergyAdvisor
from smartwatt.application.services import recommendation_service
from smartwatt.core.responses import api_response
from smartwatt.domain.models.user import User
from smartwatt.infrastructure.repositories.device_repository import (
    SQLAlchemyHomeDeviceRepository,
    SQLAlchemySystemDeviceRepository,
)
from smartwatt.interfaces.api.deps import get_current_user
from smartwatt.interfaces.deps import (
    get_cost_per_kwh,
    get_energy_advisor,
    get_home_device_repository,
    get_system_device_repository,
)

router = APIRouter(prefix="/api/ai", tags=["AI"])


@router.get("/recommendations")
def ai_recommendations(
    cost_per_kwh: float = Depends(get_cost_per_kwh),
    catalog: SQLAlchemySystemDeviceRepository = Depends(get_system_device_repository),
    home_devices: SQLAlchemyHomeDeviceRepository = Depends(get_home_device_repository),
    advisor: Optional[EnergyAdvisor] = Depends(get_energy_advisor),
    user: User = Depends(get_current_user),
):
    result = recommendation_service.get_ai_recommendations(catalog, home_devices, user, advisor, cost_per_kwh)
    return api_response("AI recommendations retrieved successfully", result)


@router.get("/tips/{device_id}")
def device_tips(
    device_id: int,
    catalog: SQLAlchemySystemDeviceRepository = Depends(get_system_device_repository),
    advisor: Optional[EnergyAdvisor] = Depends(get_energy_advisor),
    user: User = Depends(get_current_user),
):
    result = recommendation_service.get_device_tips(catalog, advisor, device_id)
    return api_response("Device tips retrieved successfully", result)
