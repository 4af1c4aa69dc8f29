"""Home device API routes — the authenticated user's devices, costs and recommendations."""

from fastapi import APIRouter, Depends, status

from smartwatt.application.services import home_device_service
from smartwatt.core.pagination import PageParams, get_page_params
from smartwatt.core.responses import api_response
from smartwatt.domain.models.user import User
from smartwatt.domain.schemas.device import HomeDeviceCreate, HomeDeviceFilter, HomeDeviceRead, HomeDeviceUpdate
from smartwatt.infrastructure.repositories.device_repository import (
    SQLAlchemyHomeDeviceRepository,
    SQLAlchemySystemDeviceRepository,
)
from smartwatt.infrastructure.repositories.user_repository import SQLAlchemyUserRepository
from smartwatt.interfaces.api.deps import get_current_user
from smartwatt.interfaces.deps import (
    get_cost_per_kwh,
    get_home_device_filter,
    get_home_device_repository,
    get_system_device_repository,
    get_user_repository,
)

router = APIRouter(prefix="/api/home-devices", tags=["Home Devices"])


# Fixed paths are registered before "/{home_device_id}" so they are not shadowed.
@router.get("/calculate-cost")
def calculate_cost(
    cost_per_kwh: float = Depends(get_cost_per_kwh),
    repo: SQLAlchemyHomeDeviceRepository = Depends(get_home_device_repository),
    user: User = Depends(get_current_user),
):
    return api_response(
        "Device costs calculated successfully",
        home_device_service.calculate_costs(repo, user, cost_per_kwh),
    )


@router.get("/recommendations")
def recommendations(
    cost_per_kwh: float = Depends(get_cost_per_kwh),
    catalog: SQLAlchemySystemDeviceRepository = Depends(get_system_device_repository),
    user: User = Depends(get_current_user),
):
    return api_response(
        "Recommended devices retrieved successfully",
        home_device_service.recommend_devices(catalog, user, cost_per_kwh),
    )


@router.get("")
def list_home_devices(
    params: PageParams = Depends(get_page_params),
    filters: HomeDeviceFilter = Depends(get_home_device_filter),
    repo: SQLAlchemyHomeDeviceRepository = Depends(get_home_device_repository),
    user: User = Depends(get_current_user),
):
    return api_response(
        "User home devices retrieved successfully",
        home_device_service.list_home_devices(repo, user, params, filters),
    )


@router.post("/{system_device_id}")
def add_home_device(
    system_device_id: int,
    body: HomeDeviceCreate,
    repo: SQLAlchemyHomeDeviceRepository = Depends(get_home_device_repository),
    catalog: SQLAlchemySystemDeviceRepository = Depends(get_system_device_repository),
    users: SQLAlchemyUserRepository = Depends(get_user_repository),
    user: User = Depends(get_current_user),
):
    home_device = home_device_service.add_home_device(repo, catalog, users, user, system_device_id, body)
    return api_response(
        "Home device added to user",
        HomeDeviceRead.model_validate(home_device).to_json(),
        status.HTTP_201_CREATED,
    )


@router.get("/{home_device_id}")
def get_home_device(
    home_device_id: int,
    repo: SQLAlchemyHomeDeviceRepository = Depends(get_home_device_repository),
    user: User = Depends(get_current_user),
):
    home_device = home_device_service.get_home_device(repo, user, home_device_id)
    return api_response("User home device retrieved successfully", HomeDeviceRead.model_validate(home_device).to_json())


@router.put("/{home_device_id}")
def update_home_device(
    home_device_id: int,
    body: HomeDeviceUpdate,
    repo: SQLAlchemyHomeDeviceRepository = Depends(get_home_device_repository),
    catalog: SQLAlchemySystemDeviceRepository = Depends(get_system_device_repository),
    users: SQLAlchemyUserRepository = Depends(get_user_repository),
    user: User = Depends(get_current_user),
):
    home_device = home_device_service.update_home_device(repo, catalog, users, user, home_device_id, body)
    return api_response("User home device updated successfully", HomeDeviceRead.model_validate(home_device).to_json())


@router.delete("/{home_device_id}")
def delete_home_device(
    home_device_id: int,
    repo: SQLAlchemyHomeDeviceRepository = Depends(get_home_device_repository),
    catalog: SQLAlchemySystemDeviceRepository = Depends(get_system_device_repository),
    users: SQLAlchemyUserRepository = Depends(get_user_repository),
    user: User = Depends(get_current_user),
):
    home_device_service.delete_home_device(repo, catalog, users, user, home_device_id)
    return api_response("User home device deleted successfully")
