"""Device catalog API routes — public reads, admin-only writes."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from smartwatt.application.services import system_device_service
from smartwatt.core.pagination import PageParams, get_page_params
from smartwatt.core.responses import api_response
from smartwatt.domain.models.admin import Admin
from smartwatt.domain.schemas.device import SystemDeviceRead
from smartwatt.infrastructure.repositories.device_repository import SQLAlchemySystemDeviceRepository
from smartwatt.infrastructure.repositories.user_repository import SQLAlchemyUserRepository
from smartwatt.infrastructure.storage import ImageStorage
from smartwatt.interfaces.api.deps import require_admin
from smartwatt.interfaces.deps import get_storage, get_system_device_repository, get_user_repository

router = APIRouter(prefix="/api/system-devices", tags=["System Devices"])


@router.get("")
def list_system_devices(
    params: PageParams = Depends(get_page_params),
    repo: SQLAlchemySystemDeviceRepository = Depends(get_system_device_repository),
):
    return api_response(
        "System devices retrieved successfully",
        system_device_service.list_devices(repo, params),
    )


@router.get("/{device_id}")
def get_system_device(
    device_id: int,
    repo: SQLAlchemySystemDeviceRepository = Depends(get_system_device_repository),
):
    device = system_device_service.get_device(repo, device_id)
    return api_response("System device retrieved successfully", SystemDeviceRead.model_validate(device).to_json())


@router.post("")
async def create_system_device(
    name: str = Form(...),
    watts_options: str = Form(..., alias="wattsOptions"),
    device_work_all_day: bool = Form(False, alias="deviceWorkAllDay"),
    img: Optional[UploadFile] = File(None),
    repo: SQLAlchemySystemDeviceRepository = Depends(get_system_device_repository),
    storage: ImageStorage = Depends(get_storage),
    admin: Admin = Depends(require_admin),
):
    device = await system_device_service.create_device(
        repo, storage, name, watts_options, device_work_all_day, img
    )
    return api_response(
        "System device created successfully",
        SystemDeviceRead.model_validate(device).to_json(),
        status.HTTP_201_CREATED,
    )


@router.put("/{device_id}")
async def update_system_device(
    device_id: int,
    name: Optional[str] = Form(None),
    watts_options: Optional[str] = Form(None, alias="wattsOptions"),
    device_work_all_day: Optional[bool] = Form(None, alias="deviceWorkAllDay"),
    img: Optional[UploadFile] = File(None),
    repo: SQLAlchemySystemDeviceRepository = Depends(get_system_device_repository),
    users: SQLAlchemyUserRepository = Depends(get_user_repository),
    storage: ImageStorage = Depends(get_storage),
    admin: Admin = Depends(require_admin),
):
    device = await system_device_service.update_device(
        repo,
        users,
        storage,
        device_id,
        name=name,
        watts_options=watts_options,
        device_work_all_day=device_work_all_day,
        image=img,
    )
    return api_response("System device updated successfully", SystemDeviceRead.model_validate(device).to_json())


@router.delete("/{device_id}")
def delete_system_device(
    device_id: int,
    repo: SQLAlchemySystemDeviceRepository = Depends(get_system_device_repository),
    storage: ImageStorage = Depends(get_storage),
    admin: Admin = Depends(require_admin),
):
    system_device_service.delete_device(repo, storage, device_id)
    return api_response("System device deleted successfully")
