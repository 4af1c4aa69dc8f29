"""Device catalog service — admin CRUD over catalog entries and their images."""

import json
from typing import Optional

import structlog
from fastapi import UploadFile

from smartwatt.application.services import budget_ledger
from smartwatt.core.exceptions import ConflictException, EntityNotFoundException, ValidationException
from smartwatt.core.pagination import PageParams, paginate
from smartwatt.domain.energy import ALL_DAY_HOURS
from smartwatt.domain.models.system_device import SystemDevice
from smartwatt.domain.schemas.device import SystemDeviceRead
from smartwatt.infrastructure.repositories.device_repository import SQLAlchemySystemDeviceRepository
from smartwatt.infrastructure.repositories.user_repository import SQLAlchemyUserRepository
from smartwatt.infrastructure.storage import ImageStorage

logger = structlog.get_logger(__name__)


def parse_watts_options(raw: str) -> list[int]:
    """Accept a JSON array ("[100, 150]") or a comma-separated list ("100,150")."""
    text = (raw or "").strip()
    if not text:
        raise ValidationException("wattsOptions is required")
    try:
        values = json.loads(text) if text.startswith("[") else text.split(",")
    except json.JSONDecodeError:
        raise ValidationException("wattsOptions must be a list of integers")
    if not isinstance(values, list):
        raise ValidationException("wattsOptions must be a list of integers")

    options: list[int] = []
    for value in values:
        try:
            watts = int(str(value).strip())
        except ValueError:
            raise ValidationException("wattsOptions must be a list of integers")
        if watts <= 0:
            raise ValidationException("wattsOptions must be positive")
        if watts not in options:
            options.append(watts)
    if not options:
        raise ValidationException("wattsOptions is required")
    return options


def _clean_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationException("name is required")
    return name


def list_devices(repo: SQLAlchemySystemDeviceRepository, params: PageParams) -> dict:
    devices = repo.list(skip=params.offset, limit=params.limit)
    items = [SystemDeviceRead.model_validate(d).to_json() for d in devices]
    return paginate(items, repo.count(), params)


def get_device(repo: SQLAlchemySystemDeviceRepository, device_id: int, lock: bool = False) -> SystemDevice:
    device = repo.get_by_id(device_id, lock=lock)
    if device is None:
        raise EntityNotFoundException("Device not found")
    return device


async def create_device(
    repo: SQLAlchemySystemDeviceRepository,
    storage: ImageStorage,
    name: str,
    watts_options: str,
    device_work_all_day: bool,
    image: Optional[UploadFile],
) -> SystemDevice:
    name = _clean_name(name)
    options = parse_watts_options(watts_options)
    if image is None or not image.filename:
        raise ValidationException("Device image is required")

    stored = await storage.save(image)
    with storage.cleanup_on_error(stored), repo.atomic():
        device = repo.create({
            "name": name,
            "img": stored.url,
            "image_filename": stored.filename,
            "watts_options": options,
            "device_work_all_day": device_work_all_day,
        })
    logger.info("Catalog device created", device_id=device.id, name=name)
    return repo.refresh(device)


def _rebalance_all_day_flag(
    repo: SQLAlchemySystemDeviceRepository,
    users: SQLAlchemyUserRepository,
    device: SystemDevice,
    now_all_day: bool,
) -> None:
    """Move every existing assignment of this device in or out of its owner's ledger.

    Runs with the catalog row locked; the assignments are locked too so a
    concurrent wattage change cannot slip between read and ledger write.
    """
    for assignment in repo.list_assignments(device.id, lock=True):
        delta = budget_ledger.delta_for_create(True, assignment.chosen_watts)
        budget_ledger.apply_delta(users, assignment.user_id, delta if now_all_day else -delta)
        if now_all_day:
            assignment.user_input_work_time = ALL_DAY_HOURS


async def update_device(
    repo: SQLAlchemySystemDeviceRepository,
    users: SQLAlchemyUserRepository,
    storage: ImageStorage,
    device_id: int,
    name: Optional[str] = None,
    watts_options: Optional[str] = None,
    device_work_all_day: Optional[bool] = None,
    image: Optional[UploadFile] = None,
) -> SystemDevice:
    get_device(repo, device_id)

    patch: dict = {}
    if name is not None:
        patch["name"] = _clean_name(name)
    if watts_options is not None:
        patch["watts_options"] = parse_watts_options(watts_options)
    if device_work_all_day is not None:
        patch["device_work_all_day"] = device_work_all_day

    stored = await storage.save(image) if image is not None and image.filename else None
    if stored is not None:
        patch["img"] = stored.url
        patch["image_filename"] = stored.filename

    with storage.cleanup_on_error(stored), repo.atomic():
        device = get_device(repo, device_id, lock=True)
        previous_image = device.image_filename
        if device_work_all_day is not None and device_work_all_day != device.device_work_all_day:
            _rebalance_all_day_flag(repo, users, device, device_work_all_day)
        repo.update(device, patch)

    if stored is not None:
        storage.delete(previous_image)
    logger.info("Catalog device updated", device_id=device_id, fields=sorted(patch))
    return repo.refresh(device)


def delete_device(
    repo: SQLAlchemySystemDeviceRepository,
    storage: ImageStorage,
    device_id: int,
) -> None:
    with repo.atomic():
        # Locked so no assignment can be added between the count and the delete
        device = get_device(repo, device_id, lock=True)
        in_use = repo.count_assignments(device_id)
        if in_use:
            raise ConflictException(
                f"Device is still used by {in_use} home device(s) and cannot be deleted"
            )
        image_filename = device.image_filename
        repo.delete(device)
    storage.delete(image_filename)
    logger.info("Catalog device deleted", device_id=device_id)
