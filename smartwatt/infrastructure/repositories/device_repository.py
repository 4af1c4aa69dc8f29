"""SQLAlchemy repositories for the device catalog and user home devices."""

from typing import List, Optional

from sqlalchemy.orm import Query

from smartwatt.domain.models.home_device import UserHomeDevice
from smartwatt.domain.models.system_device import SystemDevice
from smartwatt.domain.schemas.device import HomeDeviceFilter
from smartwatt.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemySystemDeviceRepository(SQLAlchemyRepository[SystemDevice]):
    model = SystemDevice

    def list(self, skip: int = 0, limit: int = 100) -> List[SystemDevice]:
        return (
            self.db.query(SystemDevice)
            .order_by(SystemDevice.created_at.desc(), SystemDevice.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def list_all(self) -> List[SystemDevice]:
        return self.db.query(SystemDevice).order_by(SystemDevice.id.asc()).all()

    def list_assignments(self, device_id: int, lock: bool = False) -> List[UserHomeDevice]:
        query = self.db.query(UserHomeDevice).filter(UserHomeDevice.system_device_id == device_id)
        if lock:
            query = query.with_for_update(of=UserHomeDevice).populate_existing()
        return query.order_by(UserHomeDevice.id.asc()).all()

    def count_assignments(self, device_id: int) -> int:
        return (
            self.db.query(UserHomeDevice)
            .filter(UserHomeDevice.system_device_id == device_id)
            .count()
        )


class SQLAlchemyHomeDeviceRepository(SQLAlchemyRepository[UserHomeDevice]):
    model = UserHomeDevice

    def _user_query(self, user_id: int, filters: Optional[HomeDeviceFilter] = None) -> Query:
        query = self.db.query(UserHomeDevice).filter(UserHomeDevice.user_id == user_id)
        if filters is None:
            return query
        if filters.device_name:
            query = query.join(UserHomeDevice.system_device).filter(
                SystemDevice.name.ilike(f"%{filters.device_name}%")
            )
        if filters.min_watts is not None:
            query = query.filter(UserHomeDevice.chosen_watts >= filters.min_watts)
        if filters.max_watts is not None:
            query = query.filter(UserHomeDevice.chosen_watts <= filters.max_watts)
        return query

    def get_for_user(self, id: int, user_id: int, lock: bool = False) -> Optional[UserHomeDevice]:
        query = self._user_query(user_id).filter(UserHomeDevice.id == id)
        if lock:
            # joined system_device sits on the outer side of the join; lock only this table
            query = query.with_for_update(of=UserHomeDevice).populate_existing()
        return query.first()

    def list_for_user(
        self,
        user_id: int,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[HomeDeviceFilter] = None,
    ) -> List[UserHomeDevice]:
        return (
            self._user_query(user_id, filters)
            .order_by(UserHomeDevice.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_for_user(self, user_id: int, filters: Optional[HomeDeviceFilter] = None) -> int:
        return self._user_query(user_id, filters).count()

    def all_for_user(self, user_id: int) -> List[UserHomeDevice]:
        return self._user_query(user_id).order_by(UserHomeDevice.id.asc()).all()
