"""SQLAlchemy repositories for users and admins."""

from typing import Optional

from sqlalchemy import update

from smartwatt.domain.models.admin import Admin
from smartwatt.domain.models.user import User
from smartwatt.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository[User]):
    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(User.id).filter(User.email == email)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    def apply_ledger_delta(self, user_id: int, watts_delta: int, cost_delta: float) -> None:
        """Shift the all-day aggregates by a relative amount inside the database."""
        self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                min_budget=User.min_budget + cost_delta,
                total_wattage=User.total_wattage + watts_delta,
            )
            .execution_options(synchronize_session=False)
        )


class SQLAlchemyAdminRepository(SQLAlchemyRepository[Admin]):
    model = Admin

    def get_by_email(self, email: str) -> Optional[Admin]:
        return self.db.query(Admin).filter(Admin.email == email).first()
