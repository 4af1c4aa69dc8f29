"""Admin domain model — maps to the 'admins' table."""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from smartwatt.infrastructure.database import Base


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Admin {self.email}>"
