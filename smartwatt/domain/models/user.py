"""User domain model — maps to the 'users' table."""

from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from smartwatt.infrastructure.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    user_name = Column(String(200), nullable=False)
    password_hash = Column(String(255), nullable=False)

    # Monthly cap set by the user
    budget = Column(Float, nullable=False, default=0)
    # Committed cost and wattage of all-day devices, maintained by the ledger
    min_budget = Column(Float, nullable=False, default=0)
    total_wattage = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    home_devices = relationship(
        "UserHomeDevice",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<User {self.email}>"
