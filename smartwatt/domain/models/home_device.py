"""A user's chosen catalog device — maps to the 'user_home_devices' table."""

from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from smartwatt.domain.energy import ALL_DAY_HOURS
from smartwatt.infrastructure.database import Base


class UserHomeDevice(Base):
    __tablename__ = "user_home_devices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    system_device_id = Column(
        Integer, ForeignKey("system_devices.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    chosen_watts = Column(Integer, nullable=False)
    user_input_work_time = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="home_devices")
    system_device = relationship("SystemDevice", lazy="joined")

    @property
    def is_all_day(self) -> bool:
        return bool(self.system_device and self.system_device.device_work_all_day)

    @property
    def hours_per_day(self) -> float:
        return ALL_DAY_HOURS if self.is_all_day else (self.user_input_work_time or 0)

    def __repr__(self):
        return f"<UserHomeDevice {self.id} user={self.user_id} device={self.system_device_id}>"
