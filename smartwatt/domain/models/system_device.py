"""Device catalog entry — maps to the 'system_devices' table."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON
from sqlalchemy.sql import func

from smartwatt.infrastructure.database import Base


class SystemDevice(Base):
    __tablename__ = "system_devices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    img = Column(String(500), nullable=False)  # public URL path
    image_filename = Column(String(255), nullable=False)
    watts_options = Column(JSON, nullable=False, default=list)
    device_work_all_day = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<SystemDevice {self.id} - {self.name}>"
