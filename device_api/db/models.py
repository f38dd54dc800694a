"""SQLAlchemy ORM models."""
from sqlalchemy import Column, Date, Index, Integer, String

from device_api.infrastructure.database.base import Base


class Device(Base):
    __tablename__ = "devices"
    __table_args__ = (
        # Lookup index for the creation-time duplicate check, not a constraint.
        Index("ix_devices_name_brand", "name", "brand"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    brand = Column(String(100), nullable=False, index=True)
    state = Column(String(20), nullable=False, index=True)
    creation_time = Column(Date, nullable=False)
