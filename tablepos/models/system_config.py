from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, func

from tablepos.core.database import Base

SYSTEM_CONFIG_ID = 1


class SystemConfig(Base):
    __tablename__ = "system_config"

    id = Column(Integer, primary_key=True, default=SYSTEM_CONFIG_ID)
    restaurant_name = Column(String, nullable=False, default="")

    is_gps_enabled = Column(Boolean, nullable=False, default=False)
    gps_radius_m = Column(Float, nullable=False, default=100.0)
    center_lat = Column(Float, nullable=False, default=0.0)
    center_lng = Column(Float, nullable=False, default=0.0)

    is_service_fee_enabled = Column(Boolean, nullable=False, default=False)
    service_fee_rate = Column(Float, nullable=False, default=0.0)

    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
