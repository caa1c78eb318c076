from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from tablepos.deps import get_system_config
from tablepos.models.system_config import SystemConfig
from tablepos.services.geofence import Position, PositionReport, check_geofence

router = APIRouter(prefix="/api/geofence", tags=["geofence"])


class GeofenceCheckIn(BaseModel):
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)
    error: Optional[str] = Field(default=None, pattern="^(permission_denied|unavailable|timeout)$")


class GeofenceCheckOut(BaseModel):
    enabled: bool
    allowed: bool
    distance_m: Optional[int] = None
    radius_m: float
    reason: Optional[str] = None
    message: Optional[str] = None


@router.post("/check", response_model=GeofenceCheckOut)
def check(body: GeofenceCheckIn, config: SystemConfig = Depends(get_system_config)):
    position = None
    if body.lat is not None and body.lng is not None:
        position = Position(lat=body.lat, lng=body.lng)
    result = check_geofence(config, PositionReport(position=position, error=body.error))
    return GeofenceCheckOut(
        enabled=bool(config.is_gps_enabled),
        allowed=result.allowed,
        distance_m=round(result.distance_m) if result.distance_m is not None else None,
        radius_m=config.gps_radius_m,
        reason=result.reason,
        message=result.message,
    )
