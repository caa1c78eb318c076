from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from tablepos.core.database import get_db
from tablepos.deps import commit_or_conflict, get_system_config, to_http_exception
from tablepos.models.system_config import SystemConfig
from tablepos.schemas.pos import SystemConfigOut
from tablepos.services import catalog
from tablepos.services.errors import OrderingError

router = APIRouter(prefix="/api/settings", tags=["settings"])


class SettingsUpdate(BaseModel):
    restaurant_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    is_gps_enabled: Optional[bool] = None
    gps_radius_m: Optional[float] = Field(default=None, gt=0)
    center_lat: Optional[float] = Field(default=None, ge=-90, le=90)
    center_lng: Optional[float] = Field(default=None, ge=-180, le=180)
    is_service_fee_enabled: Optional[bool] = None
    service_fee_rate: Optional[float] = Field(default=None, ge=0, le=1)


@router.get("", response_model=SystemConfigOut)
def get_settings(config: SystemConfig = Depends(get_system_config)):
    return config


@router.put("", response_model=SystemConfigOut)
def update_settings(body: SettingsUpdate, db: Session = Depends(get_db)):
    try:
        config = catalog.update_config(db, body.model_dump(exclude_unset=True))
    except OrderingError as exc:
        raise to_http_exception(exc) from exc
    commit_or_conflict(db)
    db.refresh(config)
    return config
