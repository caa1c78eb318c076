# tablepos/deps.py
from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from tablepos.core.database import get_db
from tablepos.models.system_config import SystemConfig
from tablepos.services.catalog import get_config
from tablepos.services.errors import (
    GeofenceBlocked,
    InvalidTransition,
    NotFound,
    OrderingError,
    ValidationFailure,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (GeofenceBlocked, status.HTTP_403_FORBIDDEN),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (InvalidTransition, status.HTTP_409_CONFLICT),
    (ValidationFailure, status.HTTP_400_BAD_REQUEST),
)


def to_http_exception(exc: OrderingError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.to_detail())
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.to_detail())


def commit_or_conflict(db: Session) -> None:
    """Persist the current mutation; a concurrent write on the same order is a 409."""
    try:
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        logger.warning("concurrent update rejected: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "stale_write", "message": "Order changed on another device, reload and retry"},
        ) from exc
    except IntegrityError as exc:
        db.rollback()
        logger.warning("write rejected by a database constraint: %s", exc.orig)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "duplicate", "message": "A record with this id already exists"},
        ) from exc


def get_system_config(db: Session = Depends(get_db)) -> SystemConfig:
    return get_config(db)
