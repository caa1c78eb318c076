from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tablepos.core.database import get_db
from tablepos.deps import commit_or_conflict, to_http_exception
from tablepos.services.errors import OrderingError
from tablepos.services.snapshot import export_state, import_state

router = APIRouter(prefix="/api/state", tags=["state"])
logger = logging.getLogger(__name__)


@router.get("")
def get_state(db: Session = Depends(get_db)):
    return export_state(db)


@router.put("")
def replace_state(payload: Dict[str, Any], db: Session = Depends(get_db)):
    try:
        counts = import_state(db, payload)
    except ValidationError as exc:
        db.rollback()
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc
    except OrderingError as exc:
        db.rollback()
        raise to_http_exception(exc) from exc
    except IntegrityError as exc:
        db.rollback()
        logger.warning("snapshot rejected by a database constraint: %s", exc.orig)
        raise HTTPException(
            status_code=409,
            detail={"code": "duplicate", "message": "Snapshot conflicts with a database constraint"},
        ) from exc
    commit_or_conflict(db)
    return {"ok": True, **counts}
