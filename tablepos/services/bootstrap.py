from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from tablepos.core.defaults import DEFAULT_CONFIG, DEFAULT_DISHES, DEFAULT_TABLES
from tablepos.fsm.states import TableStatus
from tablepos.models.dining_table import DiningTable
from tablepos.models.dish import Dish
from tablepos.models.system_config import SYSTEM_CONFIG_ID, SystemConfig

logger = logging.getLogger(__name__)
BOOTSTRAP_PREFIX = "[BOOTSTRAP]"


def seed_defaults(db: Session) -> dict[str, int]:
    """Fill empty collections with the default menu, tables and settings.

    Collections that already hold rows are left alone, so staff edits
    survive restarts.
    """
    created = {"dishes": 0, "tables": 0, "config": 0}

    if db.query(Dish).count() == 0:
        for payload in DEFAULT_DISHES:
            db.add(Dish(**payload))
        created["dishes"] = len(DEFAULT_DISHES)

    if db.query(DiningTable).count() == 0:
        for payload in DEFAULT_TABLES:
            db.add(DiningTable(status=TableStatus.IDLE.value, **payload))
        created["tables"] = len(DEFAULT_TABLES)

    if db.query(SystemConfig).filter(SystemConfig.id == SYSTEM_CONFIG_ID).first() is None:
        db.add(SystemConfig(id=SYSTEM_CONFIG_ID, **DEFAULT_CONFIG))
        created["config"] = 1

    db.flush()
    logger.info(
        "%s seeded dishes=%s tables=%s config=%s",
        BOOTSTRAP_PREFIX,
        created["dishes"],
        created["tables"],
        created["config"],
    )
    return created
