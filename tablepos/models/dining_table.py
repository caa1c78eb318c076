from sqlalchemy import Column, DateTime, Integer, String

from tablepos.core.database import Base
from tablepos.fsm.states import TableStatus
from tablepos.models._time import utcnow


class DiningTable(Base):
    __tablename__ = "dining_tables"

    id = Column(String(64), primary_key=True)
    name = Column(String, nullable=False)
    capacity = Column(Integer, nullable=False, default=4)
    qr_code = Column(String, nullable=False, default="")

    # Staff-controlled flag, reconciled against orders by the table state resolver
    status = Column(String, nullable=False, default=TableStatus.IDLE.value)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
