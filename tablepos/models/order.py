from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from tablepos.core.database import Base
from tablepos.fsm.states import OrderStatus
from tablepos.models._time import utcnow


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True)

    # No foreign key: tables can be deleted while their orders stay as history
    table_id = Column(String(64), index=True, nullable=False)
    table_name = Column(String, nullable=False, default="")
    random_code = Column(String(4), index=True, nullable=False)

    status = Column(String, nullable=False, default=OrderStatus.ORDERING.value)

    # Cached from the lines by services.cart.refresh_totals
    service_fee = Column(Integer, nullable=False, default=0)
    total_amount = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    version = Column(Integer, nullable=False)

    order_items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    __mapper_args__ = {"version_id_col": version}
