from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from tablepos.core.database import Base


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(String(32), ForeignKey("orders.id"), index=True, nullable=False)

    # Snapshot of the dish at selection time; later menu edits never touch it
    dish_id = Column(String(64), nullable=False)
    name = Column(String, nullable=False)
    price = Column(Integer, nullable=False, default=0)

    quantity = Column(Integer, nullable=False, default=1)
    selected_option = Column(String, nullable=True)
    custom_note = Column(Text, nullable=True)
    is_served = Column(Boolean, nullable=False, default=False)

    order = relationship("Order", back_populates="order_items")
