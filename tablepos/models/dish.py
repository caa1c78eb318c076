import sqlalchemy as sa
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from tablepos.core.database import Base
from tablepos.models._time import utcnow


class Dish(Base):
    __tablename__ = "dishes"

    id = Column(String(64), primary_key=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    price = Column(Integer, nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)

    # Mutually exclusive choices such as size or temperature
    options = Column(sa.JSON(), nullable=False, default=list)
    allow_custom_notes = Column(Boolean, nullable=False, default=False)
    image_url = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
