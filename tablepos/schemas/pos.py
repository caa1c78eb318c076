from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from tablepos.fsm.states import OrderStatus, TableStatus


class DishOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: str
    price: int
    is_available: bool
    options: List[str] = Field(default_factory=list)
    allow_custom_notes: bool = False
    image_url: Optional[str] = None


class TableOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    capacity: int
    qr_code: str
    status: TableStatus


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    dish_id: str
    name: str
    price: int
    quantity: int
    selected_option: Optional[str] = None
    custom_note: Optional[str] = None
    is_served: bool = False


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    table_id: str
    table_name: str
    random_code: str
    status: OrderStatus
    items: List[OrderItemOut] = Field(default_factory=list, validation_alias=AliasChoices("items", "order_items"))
    service_fee: int
    total_amount: int
    created_at: datetime
    submitted_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    version: Optional[int] = None


class SystemConfigOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    restaurant_name: str
    is_gps_enabled: bool
    gps_radius_m: float
    center_lat: float
    center_lng: float
    is_service_fee_enabled: bool
    service_fee_rate: float


class StateSnapshot(BaseModel):
    tables: List[TableOut] = Field(default_factory=list)
    orders: List[OrderOut] = Field(default_factory=list)
    dishes: List[DishOut] = Field(default_factory=list)
    config: Optional[SystemConfigOut] = None
