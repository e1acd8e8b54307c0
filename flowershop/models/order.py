from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import date, datetime

from flowershop.constants.order_status import OrderStatus, PaymentStatus
from flowershop.models.order_item import OrderItem


class Order(SQLModel, table=True):
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    order_number: str = Field(index=True, unique=True)

    total_price: float

    delivery_address: str
    delivery_date: Optional[date] = None
    delivery_time: Optional[str] = None

    status: str = Field(default=OrderStatus.pending.value, index=True)
    payment_method: Optional[str] = None
    payment_status: str = Field(default=PaymentStatus.pending.value)
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    items: List["OrderItem"] = Relationship(back_populates="order")
