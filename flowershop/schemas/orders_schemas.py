from datetime import date
from typing import Optional

from pydantic import BaseModel, field_validator

DEFAULT_PAYMENT_METHOD = "cash"


class OrderCreate(BaseModel):
    delivery_address: str
    delivery_date: Optional[date] = None
    delivery_time: Optional[str] = None
    payment_method: Optional[str] = DEFAULT_PAYMENT_METHOD
    notes: Optional[str] = None

    @field_validator("delivery_address")
    @classmethod
    def address_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("delivery_address is required")
        return value

    @field_validator("delivery_date")
    @classmethod
    def date_not_in_past(cls, value: Optional[date]) -> Optional[date]:
        if value is not None and value < date.today():
            raise ValueError("delivery_date cannot be in the past")
        return value

    @field_validator("payment_method")
    @classmethod
    def default_payment_method(cls, value: Optional[str]) -> str:
        return value or DEFAULT_PAYMENT_METHOD


# status values are checked in the service so the error can name the allow-list
class OrderStatusUpdate(BaseModel):
    status: str


class PaymentStatusUpdate(BaseModel):
    payment_status: str

