from enum import Enum
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class ProductType(str, Enum):
    normal = "normal"
    bouquet = "bouquet"


class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: Optional[str] = None
    price: float = 0.0
    type: str = Field(default=ProductType.normal.value, index=True)
    subcategory_id: Optional[int] = Field(default=None, foreign_key="subcategories.id", index=True)

    # denormalized aggregates
    rating: float = 0.0
    purchases_count: int = 0

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_bouquet(self) -> bool:
        return self.type == ProductType.bouquet.value
