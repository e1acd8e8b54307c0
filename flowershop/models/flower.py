from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Flower(SQLModel, table=True):
    __tablename__ = "flowers"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    price: float
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class BouquetFlower(SQLModel, table=True):
    __tablename__ = "bouquet_flowers"

    id: Optional[int] = Field(default=None, primary_key=True)
    bouquet_id: int = Field(foreign_key="products.id", index=True)
    flower_id: int = Field(foreign_key="flowers.id", index=True)
    quantity: int = 1
