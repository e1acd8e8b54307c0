from typing import List, Optional

from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: float = Field(ge=0)
    subcategory_id: Optional[int] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    subcategory_id: Optional[int] = None


class BouquetFlowerIn(BaseModel):
    flower_id: int
    quantity: int = Field(default=1, gt=0)


class BouquetCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    subcategory_id: Optional[int] = None
    # derived from the flowers when omitted
    price: Optional[float] = Field(default=None, gt=0)
    flowers: List[BouquetFlowerIn] = Field(min_length=1)


class BouquetUpdate(BouquetCreate):
    pass
