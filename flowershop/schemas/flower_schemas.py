from typing import Optional
from pydantic import BaseModel, Field

class FlowerCreate(BaseModel):
    name: str = Field(min_length=1)
    price: float = Field(ge=0)

class FlowerUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
