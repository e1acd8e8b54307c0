from pydantic import BaseModel, Field
from typing import Optional

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)

class CategoryUpdate(BaseModel):
    name: str = Field(min_length=1)

class SubcategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    category_id: int

class SubcategoryUpdate(BaseModel):
    name: Optional[str] = None
    category_id: Optional[int] = None
