from sqlalchemy import Column, LargeBinary
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class File(SQLModel, table=True):
    __tablename__ = "files"

    id: Optional[int] = Field(default=None, primary_key=True)
    filename: str
    mimetype: str
    data: bytes = Field(sa_column=Column(LargeBinary, nullable=False))
    parent_id: Optional[int] = Field(default=None, index=True)
    parent_type: Optional[str] = Field(default=None, index=True)  # "product", "review"
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
