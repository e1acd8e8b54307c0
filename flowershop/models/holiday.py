import datetime as dt
from sqlmodel import SQLModel, Field
from typing import Optional

class Holiday(SQLModel, table=True):
    __tablename__ = "user_holidays"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    name: str
    date: dt.date
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)
    updated_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)
