from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    phone_number: str = Field(index=True, unique=True)
    password_hash: str
    birth_date: Optional[date] = None
    role: str = Field(default="user")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class UserSession(SQLModel, table=True):
    __tablename__ = "sessions"

    id: str = Field(primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    user_role: str = Field(default="user")
    expires_at: datetime = Field(index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class ActiveUser(SQLModel, table=True):
    __tablename__ = "active_users"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(index=True, unique=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    last_activity: datetime = Field(default_factory=datetime.utcnow, index=True)
