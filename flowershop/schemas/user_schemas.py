import re
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator

PHONE_RE = re.compile(r"\+?[0-9]{10,15}")


class UserRegister(BaseModel):
    name: str = Field(min_length=1)
    phone_number: str
    password: str = Field(min_length=1)
    birth_date: Optional[date] = None

    @field_validator("phone_number")
    @classmethod
    def valid_phone(cls, value: str) -> str:
        if not PHONE_RE.fullmatch(value):
            raise ValueError("Invalid phone number format")
        return value


class UserLogin(BaseModel):
    phone_number: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserUpdate(BaseModel):
    name: str = Field(min_length=1)
    birth_date: Optional[date] = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(min_length=1)


class RoleUpdate(BaseModel):
    role: str = Field(pattern="^(user|admin)$")


class UserPublic(BaseModel):
    id: int
    name: str
    phone_number: str
    birth_date: Optional[date] = None
    role: str
