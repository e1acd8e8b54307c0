import datetime as dt
from pydantic import BaseModel, Field

class HolidayCreate(BaseModel):
    name: str = Field(min_length=1)
    date: dt.date
