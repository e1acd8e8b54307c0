from pydantic import BaseModel, Field

class AddressCreate(BaseModel):
    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
