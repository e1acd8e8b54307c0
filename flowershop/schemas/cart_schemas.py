from sqlmodel import SQLModel, Field

class CartAddRequest(SQLModel):
    product_id: int
    quantity: int = Field(default=1, gt=0)

class CartUpdateRequest(SQLModel):
    # zero or negative removes the item
    quantity: int
