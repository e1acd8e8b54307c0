from sqlmodel import SQLModel, Field



class ReviewCreate(SQLModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    rating: float = Field(ge=1, le=5)
    parent_id: int

class ReviewUpdate(ReviewCreate):
    pass
