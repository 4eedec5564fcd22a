from pydantic import BaseModel, ConfigDict, Field


class BookCreate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., gt=0, description="Book ID (must be > 0)")
    author: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    call_number: str = Field(..., min_length=1, description="Shelf classification code")
