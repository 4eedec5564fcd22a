from pydantic import BaseModel, ConfigDict, Field


class MemberCreate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., gt=0, description="Member ID (must be > 0)")
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    contact_phone: str = Field(..., min_length=1)
    email_address: str = Field(..., min_length=1)
