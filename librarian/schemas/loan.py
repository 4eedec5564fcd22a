from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def as_datetime(value: date | datetime) -> datetime:
    """Treat a plain date as midnight of that day."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, datetime.min.time())


def is_aware(value: date | datetime) -> bool:
    """Whether value carries a UTC offset. Plain dates never do."""
    return isinstance(value, datetime) and value.utcoffset() is not None


class LoanCreate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., gt=0, description="Loan ID (must be > 0)")
    book: Any
    borrower: Any
    borrow_date: datetime | date
    due_date: datetime | date

    @field_validator("book", "borrower")
    @classmethod
    def require_entity(cls, v: Any) -> Any:
        """Books and borrowers must be entities carrying an id."""
        if v is None:
            raise ValueError("cannot be None")
        if not isinstance(getattr(v, "id", None), int):
            raise ValueError("must be an entity with an integer id")
        return v

    @model_validator(mode="after")
    def validate_due_date_not_before_borrow_date(self):
        """Ensure the loan is not due before it starts."""
        if is_aware(self.borrow_date) != is_aware(self.due_date):
            raise ValueError("Borrow date and due date must both be timezone-aware or both naive")
        if as_datetime(self.due_date) < as_datetime(self.borrow_date):
            raise ValueError(
                f"Due date ({self.due_date}) cannot precede borrow date ({self.borrow_date})"
            )
        return self
