from __future__ import annotations

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import TYPE_CHECKING

from librarian.core.config import settings
from librarian.errors import DomainValidationError, IllegalStateError
from librarian.schemas.loan import LoanCreate, as_datetime, is_aware
from librarian.schemas.validation import validate_fields

if TYPE_CHECKING:
    from librarian.domain.book import Book
    from librarian.domain.member import Member


class LoanState(Enum):
    PENDING = "PENDING"
    CURRENT = "CURRENT"
    OVERDUE = "OVERDUE"
    COMPLETE = "COMPLETE"


# States in which a committed loan is still out and can be checked or completed.
ACTIVE_STATES = frozenset({LoanState.CURRENT, LoanState.OVERDUE})


def start_of_day(value: date | datetime) -> datetime:
    """Midnight at the start of the value's calendar day."""
    value = as_datetime(value)
    return datetime.combine(value.date(), time.min, tzinfo=value.tzinfo)


def end_of_day(value: date | datetime) -> datetime:
    """The last second of the value's calendar day (23:59:59)."""
    return start_of_day(value) + timedelta(days=1) - timedelta(seconds=1)


def due_date_for(borrow_date: date | datetime, loan_period_days: int | None = None) -> datetime:
    """Due date for a loan starting on borrow_date, using the configured loan period by default."""
    if loan_period_days is None:
        loan_period_days = settings.loan_period_days
    return end_of_day(as_datetime(borrow_date) + timedelta(days=loan_period_days))


class Loan:
    """A single book lent to a single member.

    The borrow date is normalised to the start of its day and the due date to
    the end of its day, so a book due on the 15th may be returned at any time
    on the 15th. Loans start PENDING, become CURRENT on commit, may be flagged
    OVERDUE by check_overdue() and end COMPLETE.
    """

    def __init__(
        self,
        book: Book,
        borrower: Member,
        borrow_date: date | datetime,
        due_date: date | datetime,
        loan_id: int,
    ) -> None:
        fields = validate_fields(
            LoanCreate,
            id=loan_id,
            book=book,
            borrower=borrower,
            borrow_date=borrow_date,
            due_date=due_date,
        )
        self._id = fields.id
        self._book = fields.book
        self._borrower = fields.borrower
        self._borrow_date = start_of_day(fields.borrow_date)
        self._due_date = end_of_day(fields.due_date)
        self._state = LoanState.PENDING

    def __repr__(self) -> str:
        return (
            f"Loan(id={self._id}, book={self._book.id}, borrower={self._borrower.id}, "
            f"due={self._due_date:%Y-%m-%d}, state={self._state.name})"
        )

    @property
    def id(self) -> int:
        return self._id

    @property
    def book(self) -> Book:
        return self._book

    @property
    def borrower(self) -> Member:
        return self._borrower

    @property
    def borrow_date(self) -> datetime:
        return self._borrow_date

    @property
    def due_date(self) -> datetime:
        return self._due_date

    @property
    def state(self) -> LoanState:
        return self._state

    def commit(self) -> None:
        """
        Move a PENDING loan to CURRENT.

        Raises:
            IllegalStateError: If the loan is not PENDING
        """
        if self._state is not LoanState.PENDING:
            raise IllegalStateError(
                f"Loan {self._id} can only be committed while PENDING (state: {self._state.name})"
            )

        self._state = LoanState.CURRENT

    def complete(self) -> None:
        """
        Close a CURRENT or OVERDUE loan.

        Raises:
            IllegalStateError: If the loan is PENDING or already COMPLETE
        """
        if self._state not in ACTIVE_STATES:
            raise IllegalStateError(
                f"Loan {self._id} can only be completed while CURRENT or OVERDUE (state: {self._state.name})"
            )

        self._state = LoanState.COMPLETE

    def check_overdue(self, current_date: date | datetime) -> bool:
        """
        Flag the loan OVERDUE if current_date falls on a day after the due date.

        Returns True when the loan is overdue. Once flagged, the loan stays
        OVERDUE and every later check returns True.

        Raises:
            IllegalStateError: If the loan is PENDING or COMPLETE
            DomainValidationError: If current_date and the due date differ in
                timezone awareness
        """
        if self._state not in ACTIVE_STATES:
            raise IllegalStateError(
                f"Loan {self._id} can only be checked while CURRENT or OVERDUE (state: {self._state.name})"
            )
        if is_aware(current_date) != is_aware(self._due_date):
            raise DomainValidationError(
                f"Loan {self._id}: current date {current_date} and due date {self._due_date} "
                "must both be timezone-aware or both naive"
            )

        if self._state is LoanState.OVERDUE:
            return True

        if start_of_day(current_date) > self._due_date:
            self._state = LoanState.OVERDUE
            return True
        return False

    def is_overdue(self) -> bool:
        return self._state is LoanState.OVERDUE
