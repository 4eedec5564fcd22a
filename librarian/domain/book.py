from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from librarian.errors import DomainValidationError, IllegalStateError
from librarian.schemas.book import BookCreate
from librarian.schemas.validation import validate_fields

if TYPE_CHECKING:
    from librarian.domain.loan import Loan


class BookState(Enum):
    AVAILABLE = "AVAILABLE"
    ON_LOAN = "ON_LOAN"
    DAMAGED = "DAMAGED"
    LOST = "LOST"
    DISPOSED = "DISPOSED"


# States a book may be disposed from. ON_LOAN books must come back (or be lost) first.
DISPOSABLE_STATES = frozenset({BookState.AVAILABLE, BookState.DAMAGED, BookState.LOST})


class Book:
    """A physical copy of a title held by the library.

    Lifecycle:
    - AVAILABLE -> ON_LOAN via borrow()
    - ON_LOAN -> AVAILABLE or DAMAGED via return_book()
    - ON_LOAN -> LOST via lose()
    - DAMAGED -> AVAILABLE via repair()
    - AVAILABLE, DAMAGED or LOST -> DISPOSED via dispose() (terminal)

    The book holds a reference to its loan exactly while it is ON_LOAN.
    """

    def __init__(self, author: str, title: str, call_number: str, book_id: int) -> None:
        fields = validate_fields(
            BookCreate, id=book_id, author=author, title=title, call_number=call_number
        )
        self._id = fields.id
        self._author = fields.author
        self._title = fields.title
        self._call_number = fields.call_number
        self._state = BookState.AVAILABLE
        self._loan: Loan | None = None

    def __repr__(self) -> str:
        return f"Book(id={self._id}, title={self._title!r}, state={self._state.name})"

    @property
    def id(self) -> int:
        return self._id

    @property
    def author(self) -> str:
        return self._author

    @property
    def title(self) -> str:
        return self._title

    @property
    def call_number(self) -> str:
        return self._call_number

    @property
    def state(self) -> BookState:
        return self._state

    @property
    def loan(self) -> Loan | None:
        """The loan currently borrowing the book, or None unless the book is ON_LOAN."""
        if self._state is BookState.ON_LOAN:
            return self._loan
        return None

    def borrow(self, loan: Loan) -> None:
        """
        Attach a loan to the book and mark it ON_LOAN.

        Raises:
            DomainValidationError: If loan is None
            IllegalStateError: If the book is not AVAILABLE
        """
        if loan is None:
            raise DomainValidationError("The 'loan' parameter cannot be None")
        if self._state is not BookState.AVAILABLE:
            raise IllegalStateError(
                f"Book {self._id} is not available (state: {self._state.name})"
            )

        self._loan = loan
        self._state = BookState.ON_LOAN

    def return_book(self, damaged: bool) -> None:
        """
        Detach the loan and mark the book AVAILABLE, or DAMAGED when damaged is true.

        Raises:
            IllegalStateError: If the book is not ON_LOAN
        """
        if self._state is not BookState.ON_LOAN:
            raise IllegalStateError(
                f"Book {self._id} cannot be returned as it is not on loan (state: {self._state.name})"
            )

        self._loan = None
        self._state = BookState.DAMAGED if damaged else BookState.AVAILABLE

    def lose(self) -> None:
        """Mark an ON_LOAN book as LOST."""
        if self._state is not BookState.ON_LOAN:
            raise IllegalStateError(
                f"Book {self._id} cannot be marked as lost as it is not on loan (state: {self._state.name})"
            )

        self._loan = None
        self._state = BookState.LOST

    def repair(self) -> None:
        """Make a DAMAGED book AVAILABLE again."""
        if self._state is not BookState.DAMAGED:
            raise IllegalStateError(
                f"Book {self._id} cannot be repaired as it is not damaged (state: {self._state.name})"
            )

        self._state = BookState.AVAILABLE

    def dispose(self) -> None:
        """Retire the book for good. Only AVAILABLE, DAMAGED or LOST books can be disposed."""
        if self._state not in DISPOSABLE_STATES:
            raise IllegalStateError(
                f"Book {self._id} cannot be disposed from state {self._state.name}"
            )

        self._state = BookState.DISPOSED
