import logging
import threading
from datetime import date, datetime

from librarian.domain.book import Book
from librarian.domain.factories import LoanFactory, make_loan
from librarian.domain.loan import ACTIVE_STATES, Loan, LoanState, due_date_for
from librarian.domain.member import Member
from librarian.errors import (
    DomainRangeError,
    DomainValidationError,
    IllegalStateError,
    PendingListNotFoundError,
)
from librarian.repositories.common import next_id, same_text
from librarian.schemas.loan import is_aware

logger = logging.getLogger(__name__)


class LoanRepository:
    """In-memory loan store with a two-phase checkout.

    Loans are first staged in a pending list owned by the borrower, then
    committed together into a single list of committed loans. Only committed
    loans are visible to lookups and overdue tracking.

    Typical checkout:
    - create_new_pending_list(member)
    - create_pending_loan(member, book, today) for each book scanned
    - commit_pending_loans(member), or clear_pending_loans(member) to abandon
    """

    def __init__(self, factory: LoanFactory = make_loan) -> None:
        if factory is None:
            raise DomainValidationError("The 'factory' parameter cannot be None")
        self._factory = factory
        self._pending: dict[int, list[Loan]] = {}
        self._committed: list[Loan] = []
        self._lock = threading.RLock()

    # ---- pending loans

    def create_new_pending_list(self, borrower: Member) -> None:
        """Ensure an empty pending list exists for the borrower. No-op if one already exists."""
        if borrower is None:
            raise DomainValidationError("The 'borrower' parameter cannot be None")

        with self._lock:
            if borrower.id not in self._pending:
                self._pending[borrower.id] = []
                logger.info("Created pending loan list for borrower %s", borrower.id)

    def create_pending_loan(
        self,
        borrower: Member,
        book: Book,
        borrow_date: date | datetime,
        due_date: date | datetime | None = None,
    ) -> Loan:
        """
        Stage a new PENDING loan in the borrower's pending list.

        The loan id is one more than the largest id in that pending list; ids of
        committed loans are not considered. When due_date is omitted it is
        borrow_date plus the configured loan period.

        Raises:
            PendingListNotFoundError: If the borrower has no pending list
            DomainValidationError: If the loan fields are invalid
        """
        with self._lock:
            pending = self._pending_list_for(borrower)
            if due_date is None and borrow_date is not None:
                due_date = due_date_for(borrow_date)
            loan = self._factory(book, borrower, borrow_date, due_date, next_id(pending))
            pending.append(loan)
        logger.info(
            "Staged loan %s of book %s for borrower %s", loan.id, loan.book.id, borrower.id
        )
        return loan

    def get_pending_list(self, borrower: Member) -> list[Loan]:
        """Get the borrower's staged loans, in the order they were created."""
        with self._lock:
            return list(self._pending_list_for(borrower))

    def commit_pending_loans(self, borrower: Member) -> list[Loan]:
        """
        Commit every staged loan for the borrower and discard the pending list.

        Loans move to CURRENT and join the committed loans in pending-list
        order. A new pending list must be created before staging more loans
        for the borrower.

        Raises:
            PendingListNotFoundError: If the borrower has no pending list
            IllegalStateError: If a staged loan is no longer PENDING (nothing is committed)
        """
        with self._lock:
            pending = self._pending_list_for(borrower)
            stale = [loan.id for loan in pending if loan.state is not LoanState.PENDING]
            if stale:
                raise IllegalStateError(
                    f"Pending loans {stale} for borrower {borrower.id} are no longer PENDING"
                )
            for loan in pending:
                loan.commit()
                self._committed.append(loan)
            del self._pending[borrower.id]
        logger.info("Committed %d loan(s) for borrower %s", len(pending), borrower.id)
        return pending

    def clear_pending_loans(self, borrower: Member) -> None:
        """
        Discard the borrower's staged loans without committing them.

        The pending list itself remains, empty, ready for new loans.

        Raises:
            PendingListNotFoundError: If the borrower has no pending list
        """
        with self._lock:
            pending = self._pending_list_for(borrower)
            discarded = len(pending)
            pending.clear()
        logger.info("Cleared %d pending loan(s) for borrower %s", discarded, borrower.id)

    # ---- committed loans

    def get_loan_by_id(self, loan_id: int) -> Loan | None:
        """Get a committed loan by ID."""
        if loan_id <= 0:
            raise DomainRangeError("The 'loan_id' parameter must be a positive integer")

        with self._lock:
            return next((loan for loan in self._committed if loan.id == loan_id), None)

    def get_loan_by_book(self, book: Book | None) -> Loan | None:
        """Get the committed loan for a book, or None if there is none (or no book)."""
        if book is None:
            return None

        with self._lock:
            return next((loan for loan in self._committed if loan.book.id == book.id), None)

    def list_loans(self) -> list[Loan]:
        """Get all committed loans."""
        with self._lock:
            return list(self._committed)

    def find_loans_by_borrower(self, borrower: Member | None) -> list[Loan]:
        """Get all committed loans for a borrower."""
        if borrower is None:
            return []

        with self._lock:
            return [loan for loan in self._committed if loan.borrower.id == borrower.id]

    def find_loans_by_book_title(self, title: str | None) -> list[Loan]:
        """Get all committed loans of books with a title (case-insensitive exact match)."""
        with self._lock:
            return [loan for loan in self._committed if same_text(loan.book.title, title)]

    def update_overdue_status(self, current_date: date | datetime) -> list[Loan]:
        """
        Check every outstanding committed loan against current_date.

        Completed loans are skipped. Returns the loans that are overdue after
        the check.

        Raises:
            DomainValidationError: If current_date differs from any outstanding
                loan in timezone awareness. No loan is flagged in that case.
        """
        with self._lock:
            active = [loan for loan in self._committed if loan.state in ACTIVE_STATES]
            mismatched = [
                loan.id for loan in active if is_aware(loan.due_date) != is_aware(current_date)
            ]
            if mismatched:
                raise DomainValidationError(
                    f"Current date {current_date} cannot be compared with the due dates of loan(s) {mismatched}"
                )

            overdue = [loan for loan in active if loan.check_overdue(current_date)]
            logger.debug(
                "Overdue scan at %s: %d of %d committed loan(s) overdue",
                current_date,
                len(overdue),
                len(self._committed),
            )
        return overdue

    def find_overdue_loans(self) -> list[Loan]:
        """Get all committed loans currently flagged OVERDUE."""
        with self._lock:
            return [loan for loan in self._committed if loan.is_overdue()]

    def _pending_list_for(self, borrower: Member) -> list[Loan]:
        if borrower is None:
            raise DomainValidationError("The 'borrower' parameter cannot be None")
        try:
            return self._pending[borrower.id]
        except KeyError:
            raise PendingListNotFoundError(
                f"No pending loan list exists for borrower {borrower.id}"
            ) from None
