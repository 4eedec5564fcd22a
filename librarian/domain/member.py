from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import TYPE_CHECKING

from librarian.core.config import settings
from librarian.errors import DomainRangeError, DomainValidationError, IllegalStateError
from librarian.schemas.member import MemberCreate
from librarian.schemas.validation import validate_fields

if TYPE_CHECKING:
    from librarian.domain.loan import Loan


class MemberState(Enum):
    BORROWING_ALLOWED = "BORROWING_ALLOWED"
    BORROWING_DISALLOWED = "BORROWING_DISALLOWED"


def _to_amount(value: Decimal | int | float | str, name: str) -> Decimal:
    """Convert a fine or payment to Decimal, rejecting negatives."""
    if value is None or isinstance(value, bool):
        raise DomainValidationError(f"The '{name}' amount must be a number")
    try:
        # 0.1 -> Decimal("0.1")
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise DomainValidationError(f"The '{name}' amount must be a number") from exc
    if not amount.is_finite():
        raise DomainValidationError(f"The '{name}' amount must be finite")
    if amount < 0:
        raise DomainRangeError(f"The '{name}' amount cannot be negative")
    return amount


class Member:
    """A library member: contact details, fine balance and current loans."""

    def __init__(
        self,
        first_name: str,
        last_name: str,
        contact_phone: str,
        email_address: str,
        member_id: int,
    ) -> None:
        fields = validate_fields(
            MemberCreate,
            id=member_id,
            first_name=first_name,
            last_name=last_name,
            contact_phone=contact_phone,
            email_address=email_address,
        )
        self._id = fields.id
        self._first_name = fields.first_name
        self._last_name = fields.last_name
        self._contact_phone = fields.contact_phone
        self._email_address = fields.email_address
        self._state = MemberState.BORROWING_ALLOWED
        self._fine_amount = Decimal("0")
        self._loans: list[Loan] = []

    def __repr__(self) -> str:
        return (
            f"Member(id={self._id}, name={self._first_name!r} {self._last_name!r}, "
            f"state={self._state.name})"
        )

    @property
    def id(self) -> int:
        return self._id

    @property
    def first_name(self) -> str:
        return self._first_name

    @property
    def last_name(self) -> str:
        return self._last_name

    @property
    def contact_phone(self) -> str:
        return self._contact_phone

    @property
    def email_address(self) -> str:
        return self._email_address

    @property
    def state(self) -> MemberState:
        return self._state

    @property
    def fine_amount(self) -> Decimal:
        return self._fine_amount

    @property
    def loans(self) -> list[Loan]:
        """A copy of the loans currently attributed to the member."""
        return list(self._loans)

    def has_overdue_loans(self) -> bool:
        return any(loan.is_overdue() for loan in self._loans)

    def has_reached_loan_limit(self) -> bool:
        return len(self._loans) >= settings.loan_limit

    def has_fines_payable(self) -> bool:
        return self._fine_amount > 0

    def has_reached_fine_limit(self) -> bool:
        return self._fine_amount >= settings.fine_limit

    def add_fine(self, amount: Decimal | int | float | str) -> None:
        """
        Add a fine to the member's balance.

        Raises:
            DomainRangeError: If amount is negative
        """
        self._fine_amount += _to_amount(amount, "fine")
        self.update_state()

    def pay_fine(self, amount: Decimal | int | float | str) -> None:
        """
        Deduct a payment from the member's balance. Partial payments are allowed.

        The balance is not clamped at zero; callers must not accept payments
        larger than the outstanding fine.

        Raises:
            DomainRangeError: If amount is negative
        """
        self._fine_amount -= _to_amount(amount, "payment")
        self.update_state()

    def add_loan(self, loan: Loan) -> None:
        """
        Attribute a loan to the member.

        Raises:
            DomainValidationError: If loan is None
            IllegalStateError: If the member is not allowed to borrow
        """
        if loan is None:
            raise DomainValidationError("The 'loan' parameter cannot be None")
        self.update_state()
        if self._state is MemberState.BORROWING_DISALLOWED:
            raise IllegalStateError(f"Member {self._id} is not allowed to borrow")

        self._loans.append(loan)
        self.update_state()

    def remove_loan(self, loan: Loan) -> None:
        """
        Detach a loan from the member.

        Raises:
            DomainValidationError: If loan is None
            IllegalStateError: If the loan is not attributed to the member
        """
        if loan is None:
            raise DomainValidationError("The 'loan' parameter cannot be None")
        if loan not in self._loans:
            raise IllegalStateError(f"Loan {loan.id} is not held by member {self._id}")

        self._loans.remove(loan)
        self.update_state()

    def update_state(self) -> MemberState:
        """
        Recompute whether the member may borrow.

        Borrowing is disallowed while the member has overdue loans, has reached
        the loan limit or has reached the fine limit. add_loan() refreshes
        the state before it checks it. Call this after an overdue scan to see
        the current state, since loans flag themselves without telling the member.
        """
        if (
            self.has_overdue_loans()
            or self.has_reached_loan_limit()
            or self.has_reached_fine_limit()
        ):
            self._state = MemberState.BORROWING_DISALLOWED
        else:
            self._state = MemberState.BORROWING_ALLOWED
        return self._state
