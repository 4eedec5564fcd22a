from datetime import date
from decimal import Decimal

import pytest

from librarian.core.config import settings
from librarian.domain.factories import make_book, make_loan, make_member
from librarian.domain.member import Member, MemberState
from librarian.errors import DomainRangeError, DomainValidationError, IllegalStateError


def _loan_for(member: Member, loan_id: int, committed: bool = True):
    """Build a loan of a fresh book for the member."""
    book = make_book("Author", f"Title {loan_id}", f"CALL-{loan_id}", loan_id)
    loan = make_loan(book, member, date(2024, 1, 1), date(2024, 1, 15), loan_id)
    if committed:
        loan.commit()
    return loan


# ============================================================================
# CONSTRUCTION TESTS
# ============================================================================


def test_new_member_defaults(member: Member):
    """Test a new member may borrow, owes nothing and holds no loans."""
    assert member.state is MemberState.BORROWING_ALLOWED
    assert member.fine_amount == Decimal("0")
    assert member.loans == []
    assert member.first_name == "Test"
    assert member.last_name == "Member"
    assert member.contact_phone == "03 9999 0000"
    assert member.email_address == "test@email.com"


@pytest.mark.parametrize(
    "field", ["first_name", "last_name", "contact_phone", "email_address"]
)
def test_member_rejects_empty_fields(field: str):
    """Test every contact field is required."""
    values = {
        "first_name": "Jane",
        "last_name": "Doe",
        "contact_phone": "555-0100",
        "email_address": "jane@example.com",
    }
    values[field] = ""
    with pytest.raises(DomainValidationError) as exc_info:
        Member(member_id=1, **values)
    assert field in str(exc_info.value)


def test_member_rejects_non_positive_id():
    """Test member ids must be positive."""
    with pytest.raises(DomainRangeError):
        make_member("Jane", "Doe", "555-0100", "jane@example.com", 0)


# ============================================================================
# FINE TESTS
# ============================================================================


def test_fine_add_and_pay_scenario():
    """Test Jane Doe's fine of 12.50 is payable until paid in full."""
    jane = make_member("Jane", "Doe", "555-0100", "jane@example.com", 1)
    assert jane.fine_amount == 0

    jane.add_fine(Decimal("12.50"))
    assert jane.has_fines_payable() is True

    jane.pay_fine(Decimal("12.50"))
    assert jane.fine_amount == 0
    assert jane.has_fines_payable() is False


def test_float_amounts_are_exact(member: Member):
    """Test float fines are converted without binary rounding noise."""
    member.add_fine(0.1)
    member.add_fine(0.2)
    assert member.fine_amount == Decimal("0.3")


def test_partial_payment(member: Member):
    """Test a partial payment leaves the remainder payable."""
    member.add_fine("5.00")
    member.pay_fine(2)
    assert member.fine_amount == Decimal("3.00")
    assert member.has_fines_payable()


def test_overpayment_is_not_clamped(member: Member):
    """Test paying more than owed leaves a negative balance for the caller to handle."""
    member.add_fine(1)
    member.pay_fine(3)
    assert member.fine_amount == Decimal("-2")
    assert not member.has_fines_payable()


@pytest.mark.parametrize("method", ["add_fine", "pay_fine"])
def test_negative_amounts_rejected(member: Member, method: str):
    """Test fines and payments cannot be negative."""
    with pytest.raises(DomainRangeError):
        getattr(member, method)(Decimal("-0.01"))
    assert member.fine_amount == 0


@pytest.mark.parametrize("amount", [None, "abc", True, float("nan")])
def test_non_numeric_amounts_rejected(member: Member, amount):
    """Test amounts must be finite numbers."""
    with pytest.raises(DomainValidationError):
        member.add_fine(amount)


def test_zero_fine_is_allowed(member: Member):
    """Test a zero fine is accepted and nothing is payable."""
    member.add_fine(0)
    assert not member.has_fines_payable()


def test_fine_limit(member: Member):
    """Test reaching the fine limit disallows borrowing until paid down."""
    member.add_fine(settings.fine_limit - Decimal("0.01"))
    assert not member.has_reached_fine_limit()
    assert member.state is MemberState.BORROWING_ALLOWED

    member.add_fine(Decimal("0.01"))
    assert member.has_reached_fine_limit()
    assert member.state is MemberState.BORROWING_DISALLOWED

    member.pay_fine(Decimal("0.01"))
    assert member.state is MemberState.BORROWING_ALLOWED


# ============================================================================
# LOAN TESTS
# ============================================================================


def test_add_and_remove_loan(member: Member):
    """Test loans can be attributed to and detached from a member."""
    loan = _loan_for(member, 1)

    member.add_loan(loan)
    assert member.loans == [loan]

    member.remove_loan(loan)
    assert member.loans == []


def test_loans_property_is_a_copy(member: Member):
    """Test callers cannot mutate the member's loans through the accessor."""
    member.add_loan(_loan_for(member, 1))
    member.loans.clear()
    assert len(member.loans) == 1


def test_add_loan_rejects_none(member: Member):
    """Test a missing loan is a validation error."""
    with pytest.raises(DomainValidationError):
        member.add_loan(None)


def test_remove_unknown_loan_fails(member: Member):
    """Test removing a loan the member does not hold fails."""
    with pytest.raises(IllegalStateError):
        member.remove_loan(_loan_for(member, 1))
    with pytest.raises(DomainValidationError):
        member.remove_loan(None)


def test_loan_limit(member: Member):
    """Test the member may not borrow past the configured loan limit."""
    for loan_id in range(1, settings.loan_limit):
        member.add_loan(_loan_for(member, loan_id))
    assert not member.has_reached_loan_limit()
    assert member.state is MemberState.BORROWING_ALLOWED

    last = _loan_for(member, settings.loan_limit)
    member.add_loan(last)
    assert member.has_reached_loan_limit()
    assert member.state is MemberState.BORROWING_DISALLOWED

    with pytest.raises(IllegalStateError):
        member.add_loan(_loan_for(member, settings.loan_limit + 1))
    assert len(member.loans) == settings.loan_limit

    member.remove_loan(last)
    assert member.state is MemberState.BORROWING_ALLOWED


def test_loan_limit_follows_settings(member: Member, monkeypatch):
    """Test the loan limit is read from settings at check time."""
    monkeypatch.setattr(settings, "loan_limit", 1)

    member.add_loan(_loan_for(member, 1))
    assert member.has_reached_loan_limit()
    assert member.state is MemberState.BORROWING_DISALLOWED


def test_overdue_loans_disallow_borrowing(member: Member):
    """Test a member with an overdue loan is disallowed once state is refreshed."""
    loan = _loan_for(member, 1)
    member.add_loan(loan)
    assert not member.has_overdue_loans()

    loan.check_overdue(date(2024, 2, 1))
    assert member.has_overdue_loans()
    assert member.update_state() is MemberState.BORROWING_DISALLOWED

    loan.complete()
    member.remove_loan(loan)
    assert member.state is MemberState.BORROWING_ALLOWED


def test_add_loan_refuses_member_with_unrefreshed_overdue_loan(member: Member):
    """Test an overdue loan blocks borrowing even before update_state() is called."""
    loan = _loan_for(member, 1)
    member.add_loan(loan)
    loan.check_overdue(date(2024, 2, 1))

    with pytest.raises(IllegalStateError):
        member.add_loan(_loan_for(member, 2))

    assert member.loans == [loan]
    assert member.state is MemberState.BORROWING_DISALLOWED


def test_add_loan_honours_lowered_loan_limit(member: Member, monkeypatch):
    """Test a loan limit lowered below the current loan count blocks borrowing."""
    member.add_loan(_loan_for(member, 1))
    member.add_loan(_loan_for(member, 2))
    monkeypatch.setattr(settings, "loan_limit", 2)

    with pytest.raises(IllegalStateError):
        member.add_loan(_loan_for(member, 3))

    assert len(member.loans) == 2
    assert member.state is MemberState.BORROWING_DISALLOWED
