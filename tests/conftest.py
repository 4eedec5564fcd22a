import os

# Set lending rules BEFORE any imports that might use settings
os.environ["LOAN_PERIOD_DAYS"] = "14"
os.environ["LOAN_LIMIT"] = "5"
os.environ["FINE_LIMIT"] = "10.00"

from datetime import datetime

import pytest

from librarian.domain.book import Book
from librarian.domain.factories import make_book, make_member
from librarian.domain.member import Member
from librarian.repositories.book import BookRepository
from librarian.repositories.loan import LoanRepository
from librarian.repositories.member import MemberRepository


@pytest.fixture(scope="function")
def book_repo() -> BookRepository:
    """Create an empty book repository for each test."""
    return BookRepository()


@pytest.fixture(scope="function")
def member_repo() -> MemberRepository:
    """Create an empty member repository for each test."""
    return MemberRepository()


@pytest.fixture(scope="function")
def loan_repo() -> LoanRepository:
    """Create an empty loan repository for each test."""
    return LoanRepository()


@pytest.fixture(scope="function")
def member() -> Member:
    """Create a member allowed to borrow, with no fines."""
    return make_member("Test", "Member", "03 9999 0000", "test@email.com", 1)


@pytest.fixture(scope="function")
def another_member() -> Member:
    """Create a second member for cross-borrower tests."""
    return make_member("Jane", "Doe", "03 9999 1111", "jane.doe@email.com", 2)


@pytest.fixture(scope="function")
def book() -> Book:
    """Create an available book."""
    return make_book("Test Author", "Learning Testing", "TAU-001", 1)


@pytest.fixture(scope="function")
def books() -> list[Book]:
    """Create three available books with distinct titles."""
    return [
        make_book("Test Author", "Learning Testing", "TAU-001", 1),
        make_book("Another Author", "Writing Tests For Dummies", "AAU-001", 2),
        make_book("Third Author", "Mocking Made Simple", "THA-001", 3),
    ]


@pytest.fixture(scope="function")
def borrow_date() -> datetime:
    """A mid-morning borrow time, so day normalisation is visible."""
    return datetime(2024, 1, 1, 10, 30)
