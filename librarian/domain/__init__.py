"""Lending domain entities and their lifecycle rules.

Entities own their state transitions; repositories only store them.
"""

from librarian.domain.book import Book, BookState
from librarian.domain.member import Member, MemberState
from librarian.domain.loan import Loan, LoanState, due_date_for
from librarian.domain.factories import make_book, make_loan, make_member

__all__ = [
    "Book",
    "BookState",
    "Member",
    "MemberState",
    "Loan",
    "LoanState",
    "due_date_for",
    "make_book",
    "make_loan",
    "make_member",
]
