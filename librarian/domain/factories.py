"""Entity factories.

Repositories build entities through these callables rather than through the
entity classes, so a repository can be handed a different factory (in tests,
say) without knowing how entities are made.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable

from librarian.domain.book import Book
from librarian.domain.loan import Loan
from librarian.domain.member import Member

BookFactory = Callable[[str, str, str, int], Book]
MemberFactory = Callable[[str, str, str, str, int], Member]
LoanFactory = Callable[[Book, Member, date | datetime, date | datetime, int], Loan]


def make_book(author: str, title: str, call_number: str, book_id: int) -> Book:
    return Book(author, title, call_number, book_id)


def make_member(
    first_name: str,
    last_name: str,
    contact_phone: str,
    email_address: str,
    member_id: int,
) -> Member:
    return Member(first_name, last_name, contact_phone, email_address, member_id)


def make_loan(
    book: Book,
    borrower: Member,
    borrow_date: date | datetime,
    due_date: date | datetime,
    loan_id: int,
) -> Loan:
    return Loan(book, borrower, borrow_date, due_date, loan_id)
