import logging
import threading

from librarian.domain.book import Book
from librarian.domain.factories import BookFactory, make_book
from librarian.errors import DomainValidationError
from librarian.repositories.common import next_id, same_text

logger = logging.getLogger(__name__)


class BookRepository:
    """In-memory catalogue of books, keyed by id in insertion order."""

    def __init__(self, factory: BookFactory = make_book) -> None:
        if factory is None:
            raise DomainValidationError("The 'factory' parameter cannot be None")
        self._factory = factory
        self._items: list[Book] = []
        self._lock = threading.RLock()

    def add_book(self, author: str, title: str, call_number: str) -> Book:
        """Create a book with the next free id and add it to the catalogue."""
        with self._lock:
            book = self._factory(author, title, call_number, next_id(self._items))
            self._items.append(book)
        logger.info("Added book %s (%r, call number %s)", book.id, book.title, book.call_number)
        return book

    def get_book_by_id(self, book_id: int) -> Book | None:
        """Get a book by ID."""
        with self._lock:
            return next((b for b in self._items if b.id == book_id), None)

    def list_books(self) -> list[Book]:
        """Get all books."""
        with self._lock:
            return list(self._items)

    def find_books_by_author(self, author: str | None) -> list[Book]:
        """Get all books by an author (case-insensitive exact match)."""
        with self._lock:
            return [b for b in self._items if same_text(b.author, author)]

    def find_books_by_title(self, title: str | None) -> list[Book]:
        """Get all books with a title (case-insensitive exact match)."""
        with self._lock:
            return [b for b in self._items if same_text(b.title, title)]

    def find_books_by_author_title(self, author: str | None, title: str | None) -> list[Book]:
        """Get all books matching both author and title."""
        with self._lock:
            return [
                b
                for b in self._items
                if same_text(b.author, author) and same_text(b.title, title)
            ]
