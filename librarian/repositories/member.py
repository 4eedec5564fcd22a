import logging
import threading

from librarian.domain.factories import MemberFactory, make_member
from librarian.domain.member import Member
from librarian.errors import DomainValidationError
from librarian.repositories.common import next_id, same_text

logger = logging.getLogger(__name__)


class MemberRepository:
    """In-memory register of members, keyed by id in insertion order."""

    def __init__(self, factory: MemberFactory = make_member) -> None:
        if factory is None:
            raise DomainValidationError("The 'factory' parameter cannot be None")
        self._factory = factory
        self._items: list[Member] = []
        self._lock = threading.RLock()

    def add_member(
        self,
        first_name: str,
        last_name: str,
        contact_phone: str,
        email_address: str,
    ) -> Member:
        """Create a member with the next free id and add it to the register."""
        with self._lock:
            member = self._factory(
                first_name, last_name, contact_phone, email_address, next_id(self._items)
            )
            self._items.append(member)
        logger.info("Added member %s (%s %s)", member.id, member.first_name, member.last_name)
        return member

    def get_member_by_id(self, member_id: int) -> Member | None:
        """Get a member by ID."""
        with self._lock:
            return next((m for m in self._items if m.id == member_id), None)

    def list_members(self) -> list[Member]:
        """Get all members."""
        with self._lock:
            return list(self._items)

    def find_members_by_last_name(self, last_name: str | None) -> list[Member]:
        """Get all members with a last name (case-insensitive exact match)."""
        with self._lock:
            return [m for m in self._items if same_text(m.last_name, last_name)]

    def find_members_by_email_address(self, email_address: str | None) -> list[Member]:
        """Get all members with an email address (case-insensitive exact match)."""
        with self._lock:
            return [m for m in self._items if same_text(m.email_address, email_address)]

    def find_members_by_names(self, first_name: str | None, last_name: str | None) -> list[Member]:
        """Get all members matching both first and last name."""
        with self._lock:
            return [
                m
                for m in self._items
                if same_text(m.first_name, first_name) and same_text(m.last_name, last_name)
            ]
