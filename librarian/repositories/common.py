from typing import Iterable, Protocol


class HasId(Protocol):
    @property
    def id(self) -> int: ...


def next_id(items: Iterable[HasId]) -> int:
    """One more than the largest id in items, or 1 when there are none."""
    return max((item.id for item in items), default=0) + 1


def same_text(value: str, term: str | None) -> bool:
    """Case-insensitive exact match. A missing or empty term matches nothing."""
    if not term:
        return False
    return value.casefold() == term.casefold()
