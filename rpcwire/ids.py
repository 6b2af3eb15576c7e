"""JSON-RPC 2.0 request identifiers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from typing import Optional, Tuple, Union

IdValue = Union[int, str, None]

_U64_LIMIT = 1 << 64


@total_ordering
@dataclass(frozen=True)
class Id:
    """A JSON-RPC ID: an unsigned 64-bit number, a string, or null.

    IDs are hashable and ordered: numbers sort before strings, strings
    before null, and null equals null.
    """

    value: IdValue = None

    def __post_init__(self) -> None:
        value = self.value
        if value is None or isinstance(value, str):
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(
                f"an Id must be a string, a number, or null, not {type(value).__name__}"
            )
        if not 0 <= value < _U64_LIMIT:
            raise ValueError(f"numeric Id out of range: {value}")

    @classmethod
    def from_json(cls, value: object) -> "Id":
        """Build an Id from a decoded JSON value."""
        try:
            return cls(value)  # type: ignore[arg-type]
        except TypeError as exc:
            raise ValueError("expected a string, a number, or null") from exc

    def to_json(self) -> IdValue:
        """Return the value to place in a JSON document."""
        return self.value

    def is_number(self) -> bool:
        return isinstance(self.value, int)

    def is_string(self) -> bool:
        return isinstance(self.value, str)

    def is_none(self) -> bool:
        return self.value is None

    def as_number(self) -> Optional[int]:
        return self.value if isinstance(self.value, int) else None

    def as_string(self) -> Optional[str]:
        return self.value if isinstance(self.value, str) else None

    def _sort_key(self) -> Tuple[int, int, str]:
        if isinstance(self.value, int):
            return (0, self.value, "")
        if isinstance(self.value, str):
            return (1, 0, self.value)
        return (2, 0, "")

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Id):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        return "null" if self.value is None else str(self.value)