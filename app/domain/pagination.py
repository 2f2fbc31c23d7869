"""
Pagination primitives shared by every repository.

Offset pages derive their navigation flags from the total count on every
access. Cursor pages carry an opaque token: base64 of a JSON object holding
the last returned item's id and store-assigned sequence number.
"""

import base64
import binascii
import json
import math
from dataclasses import dataclass, field
from typing import Callable, Generic, Optional, Sequence, TypeVar

T = TypeVar("T")
U = TypeVar("U")

# largest value a signed 64-bit store column can hold
MAX_SEQUENCE_ID = 2**63 - 1


class InvalidCursorTokenError(ValueError):
    """Raised when a cursor token cannot be decoded."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid cursor token: {reason}")
        self.reason = reason


@dataclass(frozen=True)
class OffsetPage(Generic[T]):
    """A page addressed by zero-based index and size."""

    items: list[T]
    page_index: int
    page_size: int
    total_count: int

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous_page(self) -> bool:
        return self.page_index > 0

    @property
    def has_next_page(self) -> bool:
        return (self.page_index + 1) * self.page_size < self.total_count

    def map(self, func: Callable[[T], U]) -> "OffsetPage[U]":
        """Return the same page with every item transformed."""
        return OffsetPage(
            items=[func(item) for item in self.items],
            page_index=self.page_index,
            page_size=self.page_size,
            total_count=self.total_count,
        )


@dataclass(frozen=True)
class CursorPage(Generic[T]):
    """A page addressed by an opaque continuation token.

    ``previous_page_token`` is part of the wire contract but is not
    populated: iteration is forward-only.
    """

    items: list[T]
    next_page_token: Optional[str] = None
    previous_page_token: Optional[str] = field(default=None)

    @property
    def has_next_page(self) -> bool:
        return self.next_page_token is not None

    def map(self, func: Callable[[T], U]) -> "CursorPage[U]":
        """Return the same page with every item transformed."""
        return CursorPage(
            items=[func(item) for item in self.items],
            next_page_token=self.next_page_token,
            previous_page_token=self.previous_page_token,
        )


@dataclass(frozen=True)
class CursorPosition:
    """Position of the last item returned by a cursor page."""

    id: str
    sequence_id: int


def encode_cursor_token(position: CursorPosition) -> str:
    """Encode a position into an opaque token."""
    payload = json.dumps(
        {"id": position.id, "sequenceId": position.sequence_id},
        separators=(",", ":"),
    )
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def decode_cursor_token(token: str) -> CursorPosition:
    """Decode a token produced by ``encode_cursor_token``.

    Raises:
        InvalidCursorTokenError: If the token is not valid base64, not a
            JSON object, or lacks a string ``id`` and an integer
            ``sequenceId`` between 0 and ``MAX_SEQUENCE_ID``.
    """
    if not token or not token.strip():
        raise InvalidCursorTokenError("empty token")

    try:
        raw = base64.b64decode(token.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidCursorTokenError("not base64") from exc

    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidCursorTokenError("not JSON") from exc

    if not isinstance(payload, dict):
        raise InvalidCursorTokenError("not a JSON object")

    entity_id = payload.get("id")
    sequence_id = payload.get("sequenceId")
    if not isinstance(entity_id, str) or not entity_id:
        raise InvalidCursorTokenError("missing id")
    # bool is a subclass of int
    if not isinstance(sequence_id, int) or isinstance(sequence_id, bool):
        raise InvalidCursorTokenError("missing sequenceId")
    if sequence_id < 0:
        raise InvalidCursorTokenError("negative sequenceId")
    if sequence_id > MAX_SEQUENCE_ID:
        raise InvalidCursorTokenError("sequenceId out of range")

    return CursorPosition(id=entity_id, sequence_id=sequence_id)


def build_cursor_page(
    rows: Sequence[T],
    page_size: int,
    position_of: Callable[[T], CursorPosition],
) -> CursorPage[T]:
    """Build a cursor page from up to ``page_size + 1`` ordered rows.

    The extra row only signals that another page exists; it is dropped and
    the next token points at the last kept row.
    """
    if len(rows) > page_size:
        kept = list(rows[:page_size])
        next_token = encode_cursor_token(position_of(kept[-1])) if kept else None
        return CursorPage(items=kept, next_page_token=next_token)
    return CursorPage(items=list(rows), next_page_token=None)
