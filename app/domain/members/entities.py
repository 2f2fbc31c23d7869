"""
Domain entities for the members bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from app.domain.pagination import CursorPosition

NAME_MAX_LENGTH = 20
EMAIL_MAX_LENGTH = 256
AGE_MIN = 0
AGE_MAX = 150


@dataclass(frozen=True)
class Member:
    """A registered member of the job bank.

    ``sequence_id`` is assigned by the store on insert and only orders
    cursor pagination. It is 0 for a member that has not been stored yet.
    """

    id: str
    name: str
    email: str
    created_at: datetime
    created_by: str
    changed_at: datetime
    changed_by: str
    age: Optional[int] = None
    sequence_id: int = 0

    @property
    def cursor_position(self) -> CursorPosition:
        return CursorPosition(id=self.id, sequence_id=self.sequence_id)
