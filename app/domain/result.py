"""
Two-state outcome type.

Every repository and use case returns ``Result[T]``: either ``Ok(value)``
or ``Err(error)``. There is no third state.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from app.domain.failures import Failure

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value (which may itself be None)."""

    value: T

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying a Failure."""

    error: Failure

    @property
    def is_success(self) -> bool:
        return False


Result = Union[Ok[T], Err]
