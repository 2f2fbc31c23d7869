"""
Per-request trace context.

The middleware binds a TraceContext for the duration of each request;
use cases and repositories read it to stamp failures, audit fields and logs.
"""

from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import Optional

ANONYMOUS_USER = "anonymous"
TRACE_ID_HEADER = "x-trace-id"
USER_ID_HEADER = "x-user-id"


@dataclass(frozen=True)
class TraceContext:
    """Correlation id and acting user of the current request."""

    trace_id: str
    user_id: str = ANONYMOUS_USER


_current: ContextVar[Optional[TraceContext]] = ContextVar(
    "trace_context", default=None
)


def get_trace_context() -> Optional[TraceContext]:
    """Return the context bound to the current request, if any."""
    return _current.get()


def get_trace_id() -> Optional[str]:
    context = _current.get()
    return context.trace_id if context else None


def get_user_id() -> str:
    context = _current.get()
    return context.user_id if context else ANONYMOUS_USER


def bind_trace_context(context: TraceContext) -> Token:
    """Bind ``context``; pass the returned token to ``reset_trace_context``."""
    return _current.set(context)


def reset_trace_context(token: Token) -> None:
    _current.reset(token)
