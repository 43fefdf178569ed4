"""Error taxonomy shared by fetcher, orchestrator and CLI."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Closed set of failure categories a run can end with."""

    VALIDATION = "validation"
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    PAGINATION_STALL = "pagination_stall"


class PoolTagError(Exception):
    """Base exception carrying a kind and structured context."""

    kind: ErrorKind = ErrorKind.PROTOCOL

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = {
            key: value for key, value in (context or {}).items() if value is not None
        }

    def with_context(self, **extra: Any) -> "PoolTagError":
        """Attach additional context and return the same error for re-raising."""

        for key, value in extra.items():
            if value is not None:
                self.context.setdefault(key, value)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "context": dict(self.context),
        }

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class ValidationError(PoolTagError):
    """Run input rejected before any network activity."""

    kind = ErrorKind.VALIDATION


class TransportError(PoolTagError):
    """Timeout, connection failure or non-success HTTP status."""

    kind = ErrorKind.TRANSPORT

    def __init__(
        self,
        message: str,
        *,
        cursor: str | None = None,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        merged = dict(context or {})
        merged.update(cursor=cursor, status_code=status_code)
        super().__init__(message, context=merged)
        self.cursor = cursor
        self.status_code = status_code


class ProtocolError(PoolTagError):
    """Malformed payload or upstream-reported application errors."""

    kind = ErrorKind.PROTOCOL

    def __init__(
        self,
        message: str,
        *,
        cursor: str | None = None,
        messages: list[str] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        merged = dict(context or {})
        merged.update(cursor=cursor, upstream_messages=messages or None)
        super().__init__(message, context=merged)
        self.cursor = cursor
        self.messages = list(messages or [])


class EmptyResultError(ProtocolError):
    """Expected result container missing from an otherwise valid response."""


class PaginationStallError(PoolTagError):
    """Cursor failed to advance, or returned to an earlier value."""

    kind = ErrorKind.PAGINATION_STALL

    def __init__(
        self,
        cursor: str,
        next_cursor: str | None,
        previous_cursor: str | None = None,
    ) -> None:
        super().__init__(
            "Pagination cursor did not advance",
            context={
                "cursor": cursor,
                "next_cursor": next_cursor if next_cursor is not None else "",
                "previous_cursor": previous_cursor,
            },
        )
        self.cursor = cursor
        self.next_cursor = next_cursor
        self.previous_cursor = previous_cursor


__all__ = [
    "EmptyResultError",
    "ErrorKind",
    "PaginationStallError",
    "PoolTagError",
    "ProtocolError",
    "TransportError",
    "ValidationError",
]
