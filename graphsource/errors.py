"""Error taxonomy for the describe-to-graph connectors."""

from __future__ import annotations

from typing import Optional


class SourceError(Exception):
    """Base error. Carries the item type, scope and query it relates to."""

    def __init__(
        self,
        message: str,
        *,
        item_type: Optional[str] = None,
        scope: Optional[str] = None,
        query: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.item_type = item_type
        self.scope = scope
        self.query = query

    def with_context(
        self,
        item_type: Optional[str] = None,
        scope: Optional[str] = None,
        query: Optional[str] = None,
    ) -> "SourceError":
        """Fill in any context fields that are not already set."""
        self.item_type = self.item_type or item_type
        self.scope = self.scope or scope
        self.query = self.query or query
        return self

    def __str__(self) -> str:
        parts = []
        for key in ("item_type", "scope", "query"):
            val = getattr(self, key)
            if val:
                parts.append(f"{key}={val}")
        if not parts:
            return self.message
        return f"{self.message} ({', '.join(parts)})"


class ParseError(SourceError, ValueError):
    """A structured identifier (ARN) could not be parsed."""


class NoScopeError(SourceError):
    """The requested scope is not served by this source."""


class NotFoundError(SourceError):
    """A Get query matched zero records."""


class AmbiguousResultError(SourceError):
    """A Get query matched more than one record."""

    def __init__(self, message: str, *, count: int = 0, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.count = count


class UpstreamError(SourceError):
    """The provider API call failed. The original exception is __cause__."""


class CancelledError(SourceError):
    """The request context was cancelled."""


class DeadlineExceededError(CancelledError):
    """The request context deadline passed."""


class AttributeProjectionError(SourceError):
    """A record could not be represented as item attributes."""
