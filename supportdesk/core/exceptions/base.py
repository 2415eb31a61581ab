"""
Base exception types for supportdesk.

Subclass SupportDeskError or use exception_factory() to add new exception
types on demand. Every error carries a machine-readable code and a suggested
HTTP status so the API layer can map it without a lookup table.
"""
from __future__ import annotations

import traceback
from typing import Any, Optional, Type


class SupportDeskError(Exception):
    """
    Base exception for all supportdesk errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable slug (class ``default_code`` unless overridden).
        http_status: Suggested HTTP status for API responses.
        details: Extra context (provider name, ticket step, ...).
        cause: The lower-level exception this one wraps, if any.
    """

    default_code: str = "ERROR"
    default_http_status: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or type(self).default_code
        self.http_status = http_status or type(self).default_http_status
        self.details: dict[str, Any] = dict(details or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code!r})"

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logs or API error bodies."""
        out: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details:
            out["details"] = self.details
        if self.cause is not None:
            out["cause"] = f"{type(self.cause).__name__}: {self.cause}"
            out["cause_traceback"] = "".join(
                traceback.format_exception(
                    type(self.cause), self.cause, self.cause.__traceback__
                )
            )
        return out


def exception_factory(
    name: str,
    *,
    code: Optional[str] = None,
    http_status: int = 500,
    base: Type[SupportDeskError] = SupportDeskError,
) -> Type[SupportDeskError]:
    """
    Create a new exception class on demand.

    Example:
        QuotaError = exception_factory("QuotaError", code="QUOTA", http_status=429)
        raise QuotaError("Daily completion quota exhausted")
    """
    attrs = {
        "default_code": code or name.upper(),
        "default_http_status": http_status,
        "__doc__": f"{name} (created via exception_factory).",
    }
    return type(name, (base,), attrs)
