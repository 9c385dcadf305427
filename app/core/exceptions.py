"""
Application error hierarchy.

Services raise these for failures the caller cannot fix by changing its
input: a missing account, a database write that did not land, a rejected
credential. Expected input problems go through ServiceResult instead
(see core.services).

    BaseApplicationError
    ├── NotFoundError
    └── PermissionDeniedError

Apps extend the tree with their own subclasses (payments.exceptions).

Usage:
    raise NotFoundError(
        "Account not found",
        error_code="ACCOUNT_NOT_FOUND",
        details={"account_id": str(account_id)},
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Root of every domain error.

    Attributes:
        message: Text for logs and operators
        error_code: Stable code; subclasses set default_error_code
        details: Identifiers that help trace the failure
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize as {"error", "error_code"[, "details"]}."""
        payload: dict[str, Any] = {"error": self.message, "error_code": self.error_code}
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"error_code={self.error_code!r}, details={self.details!r})"
        )


class NotFoundError(BaseApplicationError):
    """A row the operation depends on does not exist, e.g. the account behind an order."""

    default_error_code: str = "NOT_FOUND"


class PermissionDeniedError(BaseApplicationError):
    """
    The caller is not allowed to perform the operation.

    API users are authenticated by DRF; this covers service-level checks
    such as the shared secret on inbound gateway notifications.
    """

    default_error_code: str = "PERMISSION_DENIED"
