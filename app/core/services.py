"""
Service layer primitives.

Views deal with HTTP, models with rows, and services with the steps in
between. A service returns a ServiceResult when the caller sent something
unacceptable (missing field, unknown package) and raises a
BaseApplicationError when the failure is on our side.

Usage:
    class OrderService(BaseService):
        def create_order(self, account, package_details, amount):
            invalid = self.validate_required(package_details=package_details, amount=amount)
            if invalid:
                return invalid
            with self.atomic():
                order = Subscription.objects.create(...)
            return ServiceResult.success(receipt)

    result = OrderService().create_order(request.user, "3_THANG", 99000)
    status = 200 if result else 400
    return Response(result.to_response(), status=status)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

T = TypeVar("T")

REQUIRED_MESSAGE = "This field is required."


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of a service call that may be refused.

    Truthy on success. On failure `error` holds the message shown to the
    client, `error_code` a stable code and `errors` per-field messages.
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = None

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> ServiceResult[T]:
        return cls(success=False, error=error, error_code=error_code, errors=errors)

    def to_response(self) -> dict[str, Any]:
        """Body for the API response; empty optional keys are left out."""
        if self.success:
            return {"success": True, "data": self.data}

        body: dict[str, Any] = {"success": False, "message": self.error}
        if self.error_code:
            body["error_code"] = self.error_code
        if self.errors:
            body["errors"] = self.errors
        return body

    def __bool__(self) -> bool:
        return self.success


class BaseService:
    """
    Shared helpers for service classes.

    Subclasses keep configuration on the instance and nothing per request,
    so one instance can serve many calls.
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Logger named <module>.<ClassName>, under the app's logger."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """Run the block in a transaction (a savepoint when already inside one)."""
        with transaction.atomic():
            yield

    @classmethod
    def validate_required(cls, **fields) -> ServiceResult | None:
        """
        Refuse None and blank strings.

        Zero and False count as present. Returns an INVALID_REQUEST failure
        listing every missing field, or None when all are present.
        """
        missing = {
            name: [REQUIRED_MESSAGE]
            for name, value in fields.items()
            if value is None or (isinstance(value, str) and not value.strip())
        }
        if not missing:
            return None
        return ServiceResult.failure(
            "Required fields missing",
            error_code="INVALID_REQUEST",
            errors=missing,
        )
