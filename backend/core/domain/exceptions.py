"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations inside service layers.
They are deliberately **not** DRF exceptions so that the domain layer stays
framework-agnostic.  The global DRF exception handler in
``core.domain.exception_handler`` maps them to HTTP responses.

Mapping cheatsheet
------------------
┌─────────────────────┬──────────────────────────────┬──────┐
│ Domain Exception    │ DRF / HTTP equivalent        │ Code │
├─────────────────────┼──────────────────────────────┼──────┤
│ DomainError         │ ValidationError / 400        │ 400  │
│ InvalidArgument     │ ValidationError / 400        │ 400  │
│ PermissionDenied    │ PermissionDenied / 403       │ 403  │
│ NotFound            │ NotFound / 404               │ 404  │
│ Conflict            │ APIException / 409           │ 409  │
└─────────────────────┴──────────────────────────────┴──────┘

Recommended usage inside a service::

    from core.domain.exceptions import InvalidArgument

    status = RequestStatus.parse(raw_value)
    if status is None:
        raise InvalidArgument(
            f"Invalid status value: {raw_value}", value=raw_value,
        )
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Catch this at the view boundary and convert to a 400 Bad Request.
    """

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class InvalidArgument(DomainError):
    """
    An input value cannot be accepted as given — an unknown status name,
    a transition into the status the resource already has, or a field
    that may not be changed through the operation.

    The offending value is kept on ``value`` so callers can echo it.
    Maps to HTTP 400.
    """

    def __init__(
        self,
        message: str = "Invalid argument.",
        *,
        value: Any = None,
    ) -> None:
        super().__init__(message)
        self.value = value


class PermissionDenied(DomainError):
    """
    The authenticated user does not have the required role for this
    operation.

    Maps to HTTP 403.
    """

    def __init__(self, message: str = "You do not have permission to perform this action.") -> None:
        super().__init__(message)


class NotFound(DomainError):
    """
    The requested resource does not exist (or is not visible to the
    requesting user).

    Maps to HTTP 404.
    """

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)

    @classmethod
    def for_resource(cls, resource: str, field: str, value: Any) -> "NotFound":
        """Build the standard ``"<Resource> not found with <field>: <value>"`` error."""
        return cls(f"{resource} not found with {field}: {value}")


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the resource.

    Maps to HTTP 409.
    """

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)
