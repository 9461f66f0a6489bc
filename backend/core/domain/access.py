"""
core.domain.access — Role checks shared by every app's service layer.

The HTTP layer identifies the caller; these helpers answer the only two
authorization questions the system asks:

1) Is the caller a registrar?
2) Is the caller the owner of a resource (or a registrar)?

Usage in an app's service or view::

    from core.domain.access import require_owner_or_registrar, require_registrar

    require_registrar(request.user)
    require_owner_or_registrar(request.user, doc_request.user_id)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rest_framework.permissions import BasePermission

from core.domain.exceptions import PermissionDenied

if TYPE_CHECKING:
    from accounts.models import User


def get_user_role_name(user: User) -> str | None:
    """
    Return the role value for a user (``"REGISTRAR"`` / ``"STUDENT"``),
    or ``None`` for anonymous users.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return getattr(user, "role", None)


def is_registrar(user: User) -> bool:
    from accounts.models import UserRole

    return get_user_role_name(user) == UserRole.REGISTRAR


def require_registrar(user: User, message: str = "") -> None:
    """
    Guard that raises ``PermissionDenied`` unless ``user`` is a registrar.
    """
    if not is_registrar(user):
        raise PermissionDenied(
            message or "Only registrars can perform this action."
        )


def require_owner_or_registrar(user: User, owner_id: Any, message: str = "") -> None:
    """
    Guard that raises ``PermissionDenied`` unless ``user`` owns the
    resource (``owner_id == user.pk``) or is a registrar.
    """
    if is_registrar(user):
        return
    if user is not None and owner_id is not None and user.pk == owner_id:
        return
    raise PermissionDenied(
        message or "You can only access your own requests."
    )


class IsRegistrar(BasePermission):
    """DRF permission class: authenticated registrars only."""

    message = "Only registrars can perform this action."

    def has_permission(self, request, view) -> bool:
        return is_registrar(request.user)
