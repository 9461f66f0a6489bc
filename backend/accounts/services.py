"""
Accounts Service Layer.

Exposes the **User Directory** the request lifecycle depends on: look a
user up by id, and list everyone holding a given role.  Registration,
login and password handling are owned by Django's auth stack and are not
part of this service.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model
from django.db.models import QuerySet

from .models import UserRole

User = get_user_model()


class UserDirectory:
    """
    Read-only lookups over ``User``.

    ``find_by_id`` returns ``None`` for unknown ids instead of raising,
    because its callers (request enrichment, status-log display names)
    degrade gracefully when a user has disappeared.
    """

    def find_by_id(self, user_id: Any) -> User | None:
        if user_id is None:
            return None
        return User.objects.filter(pk=user_id).first()

    def find_by_ids(self, user_ids) -> dict[Any, User]:
        """Bulk variant of ``find_by_id`` keyed by PK; unknown ids are absent."""
        ids = {uid for uid in user_ids if uid is not None}
        if not ids:
            return {}
        return {user.pk: user for user in User.objects.filter(pk__in=ids)}

    def find_by_role(self, role: str) -> QuerySet:
        return User.objects.filter(role=role).order_by("id")

    def find_registrars(self) -> QuerySet:
        return self.find_by_role(UserRole.REGISTRAR)
