"""
Core app services — **Service Layer**.

Contains the notification inbox and the system-constants lookup.  Views
delegate all business logic to the service classes defined here, keeping
views thin and ensuring testability.

Models from other apps are never imported at module level; import them
inside the method that needs them (``django.apps.apps.get_model`` or a
local import) so the core app stays free of import cycles.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db.models import QuerySet

from core.domain.exceptions import NotFound

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  System Constants Service
# ═══════════════════════════════════════════════════════════════════


class SystemConstantsService:
    """
    Gathers all system-wide choice enumerations into a single dict for
    the frontend.

    This service is **stateless** — it does not depend on the requesting
    user.
    """

    @staticmethod
    def get_constants() -> dict[str, Any]:
        """Return all system constants as a dict."""
        from accounts.models import UserRole
        from doc_requests.models import RequestStatus

        to_list = SystemConstantsService._choices_to_list

        return {
            "request_statuses": to_list(RequestStatus),
            "user_roles": to_list(UserRole),
        }

    @staticmethod
    def _choices_to_list(
        choices_class: type,
    ) -> list[dict[str, str]]:
        """
        Convert a Django ``TextChoices`` class to a list of
        ``{"value": ..., "label": ...}`` dicts.
        """
        return [
            {"value": str(value), "label": str(label)}
            for value, label in choices_class.choices
        ]


# ═══════════════════════════════════════════════════════════════════
#  Notification Inbox Service
# ═══════════════════════════════════════════════════════════════════


class NotificationInboxService:
    """
    Handles listing, reading and clearing notifications for a given user.

    Every lookup is scoped to ``self.user``; another user's notification
    is reported as missing rather than forbidden.
    """

    def __init__(self, user: Any) -> None:
        self.user = user

    def _queryset(self) -> QuerySet:
        from core.models import Notification

        return Notification.objects.filter(recipient=self.user)

    def list_notifications(self) -> QuerySet:
        """Return all notifications for ``self.user``, ordered most recent first."""
        return self._queryset().order_by("-created_at", "-id")

    def unread_count(self) -> int:
        return self._queryset().filter(is_read=False).count()

    def get_notification(self, notification_id: int) -> Any:
        from core.models import Notification

        try:
            return self._queryset().get(pk=notification_id)
        except Notification.DoesNotExist:
            raise NotFound.for_resource("Notification", "id", notification_id)

    def mark_as_read(self, notification_id: int) -> Any:
        """
        Mark a single notification as read.

        Idempotent: an already-read notification is returned unchanged
        without a write.
        """
        notification = self.get_notification(notification_id)
        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=["is_read"])
        return notification

    def mark_all_as_read(self) -> int:
        """Mark every unread notification as read; return how many changed."""
        updated = self._queryset().filter(is_read=False).update(is_read=True)
        logger.info("Marked %d notification(s) read for user=%s", updated, self.user)
        return updated

    def delete(self, notification_id: int) -> None:
        notification = self.get_notification(notification_id)
        notification.delete()

    def delete_all(self) -> int:
        """Delete every notification of ``self.user``; return how many were removed."""
        deleted, _ = self._queryset().delete()
        logger.info("Deleted %d notification(s) for user=%s", deleted, self.user)
        return deleted
