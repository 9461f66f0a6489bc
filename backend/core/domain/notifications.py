"""
core.domain.notifications — Synchronous notification creation helper.

Centralises notification creation so every app uses one consistent
entry-point rather than directly constructing ``Notification`` objects.

Design decisions
----------------
* **Synchronous** — all DB writes happen in the calling thread and inside
  the caller's transaction, so a status change and the notification it
  produces commit (or roll back) together.
* **Supports multiple recipients** — pass a single ``User`` or an
  iterable of ``User`` instances.
* **Templated messages** — ``event_type`` selects a ``(title, message)``
  pair from ``_EVENT_TEMPLATES``; the message is rendered with
  ``str.format(**payload)``.

Usage::

    from core.domain.notifications import NotificationService

    NotificationService.create(
        actor=registrar,
        recipients=doc_request.user,
        event_type="request_status_changed",
        payload={"reference": "REQ-42", "document": "Diploma Copy", "status": "APPROVED"},
        related_request=doc_request,
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable

from django.db import models

if TYPE_CHECKING:
    from accounts.models import User
    from core.models import Notification

logger = logging.getLogger(__name__)

# ── Event-type → human-readable templates ───────────────────────────
_EVENT_TEMPLATES: dict[str, tuple[str, str]] = {
    # event_type: (title, message_template)
    "request_submitted": (
        "New Document Request",
        "New request {reference} from {student} for {document}.",
    ),
    "request_status_changed": (
        "Request Status Updated",
        "Your request {reference} for {document} is now {status}.",
    ),
}


def _render(template: str, payload: dict[str, Any]) -> str:
    try:
        return template.format(**payload)
    except (KeyError, IndexError, ValueError):
        logger.warning("Notification template %r missing payload keys %r", template, sorted(payload))
        return template


class NotificationService:
    """
    Stateless helper for creating ``Notification`` records.

    All methods are classmethods — no instance state is needed.
    """

    @classmethod
    def render(cls, event_type: str, payload: dict[str, Any] | None = None) -> tuple[str, str]:
        """Return the ``(title, message)`` pair for an event."""
        payload = payload or {}
        title, template = _EVENT_TEMPLATES.get(
            event_type,
            (event_type.replace("_", " ").title(), f"Event: {event_type}"),
        )
        message = _render(template, payload)
        suffix = payload.get("suffix")
        if suffix:
            message = f"{message} {suffix}"
        return title, message

    @classmethod
    def create(
        cls,
        *,
        recipients: User | Iterable[User],
        event_type: str,
        payload: dict[str, Any] | None = None,
        related_request: models.Model | None = None,
        actor: User | None = None,
    ) -> list[Notification]:
        """
        Create one ``Notification`` per recipient.

        Args:
            recipients:      A single ``User`` or iterable of ``User``
                             instances.
            event_type:      Key into ``_EVENT_TEMPLATES``.  If unknown
                             the raw event_type is used as title.
            payload:         Values interpolated into the message
                             template.  An optional ``suffix`` key is
                             appended verbatim after the rendered text.
            related_request: Optional ``DocumentRequest`` the
                             notification is about.
            actor:           The user who triggered the event (logging
                             only).

        Returns:
            List of created ``Notification`` instances.
        """
        from core.models import Notification  # lazy: core must not import app models at load time

        # Normalise recipients to a list
        if isinstance(recipients, models.Model):
            recipients = [recipients]
        else:
            recipients = list(recipients)

        if not recipients:
            logger.warning(
                "NotificationService.create called with empty recipients "
                "for event_type=%s by actor=%s",
                event_type,
                actor,
            )
            return []

        title, message = cls.render(event_type, payload)

        notifications: list[Notification] = []
        for recipient in recipients:
            notif = Notification.objects.create(
                recipient=recipient,
                title=title,
                message=message,
                request=related_request,
            )
            notifications.append(notif)

        logger.info(
            "Created %d notification(s) [%s] by actor=%s",
            len(notifications),
            event_type,
            actor,
        )
        return notifications
