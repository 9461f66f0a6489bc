"""
Core app serializers.

**Response-only** serializers for the endpoints served by the core app.
The constants serializers work with plain dicts produced by the service
layer; the notification serializer reads ``Notification`` instances.
"""

from __future__ import annotations

from rest_framework import serializers


# ════════════════════════════════════════════════════════════════════
#  System Constants
# ════════════════════════════════════════════════════════════════════

class ChoiceItemSerializer(serializers.Serializer):
    """
    A single key-label pair representing one choice/enum option.

    Example::

        {"value": "APPROVED", "label": "Approved"}
    """

    value = serializers.CharField(
        help_text="Machine-readable value to send in API requests.",
    )
    label = serializers.CharField(
        help_text="Human-readable display label for the UI.",
    )


class SystemConstantsSerializer(serializers.Serializer):
    """
    Top-level response serializer for ``GET /api/core/constants/``.

    Response shape::

        {
            "request_statuses": [{"value": "PENDING", "label": "Pending"}, ...],
            "user_roles": [{"value": "STUDENT", "label": "Student"}, ...]
        }
    """

    request_statuses = ChoiceItemSerializer(many=True)
    user_roles = ChoiceItemSerializer(many=True)


# ════════════════════════════════════════════════════════════════════
#  Notifications
# ════════════════════════════════════════════════════════════════════

class NotificationSerializer(serializers.Serializer):
    """
    Read-only serializer for ``Notification`` instances.

    Used by the Notification ViewSet to list and retrieve notifications
    for the authenticated user.
    """

    id = serializers.IntegerField(read_only=True, help_text="Notification PK.")
    title = serializers.CharField(
        read_only=True,
        help_text="Short notification title.",
    )
    message = serializers.CharField(
        read_only=True,
        help_text="Full notification message body.",
    )
    is_read = serializers.BooleanField(
        read_only=True,
        help_text="Whether the recipient has marked this notification as read.",
    )
    request_id = serializers.IntegerField(
        read_only=True,
        allow_null=True,
        help_text="PK of the related document request, if it still exists.",
    )
    created_at = serializers.DateTimeField(
        read_only=True,
        help_text="When the notification was created.",
    )


class UnreadCountSerializer(serializers.Serializer):
    unread = serializers.IntegerField(help_text="Number of unread notifications.")


class BulkResultSerializer(serializers.Serializer):
    affected = serializers.IntegerField(help_text="Number of notifications changed.")
