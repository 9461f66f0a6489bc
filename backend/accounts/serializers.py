"""
Accounts app serializers.

Output-only representations of ``User``.  Account creation and password
changes are handled by Django's auth stack, not by these serializers.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user representation embedded in other payloads."""

    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "display_name", "role", "student_id"]
        read_only_fields = fields


class UserDetailSerializer(serializers.ModelSerializer):
    """Full profile returned by ``GET /api/accounts/me/``."""

    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "display_name",
            "role",
            "student_id",
            "admin_id",
            "date_joined",
        ]
        read_only_fields = fields
