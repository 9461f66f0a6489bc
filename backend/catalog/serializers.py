"""Catalog app serializers."""

from rest_framework import serializers

from .models import Document


class DocumentSerializer(serializers.ModelSerializer):

    class Meta:
        model = Document
        fields = ["id", "name", "description", "is_active"]
        read_only_fields = fields
