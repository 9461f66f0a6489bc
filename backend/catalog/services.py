"""
Catalog app Service Layer.

``DocumentCatalog`` is the lookup the request lifecycle uses to resolve
and validate the document a request refers to.
"""

from __future__ import annotations

from typing import Any

from django.db.models import QuerySet

from core.domain.exceptions import NotFound

from .models import Document


class DocumentCatalog:

    def find_by_id(self, document_id: Any) -> Document:
        """
        Return the document with ``document_id``.

        Raises:
            NotFound: If ``document_id`` is missing or unknown.
        """
        if document_id is None:
            raise NotFound.for_resource("Document", "id", "missing")
        try:
            return Document.objects.get(pk=document_id)
        except (Document.DoesNotExist, ValueError, TypeError):
            raise NotFound.for_resource("Document", "id", document_id)

    def list_active(self) -> QuerySet:
        return Document.objects.filter(is_active=True).order_by("name")
