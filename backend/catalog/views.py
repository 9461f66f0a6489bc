"""
Catalog app views — read-only listing of requestable documents.
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from drf_spectacular.utils import OpenApiResponse, extend_schema

from .serializers import DocumentSerializer
from .services import DocumentCatalog


class DocumentViewSet(viewsets.ViewSet):
    """
    GET /api/documents/       → active catalog entries
    GET /api/documents/{id}/  → one entry (active or not)
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List documents",
        responses={200: OpenApiResponse(response=DocumentSerializer(many=True), description="Catalog.")},
        tags=["Documents"],
    )
    def list(self, request: Request) -> Response:
        documents = DocumentCatalog().list_active()
        return Response(DocumentSerializer(documents, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Retrieve document",
        responses={200: OpenApiResponse(response=DocumentSerializer, description="Document.")},
        tags=["Documents"],
    )
    def retrieve(self, request: Request, pk: int = None) -> Response:
        document = DocumentCatalog().find_by_id(pk)
        return Response(DocumentSerializer(document).data, status=status.HTTP_200_OK)
