"""
Document-requests app ViewSets.

Views are intentionally thin.  Every view follows the same pattern:

    1. Parse / validate input via a serializer.
    2. Check who the caller is (owner or registrar).
    3. Delegate to the service layer and serialize the result.

Domain exceptions are translated to HTTP responses by
``core.domain.exception_handler``.

ViewSets
--------
- ``DocumentRequestViewSet`` — request CRUD plus the ``status``,
  ``claim-slip`` and ``status-logs`` actions.
- ``StatusLogViewSet``       — audit trail listing and remarks correction.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from core.domain.access import (
    IsRegistrar,
    is_registrar,
    require_owner_or_registrar,
    require_registrar,
)

from .serializers import (
    ClaimSlipSerializer,
    DocumentRequestCreateSerializer,
    DocumentRequestSerializer,
    DocumentRequestUpdateSerializer,
    RequestFilterSerializer,
    RequestStatusLogSerializer,
    StatusChangeSerializer,
    StatusLogRemarksSerializer,
)
from .services import (
    ClaimSlipService,
    RequestCreationService,
    RequestEditService,
    RequestQueryService,
    RequestWorkflowService,
    StatusLogService,
)

logger = logging.getLogger(__name__)


class DocumentRequestViewSet(viewsets.ViewSet):
    """
    Central ViewSet for document requests.

    Registrars see and manage every request; students see and manage only
    their own.  Status changes are registrar-only.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def _get_accessible(self, request: Request, pk):
        doc_request = RequestQueryService().get_raw(pk)
        require_owner_or_registrar(request.user, doc_request.user_id)
        return doc_request

    # ── Standard CRUD ────────────────────────────────────────────────

    @extend_schema(
        summary="List document requests",
        description=(
            "Registrars receive every request (optionally narrowed to one "
            "owner with ``user``); students receive their own requests."
        ),
        parameters=[
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY, description="Filter by request status."),
            OpenApiParameter(name="user", type=int, location=OpenApiParameter.QUERY, description="Registrars only: filter by owner PK."),
        ],
        responses={200: OpenApiResponse(response=DocumentRequestSerializer(many=True), description="Requests, newest first.")},
        tags=["Requests"],
    )
    def list(self, request: Request) -> Response:
        filter_serializer = RequestFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        filters = filter_serializer.validated_data
        status_filter = filters.get("status") or None
        service = RequestQueryService()
        if is_registrar(request.user):
            owner = filters.get("user")
            if owner is not None:
                requests = service.list_by_user(owner, status=status_filter)
            else:
                requests = service.list_all(status=status_filter)
        else:
            requests = service.list_by_user(request.user.pk, status=status_filter)
        return Response(DocumentRequestSerializer(requests, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Create a document request",
        request=DocumentRequestCreateSerializer,
        responses={201: OpenApiResponse(response=DocumentRequestSerializer, description="Created PENDING request.")},
        tags=["Requests"],
    )
    def create(self, request: Request) -> Response:
        serializer = DocumentRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        doc_request = RequestCreationService().create_request(
            user=request.user,
            document_id=data["document"],
            copies=data["copies"],
            date_needed=data.get("date_needed"),
            purpose=data.get("purpose", ""),
        )
        enriched = RequestQueryService().get_by_id(doc_request.pk)
        return Response(DocumentRequestSerializer(enriched).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve a document request",
        responses={200: OpenApiResponse(response=DocumentRequestSerializer, description="Enriched request.")},
        tags=["Requests"],
    )
    def retrieve(self, request: Request, pk=None) -> Response:
        self._get_accessible(request, pk)
        doc_request = RequestQueryService().get_by_id(pk)
        return Response(DocumentRequestSerializer(doc_request).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update request fields",
        description="Editable: copies, date_needed, purpose, document. Status moves use the status action.",
        request=DocumentRequestUpdateSerializer,
        responses={200: OpenApiResponse(response=DocumentRequestSerializer, description="Updated request.")},
        tags=["Requests"],
    )
    def partial_update(self, request: Request, pk=None) -> Response:
        self._get_accessible(request, pk)
        serializer = DocumentRequestUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        doc_request = RequestEditService().update_fields(pk, dict(serializer.validated_data))
        return Response(DocumentRequestSerializer(doc_request).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Delete a document request",
        responses={204: OpenApiResponse(description="Deleted.")},
        tags=["Requests"],
    )
    def destroy(self, request: Request, pk=None) -> Response:
        self._get_accessible(request, pk)
        RequestEditService.delete(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ── Workflow ─────────────────────────────────────────────────────

    @extend_schema(
        summary="Change request status",
        description=(
            "Registrar only.  Any status may follow any other except itself. "
            "The first approval stamps ``date_ready`` and issues a claim slip; "
            "the owner is notified of every change."
        ),
        request=StatusChangeSerializer,
        responses={
            200: OpenApiResponse(response=DocumentRequestSerializer, description="Updated, enriched request."),
            400: OpenApiResponse(description="Unknown status or request already in that status."),
            403: OpenApiResponse(description="Caller is not a registrar."),
            404: OpenApiResponse(description="Request not found."),
        },
        tags=["Requests – Workflow"],
    )
    @action(
        detail=True,
        methods=["post"],
        url_path="status",
        url_name="status",
        permission_classes=[IsAuthenticated, IsRegistrar],
    )
    def change_status(self, request: Request, pk=None) -> Response:
        serializer = StatusChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        doc_request = RequestWorkflowService().change_status(
            pk,
            data["new_status"],
            acting_user=request.user,
            remarks=data.get("remarks", ""),
            date_ready_hint=data.get("date_ready"),
        )
        return Response(DocumentRequestSerializer(doc_request).data, status=status.HTTP_200_OK)

    # ── Sub-resources ────────────────────────────────────────────────

    @extend_schema(
        summary="Claim slip of a request",
        responses={
            200: OpenApiResponse(response=ClaimSlipSerializer, description="Issued claim slip."),
            404: OpenApiResponse(description="Request not found or slip not issued yet."),
        },
        tags=["Requests"],
    )
    @action(detail=True, methods=["get"], url_path="claim-slip", url_name="claim-slip")
    def claim_slip(self, request: Request, pk=None) -> Response:
        doc_request = self._get_accessible(request, pk)
        slip = ClaimSlipService().get_for_request(doc_request.pk)
        return Response(ClaimSlipSerializer(slip).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Status history of a request",
        responses={200: OpenApiResponse(response=RequestStatusLogSerializer(many=True), description="Oldest first.")},
        tags=["Requests"],
    )
    @action(detail=True, methods=["get"], url_path="status-logs", url_name="status-logs")
    def status_logs(self, request: Request, pk=None) -> Response:
        doc_request = self._get_accessible(request, pk)
        logs = StatusLogService().list_for_request(doc_request.pk)
        return Response(RequestStatusLogSerializer(logs, many=True).data, status=status.HTTP_200_OK)


class StatusLogViewSet(viewsets.ViewSet):
    """
    GET   /api/status-logs/       → registrar: every entry; student: own requests
    PATCH /api/status-logs/{id}/  → registrar only, corrects ``remarks``
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    @extend_schema(
        summary="List status logs",
        responses={200: OpenApiResponse(response=RequestStatusLogSerializer(many=True), description="Newest first.")},
        tags=["Status Logs"],
    )
    def list(self, request: Request) -> Response:
        service = StatusLogService()
        if is_registrar(request.user):
            logs = service.list_all()
        else:
            logs = service.list_for_owner(request.user.pk)
        return Response(RequestStatusLogSerializer(logs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Correct status log remarks",
        request=StatusLogRemarksSerializer,
        responses={200: OpenApiResponse(response=RequestStatusLogSerializer, description="Corrected entry.")},
        tags=["Status Logs"],
    )
    def partial_update(self, request: Request, pk=None) -> Response:
        require_registrar(request.user)
        serializer = StatusLogRemarksSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        log = StatusLogService().correct_remarks(pk, serializer.validated_data["remarks"])
        return Response(RequestStatusLogSerializer(log).data, status=status.HTTP_200_OK)
