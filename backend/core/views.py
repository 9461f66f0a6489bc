"""
Core app views — **Thin Views**.

Each view delegates all business logic to the corresponding service in
``core.services``.  Views are responsible only for:

1. Extracting the authenticated user and path parameters.
2. Calling the service.
3. Serialising the result and returning an HTTP ``Response``.

Domain exceptions raised by services are translated by
``core.domain.exception_handler``.
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiResponse, extend_schema

from .serializers import (
    BulkResultSerializer,
    NotificationSerializer,
    SystemConstantsSerializer,
    UnreadCountSerializer,
)
from .services import NotificationInboxService, SystemConstantsService


class SystemConstantsView(APIView):
    """
    **GET /api/core/constants/**

    Return the request statuses and user roles so the frontend can build
    dropdowns and labels without hardcoding values.

    **Authentication**: Not required (``AllowAny``).
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="System constants",
        description="Return request statuses and user roles.",
        responses={200: OpenApiResponse(response=SystemConstantsSerializer, description="System constants.")},
        tags=["System"],
    )
    def get(self, request: Request) -> Response:
        data = SystemConstantsService.get_constants()
        serializer = SystemConstantsSerializer(data)
        return Response(serializer.data, status=status.HTTP_200_OK)


class NotificationViewSet(viewsets.ViewSet):
    """
    **Notification API** — the authenticated user's inbox.

    Endpoints
    ---------
    GET    /api/core/notifications/                → list all notifications
    GET    /api/core/notifications/unread-count/   → number of unread
    POST   /api/core/notifications/read-all/       → mark every one as read
    DELETE /api/core/notifications/clear/          → delete every one
    POST   /api/core/notifications/{id}/read/      → mark a notification as read
    DELETE /api/core/notifications/{id}/           → delete a notification

    **Authentication**: Required (``IsAuthenticated``).
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    @extend_schema(
        summary="List notifications",
        description="Return all notifications for the authenticated user, newest first.",
        responses={200: OpenApiResponse(response=NotificationSerializer(many=True), description="Notification list.")},
        tags=["Notifications"],
    )
    def list(self, request: Request) -> Response:
        service = NotificationInboxService(user=request.user)
        notifications = service.list_notifications()
        serializer = NotificationSerializer(notifications, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Delete notification",
        responses={204: OpenApiResponse(description="Deleted.")},
        tags=["Notifications"],
    )
    def destroy(self, request: Request, pk: int = None) -> Response:
        NotificationInboxService(user=request.user).delete(notification_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], url_path="unread-count")
    @extend_schema(
        summary="Unread notification count",
        responses={200: OpenApiResponse(response=UnreadCountSerializer, description="Unread count.")},
        tags=["Notifications"],
    )
    def unread_count(self, request: Request) -> Response:
        count = NotificationInboxService(user=request.user).unread_count()
        return Response(UnreadCountSerializer({"unread": count}).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="read-all")
    @extend_schema(
        summary="Mark all notifications as read",
        request=None,
        responses={200: OpenApiResponse(response=BulkResultSerializer, description="Number updated.")},
        tags=["Notifications"],
    )
    def mark_all_as_read(self, request: Request) -> Response:
        updated = NotificationInboxService(user=request.user).mark_all_as_read()
        return Response(BulkResultSerializer({"affected": updated}).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["delete"], url_path="clear")
    @extend_schema(
        summary="Delete all notifications",
        responses={200: OpenApiResponse(response=BulkResultSerializer, description="Number deleted.")},
        tags=["Notifications"],
    )
    def clear(self, request: Request) -> Response:
        deleted = NotificationInboxService(user=request.user).delete_all()
        return Response(BulkResultSerializer({"affected": deleted}).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="read")
    @extend_schema(
        summary="Mark notification as read",
        description="Mark a single notification as read by ID.  Marking an already-read notification is a no-op.",
        request=None,
        responses={200: OpenApiResponse(response=NotificationSerializer, description="Updated notification.")},
        tags=["Notifications"],
    )
    def mark_as_read(self, request: Request, pk: int = None) -> Response:
        service = NotificationInboxService(user=request.user)
        notification = service.mark_as_read(notification_id=pk)
        serializer = NotificationSerializer(notification)
        return Response(serializer.data, status=status.HTTP_200_OK)
