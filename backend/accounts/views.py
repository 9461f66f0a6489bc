"""
Accounts app views.

Only the current-user profile lives here; token issuance is delegated to
``djangorestframework-simplejwt`` views wired in ``urls.py``.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiResponse, extend_schema

from .serializers import UserDetailSerializer


class MeView(APIView):
    """
    GET /api/accounts/me/ → Retrieve the authenticated user's profile.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Current user profile",
        responses={200: OpenApiResponse(response=UserDetailSerializer, description="Profile.")},
        tags=["Accounts"],
    )
    def get(self, request: Request) -> Response:
        serializer = UserDetailSerializer(request.user)
        return Response(serializer.data, status=status.HTTP_200_OK)
