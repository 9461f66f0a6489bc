"""
Payments app views — nested under a document request.

    GET  /api/requests/{request_pk}/payments/  → owner or registrar
    POST /api/requests/{request_pk}/payments/  → owner only
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from drf_spectacular.utils import OpenApiResponse, extend_schema

from core.domain.access import require_owner_or_registrar
from core.domain.exceptions import PermissionDenied
from doc_requests.services import RequestQueryService

from .serializers import PaymentCreateSerializer, PaymentSerializer
from .services import PaymentLedger


class RequestPaymentViewSet(viewsets.ViewSet):

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List payments of a request",
        responses={200: OpenApiResponse(response=PaymentSerializer(many=True), description="Payments, newest first.")},
        tags=["Payments"],
    )
    def list(self, request: Request, request_pk: int = None) -> Response:
        doc_request = RequestQueryService().get_raw(request_pk)
        require_owner_or_registrar(request.user, doc_request.user_id)
        payments = PaymentLedger().list_for_request(doc_request.pk)
        return Response(PaymentSerializer(payments, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Record proof of payment",
        request=PaymentCreateSerializer,
        responses={201: OpenApiResponse(response=PaymentSerializer, description="Recorded payment.")},
        tags=["Payments"],
    )
    def create(self, request: Request, request_pk: int = None) -> Response:
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        doc_request = RequestQueryService().get_raw(request_pk)
        if doc_request.user_id != request.user.pk:
            raise PermissionDenied("You can only create payments for your own requests.")
        payment = PaymentLedger().record(
            doc_request=doc_request,
            proof_of_payment=serializer.validated_data["proof_of_payment"],
            remarks=serializer.validated_data.get("remarks", ""),
        )
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)
