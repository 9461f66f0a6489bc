"""Payments app serializers."""

from rest_framework import serializers

from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):

    class Meta:
        model = Payment
        fields = ["id", "request", "proof_of_payment", "remarks", "created_at"]
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    proof_of_payment = serializers.CharField(max_length=255)
    remarks = serializers.CharField(required=False, allow_blank=True, default="")
