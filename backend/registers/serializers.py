from rest_framework import serializers

from .models import CashRegisterLog


class CashRegisterLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = CashRegisterLog
        fields = ["id", "type", "amount", "note", "created_at"]
        read_only_fields = fields


class RegisterEntrySerializer(serializers.Serializer):
    """Input for opening or closing the register."""

    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, default=0)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class RegisterStatusSerializer(serializers.Serializer):
    status = serializers.CharField()
    opening_cash = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    previous_close = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    last_open_at = serializers.DateTimeField(allow_null=True)
    last_close_at = serializers.DateTimeField(allow_null=True)
