from rest_framework import serializers

from .models import Payment, PaymentMethodChange, ReceiptMethod, SubOrder


# ============================================================================
# READ SERIALIZERS
# ============================================================================

class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ["id", "order", "amount", "payment_method", "created_at"]
        read_only_fields = fields


class SubOrderSerializer(serializers.ModelSerializer):
    item_ids = serializers.PrimaryKeyRelatedField(source="items", many=True, read_only=True)

    class Meta:
        model = SubOrder
        fields = ["id", "order", "total", "payment_method", "receipt_id", "created_at", "item_ids"]
        read_only_fields = fields


class ReceiptMethodSerializer(serializers.ModelSerializer):
    class Meta:
        model = ReceiptMethod
        fields = ["receipt_id", "payment_method", "amount"]
        read_only_fields = fields


class PaymentMethodChangeSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentMethodChange
        fields = ["id", "order", "old_method", "new_method", "changed_by", "changed_at"]
        read_only_fields = fields


class SplitResultSerializer(serializers.Serializer):
    receipt_id = serializers.UUIDField()
    payment_method = serializers.CharField(allow_null=True)
    total = serializers.DecimalField(max_digits=10, decimal_places=2)


# ============================================================================
# INPUT SERIALIZERS
# ============================================================================

class PayFullSerializer(serializers.Serializer):
    payment_method = serializers.CharField(max_length=100)
    total = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)


class SplitMethodSerializer(serializers.Serializer):
    method = serializers.CharField(max_length=100)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)


class PaySplitSerializer(serializers.Serializer):
    """
    Body of a split payment. The receipt rows are replaced by `methods`.
    """

    methods = SplitMethodSerializer(many=True)
    receipt_id = serializers.UUIDField(required=False, allow_null=True)
    order_id = serializers.IntegerField(required=False, allow_null=True)
    changed_by = serializers.CharField(max_length=100, required=False, default="system")


class CreateSubOrderSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    total = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    payment_method = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)
    items = serializers.ListField(child=serializers.DictField(), required=False, default=list)
    receipt_id = serializers.UUIDField(required=False, allow_null=True)


class ChangePaymentMethodSerializer(serializers.Serializer):
    payment_method = serializers.CharField(max_length=100)
    changed_by = serializers.CharField(max_length=100, required=False, default="system")
