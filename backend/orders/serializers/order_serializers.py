from rest_framework import serializers

from orders.models import Order
from .order_item_serializers import OrderItemSerializer


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "kind",
            "table_number",
            "status",
            "total",
            "payment_method",
            "is_paid",
            "receipt_id",
            "customer_name",
            "customer_phone",
            "customer_address",
            "prep_started_at",
            "estimated_ready_at",
            "kitchen_delivered_at",
            "driver_id",
            "driver_status",
            "picked_up_at",
            "delivered_at",
            "created_at",
            "updated_at",
            "items",
        ]
        read_only_fields = fields


class OrderCustomerInfoSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    address = serializers.CharField(required=False, allow_blank=True, default="")


class OrderCreateSerializer(serializers.Serializer):
    """
    Input for opening an order. Item lines are passed through as dicts and
    validated by the ledger.
    """

    kind = serializers.ChoiceField(choices=Order.OrderKind.choices, default=Order.OrderKind.TABLE)
    table_number = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    customer = OrderCustomerInfoSerializer(required=False)
    items = serializers.ListField(child=serializers.DictField(), required=False, default=list)
    total = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, default=0)
    payment_method = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class UpsertItemsSerializer(serializers.Serializer):
    items = serializers.ListField(child=serializers.DictField(), allow_empty=False)
    receipt_id = serializers.UUIDField(required=False, allow_null=True)


class OrderListQuerySerializer(serializers.Serializer):
    include_closed = serializers.BooleanField(required=False, default=False)
    table_number = serializers.IntegerField(required=False, min_value=0)
    kind = serializers.ChoiceField(choices=Order.OrderKind.choices, required=False)
