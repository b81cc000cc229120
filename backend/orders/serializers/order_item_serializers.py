from rest_framework import serializers

from orders.models import OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "order",
            "product",
            "name",
            "display_name",
            "quantity",
            "price",
            "ingredients",
            "extras",
            "unique_id",
            "confirmed",
            "kitchen_status",
            "payment_method",
            "paid_at",
            "receipt_id",
            "sub_order",
            "note",
            "discount_type",
            "discount_value",
            "created_at",
        ]
        read_only_fields = fields


class KitchenQueueItemSerializer(OrderItemSerializer):
    """Queue line with the order context a kitchen screen needs."""

    table_number = serializers.IntegerField(source="order.table_number", read_only=True)
    order_kind = serializers.CharField(source="order.kind", read_only=True)
    order_status = serializers.CharField(source="order.status", read_only=True)
    order_created_at = serializers.DateTimeField(source="order.created_at", read_only=True)
    customer_name = serializers.CharField(source="order.customer_name", read_only=True)
    customer_address = serializers.CharField(source="order.customer_address", read_only=True)
    product_category = serializers.SerializerMethodField()

    class Meta(OrderItemSerializer.Meta):
        fields = OrderItemSerializer.Meta.fields + [
            "table_number",
            "order_kind",
            "order_status",
            "order_created_at",
            "customer_name",
            "customer_address",
            "product_category",
        ]
        read_only_fields = fields

    def get_product_category(self, obj):
        return obj.product.category if obj.product_id else None
