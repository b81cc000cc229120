from rest_framework import serializers

from orders.models import Order


class ClaimSerializer(serializers.Serializer):
    driver_id = serializers.IntegerField(min_value=1)


class DriverStatusSerializer(serializers.Serializer):
    driver_status = serializers.ChoiceField(choices=Order.DriverStatus.choices)


class DriverLocationSerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)


class DriverReportQuerySerializer(serializers.Serializer):
    date = serializers.DateField()


class DriverReportOrderSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    payment_method = serializers.CharField(allow_null=True)
    customer_name = serializers.CharField(allow_blank=True)
    customer_address = serializers.CharField(allow_blank=True)
    created_at = serializers.DateTimeField()
    picked_up_at = serializers.DateTimeField(allow_null=True)
    delivered_at = serializers.DateTimeField(allow_null=True)
    total = serializers.DecimalField(max_digits=10, decimal_places=2)
    delivery_time_seconds = serializers.FloatField(allow_null=True)
    kitchen_to_delivery_seconds = serializers.FloatField(allow_null=True)


class DriverReportSerializer(serializers.Serializer):
    driver_id = serializers.IntegerField()
    date = serializers.DateField()
    packets_delivered = serializers.IntegerField()
    total_sales = serializers.DecimalField(max_digits=12, decimal_places=2)
    sales_by_method = serializers.DictField(
        child=serializers.DecimalField(max_digits=12, decimal_places=2)
    )
    orders = DriverReportOrderSerializer(many=True)
