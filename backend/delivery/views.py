import logging

from rest_framework import generics, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core_backend.exceptions import NotFoundError
from orders.serializers import OrderSerializer
from orders.services import OrderLedger
from .locations import DriverLocationCache
from .serializers import (
    ClaimSerializer,
    DriverLocationSerializer,
    DriverReportQuerySerializer,
    DriverReportSerializer,
    DriverStatusSerializer,
)
from .services import DriverDispatchService

logger = logging.getLogger(__name__)


class ClaimOrderView(generics.GenericAPIView):
    """
    Claims a delivery order for a driver.
    Returns 409 when another driver got there first.
    """

    serializer_class = ClaimSerializer
    permission_classes = [AllowAny]

    def post(self, request, order_id, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = DriverDispatchService.claim(order_id, serializer.validated_data["driver_id"])
        return Response(OrderSerializer(OrderLedger.get_order(order.id)).data)


class DriverStatusView(generics.GenericAPIView):
    serializer_class = DriverStatusSerializer
    permission_classes = [AllowAny]

    def post(self, request, order_id, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = DriverDispatchService.update_driver_status(
            order_id, serializer.validated_data["driver_status"]
        )
        return Response(OrderSerializer(OrderLedger.get_order(order.id)).data)

    patch = post


class DriverLocationView(generics.GenericAPIView):
    serializer_class = DriverLocationSerializer
    permission_classes = [AllowAny]

    def get(self, request, driver_id, *args, **kwargs):
        fix = DriverLocationCache().get(driver_id)
        if fix is None:
            raise NotFoundError("No location for driver", driver_id=driver_id)
        return Response(fix)

    def put(self, request, driver_id, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        fix = DriverLocationCache().update(driver_id, **serializer.validated_data)
        return Response(fix, status=status.HTTP_200_OK)

    post = put


class DriverReportView(generics.GenericAPIView):
    """
    Daily report of a driver: GET /drivers/<id>/report/?date=YYYY-MM-DD
    """

    serializer_class = DriverReportQuerySerializer
    permission_classes = [AllowAny]

    def get(self, request, driver_id, *args, **kwargs):
        serializer = self.get_serializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        report = DriverDispatchService.driver_report(driver_id, serializer.validated_data["date"])
        return Response(DriverReportSerializer(report).data)
