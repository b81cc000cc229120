import logging

from rest_framework import mixins, status, viewsets
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from orders.models import Order
from orders.serializers import (
    OrderCreateSerializer,
    OrderListQuerySerializer,
    OrderSerializer,
    UpdateOrderStatusSerializer,
    UpsertItemsSerializer,
)
from orders.services import OrderLedger

# Import action mixins
from .item_actions import ItemActionsMixin
from .status_actions import StatusActionsMixin

logger = logging.getLogger(__name__)


class OrderViewSet(
    ItemActionsMixin,
    StatusActionsMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for the order ledger.

    This viewset combines multiple mixins to provide:
    - Line upserts (ItemActionsMixin)
    - Status transitions (StatusActionsMixin)

    Listing returns open orders unless ?include_closed=true; filter with
    ?table_number= and ?kind=.
    """
    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        if self.action != "list":
            return Order.objects.prefetch_related("items")

        query = OrderListQuerySerializer(data=self.request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        if params["include_closed"]:
            queryset = Order.objects.prefetch_related("items").order_by("-created_at", "-id")
        else:
            queryset = OrderLedger.open_orders()

        if params.get("table_number") is not None:
            queryset = queryset.filter(table_number=params["table_number"])
        if params.get("kind"):
            queryset = queryset.filter(kind=params["kind"])
        return queryset

    def get_serializer_class(self):
        """
        Write actions validate with their own input serializers; every
        response is rendered with OrderSerializer.
        """
        if self.action == "create":
            return OrderCreateSerializer
        if self.action == "update_status":
            return UpdateOrderStatusSerializer
        if self.action == "items":
            return UpsertItemsSerializer
        return OrderSerializer

    def retrieve(self, request, pk=None):
        order = OrderLedger.get_order(pk)
        return Response(OrderSerializer(order).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = OrderLedger.create_order(
            kind=data["kind"],
            table_number=data.get("table_number"),
            customer=data.get("customer"),
            items=data["items"],
            total=data["total"],
            payment_method=data.get("payment_method"),
        )
        order = OrderLedger.get_order(order.id)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)
