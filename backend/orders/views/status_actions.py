from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.serializers import OrderSerializer
from orders.services import OrderLedger


class StatusActionsMixin:
    """
    Mixin for order status transition actions

    This mixin provides action methods for OrderViewSet.
    """

    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request: Request, pk=None) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = OrderLedger.set_status(
            pk,
            data["status"],
            total=data.get("total"),
            payment_method=data.get("payment_method"),
        )
        return Response(OrderSerializer(OrderLedger.get_order(order.id)).data)

    @action(detail=True, methods=["post"], url_path="close")
    def close(self, request: Request, pk=None) -> Response:
        order = OrderLedger.close(pk)
        return Response(OrderSerializer(OrderLedger.get_order(order.id)).data)

    @action(detail=True, methods=["post"], url_path="reopen")
    def reopen(self, request: Request, pk=None) -> Response:
        order = OrderLedger.reopen(pk)
        return Response(OrderSerializer(OrderLedger.get_order(order.id)).data)

    @action(detail=True, methods=["post"], url_path="reset-if-empty")
    def reset_if_empty(self, request: Request, pk=None) -> Response:
        """Closes the order when it has no lines; reports whether it did."""
        closed = OrderLedger.reset_if_empty(pk)
        return Response({"closed": closed})

    @action(detail=True, methods=["post"], url_path="confirm-online")
    def confirm_online(self, request: Request, pk=None) -> Response:
        order = OrderLedger.confirm_online(pk)
        return Response(OrderSerializer(OrderLedger.get_order(order.id)).data)
