from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.serializers import OrderItemSerializer
from orders.services import OrderLedger


class ItemActionsMixin:
    """
    Mixin for order line actions

    This mixin provides action methods for OrderViewSet.
    """

    @action(detail=True, methods=["get", "post"], url_path="items")
    def items(self, request: Request, pk=None) -> Response:
        """
        GET lists the lines of the order.
        POST upserts lines keyed on unique_id; resending a line only
        refreshes its discount.
        """
        if request.method == "GET":
            order = OrderLedger.get_order(pk)
            return Response(OrderItemSerializer(order.items.order_by("id"), many=True).data)

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        saved = OrderLedger.upsert_items(
            pk,
            serializer.validated_data["items"],
            receipt_id=serializer.validated_data.get("receipt_id"),
        )
        return Response(OrderItemSerializer(saved, many=True).data, status=status.HTTP_201_CREATED)
