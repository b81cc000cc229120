from rest_framework import generics
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from orders.serializers import OrderSerializer
from orders.services import OrderLedger
from .serializers import MergeOrderSerializer, MoveOrderSerializer, TableSerializer
from .services import TableAllocator


class TableListView(generics.ListAPIView):
    serializer_class = TableSerializer
    permission_classes = [AllowAny]
    pagination_class = None

    def get_queryset(self):
        return TableAllocator.list_tables()


class MoveOrderView(generics.GenericAPIView):
    """Moves an open order to a free table; 409 when the table is taken."""

    serializer_class = MoveOrderSerializer
    permission_classes = [AllowAny]

    def post(self, request, order_id, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = TableAllocator.move(order_id, serializer.validated_data["new_table_number"])
        return Response(OrderSerializer(OrderLedger.get_order(order.id)).data)


class MergeOrderView(generics.GenericAPIView):
    """Folds an order into the open order at another table and returns the target."""

    serializer_class = MergeOrderSerializer
    permission_classes = [AllowAny]

    def post(self, request, order_id, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        target = TableAllocator.merge(order_id, serializer.validated_data["target_table_number"])
        return Response(OrderSerializer(OrderLedger.get_order(target.id)).data)
