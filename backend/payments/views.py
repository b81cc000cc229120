import logging

from rest_framework import generics, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from orders.serializers import OrderSerializer
from orders.services import OrderLedger
from .serializers import (
    ChangePaymentMethodSerializer,
    CreateSubOrderSerializer,
    PayFullSerializer,
    PaymentMethodChangeSerializer,
    PaymentSerializer,
    PaySplitSerializer,
    ReceiptMethodSerializer,
    SplitResultSerializer,
    SubOrderSerializer,
)
from .services import PaymentReconciler

logger = logging.getLogger(__name__)


class PayOrderView(generics.GenericAPIView):
    """
    Pays an order in full with a single method.
    Lines are stamped paid; their kitchen status is left as it is.
    """

    serializer_class = PayFullSerializer
    permission_classes = [AllowAny]

    def post(self, request, order_id, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = PaymentReconciler.pay_full(order_id, **serializer.validated_data)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


class ChangePaymentMethodView(generics.GenericAPIView):
    serializer_class = ChangePaymentMethodSerializer
    permission_classes = [AllowAny]

    def post(self, request, order_id, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = PaymentReconciler.change_payment_method(order_id, **serializer.validated_data)
        return Response(OrderSerializer(OrderLedger.get_order(order.id)).data)


class PaymentChangesView(generics.ListAPIView):
    serializer_class = PaymentMethodChangeSerializer
    permission_classes = [AllowAny]
    pagination_class = None

    def get_queryset(self):
        return PaymentReconciler.payment_changes(self.kwargs["order_id"])


class OrderSubOrdersView(generics.ListAPIView):
    serializer_class = SubOrderSerializer
    permission_classes = [AllowAny]
    pagination_class = None

    def get_queryset(self):
        return PaymentReconciler.sub_orders(self.kwargs["order_id"])


class ReceiptMethodsView(generics.GenericAPIView):
    """
    POST replaces the split of a receipt.
    GET /receipt-methods/<receipt_id>/ returns its current rows.
    """

    serializer_class = PaySplitSerializer
    permission_classes = [AllowAny]

    def get(self, request, receipt_id=None, *args, **kwargs):
        rows = PaymentReconciler.get_receipt_methods(receipt_id)
        return Response(ReceiptMethodSerializer(rows, many=True).data)

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = PaymentReconciler.pay_split(
            [dict(row) for row in data["methods"]],
            receipt_id=data.get("receipt_id"),
            order_id=data.get("order_id"),
            changed_by=data.get("changed_by") or "system",
        )
        return Response(SplitResultSerializer(result).data, status=status.HTTP_201_CREATED)


class SubOrderCreateView(generics.GenericAPIView):
    serializer_class = CreateSubOrderSerializer
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sub_order = PaymentReconciler.create_sub_order(**serializer.validated_data)
        return Response(SubOrderSerializer(sub_order).data, status=status.HTTP_201_CREATED)
