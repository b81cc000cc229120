from django.urls import path

from .views import (
    ChangePaymentMethodView,
    OrderSubOrdersView,
    PaymentChangesView,
    PayOrderView,
    ReceiptMethodsView,
    SubOrderCreateView,
)

app_name = "payments"

urlpatterns = [
    # Per-order payments
    path("orders/<int:order_id>/pay/", PayOrderView.as_view(), name="pay-order"),
    path(
        "orders/<int:order_id>/payment-method/",
        ChangePaymentMethodView.as_view(),
        name="change-payment-method",
    ),
    path(
        "orders/<int:order_id>/payment-changes/",
        PaymentChangesView.as_view(),
        name="payment-changes",
    ),
    path("orders/<int:order_id>/sub-orders/", OrderSubOrdersView.as_view(), name="order-sub-orders"),
    # Split receipts
    path("receipt-methods/", ReceiptMethodsView.as_view(), name="receipt-methods"),
    path(
        "receipt-methods/<uuid:receipt_id>/",
        ReceiptMethodsView.as_view(),
        name="receipt-methods-detail",
    ),
    # Partial payments
    path("sub-orders/", SubOrderCreateView.as_view(), name="sub-orders"),
]
