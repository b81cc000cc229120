"""
Orders serializers package - modular serializer layer.
"""

# Order item serializers
from .order_item_serializers import (
    KitchenQueueItemSerializer,
    OrderItemSerializer,
)

# Order serializers
from .order_serializers import (
    OrderCreateSerializer,
    OrderCustomerInfoSerializer,
    OrderListQuerySerializer,
    OrderSerializer,
    UpsertItemsSerializer,
)

# Status serializers
from .status_serializers import UpdateOrderStatusSerializer

__all__ = [
    # Order items
    'KitchenQueueItemSerializer',
    'OrderItemSerializer',
    # Orders
    'OrderCreateSerializer',
    'OrderCustomerInfoSerializer',
    'OrderListQuerySerializer',
    'OrderSerializer',
    'UpsertItemsSerializer',
    # Status
    'UpdateOrderStatusSerializer',
]
