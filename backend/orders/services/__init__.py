"""
Orders services package.

- OrderLedger: order lifecycle (create, upsert items, status, close, reopen)
- OrderItemService: line-level writes shared by the ledger and payments
"""

# Core order operations
from .order_service import OrderLedger

# Item management
from .item_service import OrderItemService

__all__ = [
    'OrderLedger',
    'OrderItemService',
]
