from typing import Iterable, List, Optional
import logging

from django.db import IntegrityError, transaction

from core_backend.exceptions import (
    OrderNotFoundError,
    RegisterClosedError,
    StateError,
    TableOccupiedError,
    ValidationError,
)
from core_backend.transactions import atomic_operation
from inventory.services import InventoryService
from notifications.publishers import ORDER_CONFIRMED, ORDERS_UPDATED, publish_on_commit
from orders.models import Order, OrderItem
from payments.money import to_money
from registers.services import RegisterService
from tables.services import TableAllocator
from .item_service import OrderItemService

logger = logging.getLogger(__name__)


class OrderLedger:
    """
    Order lifecycle: creation, line upserts, status transitions, close and reopen.

    Every public method runs in one transaction and publishes orders_updated
    after it commits.
    """

    @staticmethod
    def _seat(order: Order):
        """Occupy the order's table, refusing when another open order holds it."""
        if order.table_number is None:
            return
        if TableAllocator.open_order_at(order.table_number, exclude_order_id=order.id) is not None:
            raise TableOccupiedError(order.table_number)
        TableAllocator.occupy(order.table_number)

    @staticmethod
    def _close(order: Order):
        order.status = Order.OrderStatus.CLOSED
        order.save(update_fields=["status", "updated_at"])
        TableAllocator.release(order.table_number)
        InventoryService.schedule_deduction(order.id)

    @staticmethod
    @atomic_operation
    def create_order(
        kind,
        table_number=None,
        customer=None,
        items: Iterable = (),
        total=0,
        payment_method: Optional[str] = None,
    ) -> Order:
        """
        Open a new order.

        Table orders need a table number and a free table. The order starts
        "confirmed" when it arrives with items, "occupied" otherwise.
        """
        if kind not in Order.OrderKind.values:
            raise ValidationError(f"Invalid order kind {kind!r}")
        if kind == Order.OrderKind.TABLE and table_number in (None, ""):
            raise ValidationError("table_number is required for table orders")
        if not RegisterService.is_open():
            raise RegisterClosedError()

        items = list(items or [])
        customer = customer or {}
        if table_number == "":
            table_number = None

        if table_number is not None and TableAllocator.open_order_at(table_number) is not None:
            raise TableOccupiedError(table_number)

        try:
            with transaction.atomic():
                order = Order.objects.create(
                    kind=kind,
                    table_number=table_number,
                    status=Order.OrderStatus.CONFIRMED if items else Order.OrderStatus.OCCUPIED,
                    total=to_money(total),
                    payment_method=payment_method or None,
                    customer_name=customer.get("name") or "",
                    customer_phone=customer.get("phone") or "",
                    customer_address=customer.get("address") or "",
                )
        except IntegrityError:
            # Another terminal seated the same table between the check and the insert.
            raise TableOccupiedError(table_number)

        if items:
            OrderItemService.upsert_lines(order, items)
        if table_number is not None:
            TableAllocator.occupy(table_number)

        logger.info(f"Order {order.id} created ({order.kind}, table {order.table_number}, {len(items)} items)")
        publish_on_commit(ORDERS_UPDATED)
        return order

    @staticmethod
    @atomic_operation
    def upsert_items(order_id, items: Iterable, receipt_id=None) -> List[OrderItem]:
        """
        Add lines to an order, idempotently per unique_id.

        Billing lines promotes an occupied or closed order to confirmed; a
        closed table order is seated again when its table is still free.
        """
        order = Order.objects.locked(order_id)
        saved = OrderItemService.upsert_lines(order, items, receipt_id)

        if order.status in (Order.OrderStatus.OCCUPIED, Order.OrderStatus.CLOSED):
            if order.status == Order.OrderStatus.CLOSED:
                OrderLedger._seat(order)
            order.status = Order.OrderStatus.CONFIRMED
            order.save(update_fields=["status", "updated_at"])

        publish_on_commit(ORDERS_UPDATED)
        return saved

    @staticmethod
    @atomic_operation
    def set_status(order_id, status, total=None, payment_method: Optional[str] = None) -> Order:
        if status not in Order.OrderStatus.values:
            raise ValidationError(f"Invalid order status {status!r}")

        order = Order.objects.locked(order_id)
        previous = order.status

        if total is not None:
            order.total = to_money(total)
        if payment_method:
            order.payment_method = payment_method

        if status == Order.OrderStatus.CLOSED:
            order.save(update_fields=["total", "payment_method", "updated_at"])
            if previous != Order.OrderStatus.CLOSED:
                OrderLedger._close(order)
        else:
            if previous == Order.OrderStatus.CLOSED:
                OrderLedger._seat(order)
            order.status = status
            if status == Order.OrderStatus.PAID:
                order.is_paid = True
            order.save(update_fields=["status", "total", "payment_method", "is_paid", "updated_at"])

            if status == Order.OrderStatus.PAID:
                stamped = OrderItemService.stamp_paid(order)
                logger.info(f"Order {order.id} paid, {stamped} items stamped")
                InventoryService.schedule_deduction(order.id)

        if status == Order.OrderStatus.CONFIRMED:
            publish_on_commit(ORDER_CONFIRMED, {"orderId": order.id})
        publish_on_commit(ORDERS_UPDATED)
        logger.info(f"Order {order.id} status {previous} -> {status}")
        return order

    @staticmethod
    @atomic_operation
    def close(order_id) -> Order:
        """Close an order and free its table. Closing a closed order changes nothing."""
        order = Order.objects.locked(order_id)
        if order.status != Order.OrderStatus.CLOSED:
            OrderLedger._close(order)
            logger.info(f"Order {order.id} closed")
        publish_on_commit(ORDERS_UPDATED)
        return order

    @staticmethod
    @atomic_operation
    def reopen(order_id) -> Order:
        order = Order.objects.locked(order_id)
        if order.status == Order.OrderStatus.CLOSED:
            OrderLedger._seat(order)
        order.status = Order.OrderStatus.OCCUPIED
        order.save(update_fields=["status", "updated_at"])
        logger.info(f"Order {order.id} reopened")
        publish_on_commit(ORDERS_UPDATED)
        return order

    @staticmethod
    @atomic_operation
    def reset_if_empty(order_id) -> bool:
        """Close an order nobody put anything on. Returns whether it was closed."""
        order = Order.objects.locked(order_id)
        if order.items.exists():
            return False
        if order.status != Order.OrderStatus.CLOSED:
            OrderLedger._close(order)
        publish_on_commit(ORDERS_UPDATED)
        return True

    @staticmethod
    @atomic_operation
    def confirm_online(order_id) -> Order:
        """Accept a phone or marketplace order that arrived unconfirmed."""
        order = Order.objects.locked(order_id)
        if order.kind not in (Order.OrderKind.PHONE, Order.OrderKind.PACKET):
            raise StateError("Only online orders can be auto-confirmed.")
        if order.status in (Order.OrderStatus.CONFIRMED, Order.OrderStatus.CLOSED):
            raise StateError("Order already confirmed or closed.")

        order.status = Order.OrderStatus.CONFIRMED
        order.save(update_fields=["status", "updated_at"])
        publish_on_commit(ORDER_CONFIRMED, {"orderId": order.id})
        publish_on_commit(ORDERS_UPDATED)
        return order

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return Order.objects.prefetch_related("items").get(pk=order_id)
        except (Order.DoesNotExist, ValueError, TypeError):
            raise OrderNotFoundError(order_id)

    @staticmethod
    def open_orders(table_number=None, kind=None):
        orders = Order.objects.open().prefetch_related("items")
        if table_number is not None:
            orders = orders.filter(table_number=table_number)
        if kind is not None:
            orders = orders.filter(kind=kind)
        return orders.order_by("-created_at", "-id")

    @staticmethod
    @atomic_operation
    def purge_finished_orders() -> int:
        """
        Delete every paid or closed order with its lines, payments and
        sub-orders, and free the tables they held. Returns the number of
        orders deleted.
        """
        finished = Order.objects.filter(status__in=[Order.OrderStatus.PAID, Order.OrderStatus.CLOSED])
        tables = set(finished.exclude(table_number__isnull=True).values_list("table_number", flat=True))
        count = finished.count()
        finished.delete()
        for number in tables:
            if TableAllocator.open_order_at(number) is None:
                TableAllocator.release(number)
        logger.warning(f"Purged {count} finished orders")
        publish_on_commit(ORDERS_UPDATED)
        return count
