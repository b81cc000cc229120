import logging

from core_backend.exceptions import NotFoundError, StateError, TableOccupiedError, ValidationError
from core_backend.transactions import atomic_operation
from notifications.publishers import ORDERS_UPDATED, publish_on_commit
from orders.models import Order
from .models import Table

logger = logging.getLogger(__name__)


class TableAllocator:
    """
    Table occupancy and transfers between tables.

    A table is occupied exactly while one open order is seated at it. The flag
    on Table is kept in step by every operation that seats, moves or closes an
    order; the partial unique constraint on Order.table_number backs it up.
    """

    @staticmethod
    def occupy(number) -> Table:
        table, created = Table.objects.select_for_update().get_or_create(
            number=number, defaults={"is_occupied": True}
        )
        if not created and not table.is_occupied:
            table.is_occupied = True
            table.save(update_fields=["is_occupied", "updated_at"])
        return table

    @staticmethod
    def release(number):
        """Clear the occupied flag unless an open order is still seated at the table."""
        if number is None:
            return
        if Order.objects.open().filter(table_number=number).exists():
            return
        Table.objects.filter(number=number, is_occupied=True).update(is_occupied=False)

    @staticmethod
    def open_order_at(number, exclude_order_id=None):
        """Newest open order seated at a table, locked."""
        orders = Order.objects.open().select_for_update().filter(table_number=number)
        if exclude_order_id is not None:
            orders = orders.exclude(pk=exclude_order_id)
        return orders.order_by("-created_at", "-id").first()

    @staticmethod
    def is_taken(number, exclude_order_id=None) -> bool:
        flagged = Table.objects.filter(number=number, is_occupied=True).exists()
        return flagged or TableAllocator.open_order_at(number, exclude_order_id) is not None

    @staticmethod
    @atomic_operation
    def move(order_id, new_table_number) -> Order:
        """
        Move an open order to a free table.

        Raises TableOccupiedError without touching either table when the
        destination is taken.
        """
        if new_table_number in (None, ""):
            raise ValidationError("new_table_number is required")

        order = Order.objects.locked(order_id)
        if order.table_number is None or not order.is_open:
            raise StateError(f"Order {order_id} is not seated at a table")
        if order.table_number == new_table_number:
            return order
        if TableAllocator.is_taken(new_table_number):
            raise TableOccupiedError(new_table_number, "Destination table is occupied")

        old_table_number = order.table_number
        order.table_number = new_table_number
        order.save(update_fields=["table_number", "updated_at"])
        TableAllocator.release(old_table_number)
        TableAllocator.occupy(new_table_number)

        logger.info(f"Order {order.id} moved from table {old_table_number} to {new_table_number}")
        publish_on_commit(ORDERS_UPDATED)
        return order

    @staticmethod
    @atomic_operation
    def merge(source_order_id, target_table_number) -> Order:
        """
        Fold every line of the source order into the open order at the target table.

        Lines sharing a unique_id are combined by adding quantities, the rest
        are re-parented, so the total quantity per line key is unchanged. The
        source order is closed and its table freed. Totals stay where they are.
        """
        source = Order.objects.locked(source_order_id)
        if not source.is_open:
            raise StateError(f"Order {source.id} is closed")

        target = TableAllocator.open_order_at(target_table_number, exclude_order_id=source.id)
        if target is None:
            raise NotFoundError("Target table has no active order", table_number=target_table_number)

        for item in source.items.select_for_update().order_by("id"):
            duplicate = target.items.select_for_update().filter(unique_id=item.unique_id).first()
            if duplicate:
                duplicate.quantity += item.quantity
                duplicate.save(update_fields=["quantity"])
                item.delete()
            else:
                item.order = target
                item.save(update_fields=["order"])

        source.status = Order.OrderStatus.CLOSED
        source.save(update_fields=["status", "updated_at"])
        TableAllocator.release(source.table_number)

        logger.info(f"Order {source.id} merged into order {target.id} at table {target_table_number}")
        publish_on_commit(ORDERS_UPDATED)
        return target

    @staticmethod
    def list_tables():
        return Table.objects.order_by("number")
