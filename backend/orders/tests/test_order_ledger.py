"""
Order Ledger Tests

Tests the order lifecycle: creation, line upserts, status transitions,
close/reopen and the events they publish.

Priority: 1 (Every terminal goes through these paths)

Test Categories:
1. Order Creation (register, table occupancy)
2. Idempotent Line Upserts
3. Status Transitions & Payment Stamping
4. Close / Reopen / Reset
5. Events After Commit
6. Purge

Run with: pytest backend/orders/tests/test_order_ledger.py -v
"""
import pytest
from decimal import Decimal

from core_backend.exceptions import (
    OrderNotFoundError,
    RegisterClosedError,
    StateError,
    TableOccupiedError,
    ValidationError,
)
from core_backend.tests.fixtures import item_payload
from orders.models import Order, OrderItem
from orders.services import OrderLedger
from registers.services import RegisterService
from tables.models import Table


# ============================================================================
# ORDER CREATION TESTS
# ============================================================================

@pytest.mark.django_db
class TestOrderCreation:
    """Opening orders."""

    def test_create_requires_open_register(self, db):
        """
        CRITICAL: Verify orders cannot be taken with the register closed.

        Value: Sales outside a register session would be missing from the cash count
        """
        with pytest.raises(RegisterClosedError):
            OrderLedger.create_order(kind=Order.OrderKind.TABLE, table_number=2)

        assert Order.objects.count() == 0

    def test_create_after_register_closed_again(self, open_register):
        RegisterService.close_register(amount=Decimal('100.00'))

        with pytest.raises(RegisterClosedError):
            OrderLedger.create_order(kind=Order.OrderKind.PHONE)

    def test_table_order_requires_table_number(self, open_register):
        with pytest.raises(ValidationError):
            OrderLedger.create_order(kind=Order.OrderKind.TABLE)

    def test_invalid_kind_rejected(self, open_register):
        with pytest.raises(ValidationError):
            OrderLedger.create_order(kind="drive-thru")

    def test_empty_table_order_starts_occupied(self, make_order):
        order = make_order(table_number=4)

        assert order.status == Order.OrderStatus.OCCUPIED
        assert Table.objects.get(number=4).is_occupied is True

    def test_order_with_items_starts_confirmed(self, table_order):
        assert table_order.status == Order.OrderStatus.CONFIRMED
        assert table_order.items.count() == 2

    def test_second_order_on_occupied_table_rejected(self, make_order):
        """
        CRITICAL: Verify a table holds at most one open order.

        Scenario:
        - Table 5 has an open order
        - Another order is opened at table 5
        - Expected: TableOccupiedError, still one order at table 5
        """
        make_order(table_number=5)

        with pytest.raises(TableOccupiedError):
            make_order(table_number=5)

        assert Order.objects.filter(table_number=5).count() == 1

    def test_phone_order_keeps_customer(self, make_order):
        order = make_order(
            kind=Order.OrderKind.PHONE,
            customer={'name': 'Ana', 'phone': '555-1234', 'address': 'Elm St 4'},
        )

        assert order.table_number is None
        assert order.customer_name == 'Ana'
        assert order.customer_address == 'Elm St 4'


# ============================================================================
# LINE UPSERT TESTS
# ============================================================================

@pytest.mark.django_db
class TestIdempotentUpsert:
    """Lines are keyed on (order, unique_id)."""

    def test_resending_lines_does_not_duplicate(self, make_order, burger, fries):
        """
        CRITICAL: Verify a terminal can resend its whole cart safely.

        Scenario:
        - Order gets lines a and b
        - The terminal retries the same request (network timeout)
        - Expected: still 2 lines with the original quantities
        """
        order = make_order(table_number=2)
        lines = [item_payload(burger, 'a', 2), item_payload(fries, 'b', 1)]

        OrderLedger.upsert_items(order.id, lines)
        OrderLedger.upsert_items(order.id, lines)

        assert order.items.count() == 2
        assert order.items.get(unique_id='a').quantity == 2

    def test_resend_only_refreshes_discount(self, make_order, burger):
        order = make_order(table_number=2)
        OrderLedger.upsert_items(order.id, [item_payload(burger, 'a', 1, price='9.50')])

        OrderLedger.upsert_items(
            order.id,
            [item_payload(burger, 'a', 5, price='1.00', discountType='percent', discountValue='10')],
        )

        line = order.items.get(unique_id='a')
        assert line.quantity == 1, "Quantity of an existing line must not change"
        assert line.price == Decimal('9.50')
        assert line.discount_type == 'percent'
        assert line.discount_value == Decimal('10')

    def test_upsert_promotes_occupied_order(self, make_order, burger):
        order = make_order(table_number=2)

        OrderLedger.upsert_items(order.id, [item_payload(burger, 'a')])

        order.refresh_from_db()
        assert order.status == Order.OrderStatus.CONFIRMED

    def test_unknown_product_writes_nothing(self, make_order, burger):
        order = make_order(table_number=2)

        with pytest.raises(ValidationError):
            OrderLedger.upsert_items(
                order.id, [item_payload(burger, 'ok'), {'product_id': 987654, 'unique_id': 'bad'}]
            )

        assert order.items.count() == 0

    def test_product_defaults_fill_price_and_ingredients(self, make_order, burger):
        order = make_order(table_number=2)

        OrderLedger.upsert_items(order.id, [{'product_id': burger.id, 'unique_id': 'a'}])

        line = order.items.get(unique_id='a')
        assert line.price == burger.price
        assert line.name == 'Burger'
        assert [ing.name for ing in line.ingredient_lines] == ['Bun', 'Beef patty']

    def test_external_line_without_product(self, make_order):
        order = make_order(table_number=2)

        OrderLedger.upsert_items(order.id, [{'name': 'Marketplace combo', 'price': '12.00', 'unique_id': 'x'}])

        line = order.items.get(unique_id='x')
        assert line.product is None
        assert line.display_name == 'Marketplace combo'

    def test_confirmed_unpaid_line_starts_new(self, make_order, burger):
        """A billed line always enters the kitchen at "new", whatever the client says."""
        order = make_order(table_number=2)

        OrderLedger.upsert_items(
            order.id, [item_payload(burger, 'a', confirmed=True, kitchen_status='ready')]
        )

        assert order.items.get(unique_id='a').kitchen_status == OrderItem.KitchenStatus.NEW

    def test_upsert_on_missing_order(self, open_register, burger):
        with pytest.raises(OrderNotFoundError):
            OrderLedger.upsert_items(424242, [item_payload(burger, 'a')])


# ============================================================================
# STATUS TRANSITION TESTS
# ============================================================================

@pytest.mark.django_db
class TestStatusTransitions:

    def test_paid_stamps_lines_without_touching_kitchen(self, table_order):
        """
        CRITICAL: Verify paying never moves items through the kitchen.

        Scenario:
        - Burger line is "preparing"
        - Order is marked paid
        - Expected: lines paid and confirmed, burger still "preparing"
        """
        table_order.items.filter(unique_id='line-burger').update(kitchen_status='preparing')

        order = OrderLedger.set_status(table_order.id, 'paid', total='15.50', payment_method='cash')

        assert order.is_paid is True
        assert order.total == Decimal('15.50')
        lines = {line.unique_id: line for line in order.items.all()}
        assert all(line.paid_at is not None and line.confirmed for line in lines.values())
        assert lines['line-burger'].kitchen_status == 'preparing'
        assert lines['line-fries'].kitchen_status == 'new'

    def test_invalid_status_rejected(self, table_order):
        with pytest.raises(ValidationError):
            OrderLedger.set_status(table_order.id, 'teleported')

    def test_status_closed_frees_table(self, table_order):
        OrderLedger.set_status(table_order.id, 'closed')

        assert Table.objects.get(number=1).is_occupied is False

    def test_confirmed_publishes_order_confirmed(self, make_order, events, django_capture_on_commit_callbacks):
        order = make_order(table_number=6)

        with django_capture_on_commit_callbacks(execute=True):
            OrderLedger.set_status(order.id, 'confirmed')

        assert events.payloads('order_confirmed') == [{'orderId': order.id}]
        assert 'orders_updated' in events.names()

    def test_confirm_online_phone_order(self, phone_order):
        order = OrderLedger.confirm_online(phone_order.id)

        assert order.status == Order.OrderStatus.CONFIRMED

    def test_confirm_online_rejects_table_and_repeat(self, phone_order, table_order):
        with pytest.raises(StateError):
            OrderLedger.confirm_online(table_order.id)

        OrderLedger.confirm_online(phone_order.id)
        with pytest.raises(StateError):
            OrderLedger.confirm_online(phone_order.id)


# ============================================================================
# CLOSE / REOPEN / RESET TESTS
# ============================================================================

@pytest.mark.django_db
class TestCloseReopen:

    def test_close_is_idempotent(self, table_order):
        OrderLedger.close(table_order.id)
        order = OrderLedger.close(table_order.id)

        assert order.status == Order.OrderStatus.CLOSED
        assert Table.objects.get(number=1).is_occupied is False

    def test_status_closed_twice_is_idempotent(self, table_order):
        OrderLedger.set_status(table_order.id, 'closed')
        order = OrderLedger.set_status(table_order.id, 'closed')

        assert order.status == Order.OrderStatus.CLOSED
        assert Table.objects.get(number=1).is_occupied is False

    def test_closing_old_order_keeps_new_order_seated(self, table_order, make_order):
        """
        CRITICAL: Verify a stale close never frees a table someone else sits at.

        Scenario:
        - Order at table 1 is closed, a new order is opened at table 1
        - A terminal sends "closed" for the old order again
        - Expected: table 1 stays occupied, new order untouched
        """
        OrderLedger.close(table_order.id)
        newer = make_order(table_number=1)

        OrderLedger.set_status(table_order.id, 'closed')
        OrderLedger.close(table_order.id)

        newer.refresh_from_db()
        assert newer.status == Order.OrderStatus.OCCUPIED
        assert Table.objects.get(number=1).is_occupied is True

    def test_close_then_new_order_on_same_table(self, table_order, make_order):
        OrderLedger.close(table_order.id)

        order = make_order(table_number=1)

        assert order.status == Order.OrderStatus.OCCUPIED

    def test_reopen_reseats_table(self, table_order):
        OrderLedger.close(table_order.id)

        order = OrderLedger.reopen(table_order.id)

        assert order.status == Order.OrderStatus.OCCUPIED
        assert Table.objects.get(number=1).is_occupied is True

    def test_reopen_refused_when_table_reused(self, table_order, make_order):
        """
        IMPORTANT: Verify reopening never seats two orders at one table.

        Scenario:
        - Order at table 1 is closed, a new order is opened at table 1
        - The old order is reopened
        - Expected: TableOccupiedError, old order stays closed
        """
        OrderLedger.close(table_order.id)
        make_order(table_number=1)

        with pytest.raises(TableOccupiedError):
            OrderLedger.reopen(table_order.id)

        table_order.refresh_from_db()
        assert table_order.status == Order.OrderStatus.CLOSED

    def test_reset_if_empty_closes_empty_order(self, make_order):
        order = make_order(table_number=8)

        assert OrderLedger.reset_if_empty(order.id) is True

        order.refresh_from_db()
        assert order.status == Order.OrderStatus.CLOSED
        assert Table.objects.get(number=8).is_occupied is False

    def test_reset_if_empty_keeps_order_with_lines(self, table_order):
        assert OrderLedger.reset_if_empty(table_order.id) is False

        table_order.refresh_from_db()
        assert table_order.status == Order.OrderStatus.CONFIRMED


# ============================================================================
# EVENTS AFTER COMMIT TESTS
# ============================================================================

@pytest.mark.django_db
class TestEventsAfterCommit:

    def test_no_event_before_commit(self, table_order, events, django_capture_on_commit_callbacks):
        """
        CRITICAL: Verify clients are never told about uncommitted changes.

        Scenario:
        - Close runs inside a transaction that has not committed yet
        - Expected: nothing published until the commit callbacks run
        """
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            OrderLedger.close(table_order.id)

        assert events.events == []
        assert callbacks, "The close must register commit callbacks"

    def test_event_after_commit(self, table_order, events, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            OrderLedger.close(table_order.id)

        assert events.names().count('orders_updated') == 1

    def test_failed_operation_publishes_nothing(self, table_order, make_order, events, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            with pytest.raises(TableOccupiedError):
                make_order(table_number=1)

        assert events.events == []

    def test_close_deducts_stock_once(self, table_order, stock, events, django_capture_on_commit_callbacks):
        """
        IMPORTANT: Verify ingredients are deducted once per order.

        Scenario:
        - Order is closed, reopened and closed again
        - Expected: one burger (1 bun) deducted, not two
        """
        with django_capture_on_commit_callbacks(execute=True):
            OrderLedger.close(table_order.id)
        with django_capture_on_commit_callbacks(execute=True):
            OrderLedger.reopen(table_order.id)
            OrderLedger.close(table_order.id)

        stock['bun'].refresh_from_db()
        stock['potatoes'].refresh_from_db()
        assert stock['bun'].quantity == Decimal('49')
        assert stock['potatoes'].quantity == Decimal('9600')
        assert events.payloads('stock_updated')


# ============================================================================
# PURGE TESTS
# ============================================================================

@pytest.mark.django_db
class TestPurgeFinishedOrders:

    def test_purge_removes_only_finished_orders(self, table_order, make_order):
        open_order = make_order(table_number=2)
        OrderLedger.close(table_order.id)

        deleted = OrderLedger.purge_finished_orders()

        assert deleted == 1
        assert list(Order.objects.values_list('id', flat=True)) == [open_order.id]
        assert not OrderItem.objects.filter(order_id=table_order.id).exists()
        assert Table.objects.get(number=2).is_occupied is True
