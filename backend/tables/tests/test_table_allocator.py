"""
Table Allocator Tests

Test Categories:
1. Move (free / occupied destination)
2. Merge (quantity conservation)
3. API
"""
import pytest

from core_backend.exceptions import NotFoundError, StateError, TableOccupiedError
from core_backend.tests.fixtures import item_payload
from orders.models import Order
from orders.services import OrderLedger
from tables.models import Table
from tables.services import TableAllocator


def _quantities(order):
    return dict(order.items.values_list('unique_id', 'quantity'))


# ============================================================================
# MOVE TESTS
# ============================================================================

@pytest.mark.django_db
class TestMove:

    def test_move_to_free_table(self, table_order):
        order = TableAllocator.move(table_order.id, 6)

        assert order.table_number == 6
        assert Table.objects.get(number=1).is_occupied is False
        assert Table.objects.get(number=6).is_occupied is True

    def test_move_to_occupied_table_changes_nothing(self, table_order, make_order):
        """
        CRITICAL: Verify a rejected move leaves both orders where they were.

        Scenario:
        - Orders at tables 1 and 2
        - Move table 1 -> table 2
        - Expected: TableOccupiedError, both orders and tables unchanged
        """
        other = make_order(table_number=2)

        with pytest.raises(TableOccupiedError) as exc_info:
            TableAllocator.move(table_order.id, 2)

        assert exc_info.value.message == "Destination table is occupied"
        table_order.refresh_from_db()
        other.refresh_from_db()
        assert (table_order.table_number, other.table_number) == (1, 2)
        assert Table.objects.get(number=1).is_occupied is True
        assert Table.objects.get(number=2).is_occupied is True

    def test_move_to_flagged_table_rejected(self, table_order):
        Table.objects.create(number=9, is_occupied=True)

        with pytest.raises(TableOccupiedError):
            TableAllocator.move(table_order.id, 9)

    def test_move_unseated_order(self, phone_order):
        with pytest.raises(StateError):
            TableAllocator.move(phone_order.id, 3)

    def test_move_closed_order(self, table_order):
        OrderLedger.close(table_order.id)

        with pytest.raises(StateError):
            TableAllocator.move(table_order.id, 3)

    def test_move_to_same_table_is_noop(self, table_order):
        assert TableAllocator.move(table_order.id, 1).table_number == 1

    def test_release_keeps_flag_while_order_seated(self, table_order):
        TableAllocator.release(1)

        assert Table.objects.get(number=1).is_occupied is True


# ============================================================================
# MERGE TESTS
# ============================================================================

@pytest.mark.django_db
class TestMerge:

    def test_merge_conserves_quantities(self, table_order, make_order, burger, soda):
        """
        CRITICAL: Verify merging never creates or loses items.

        Scenario:
        - Table 1: burger x1 (line-burger), fries x2 (line-fries)
        - Table 2: burger x2 (line-burger, same key), soda x1
        - Merge table 1 into table 2
        - Expected: table 2 has burger x3, fries x2, soda x1; order 1 closed
        """
        target = make_order(
            table_number=2,
            items=[item_payload(burger, 'line-burger', 2), item_payload(soda, 'line-soda', 1)],
        )

        merged = TableAllocator.merge(table_order.id, 2)

        assert merged.id == target.id
        assert _quantities(target) == {'line-burger': 3, 'line-fries': 2, 'line-soda': 1}
        table_order.refresh_from_db()
        assert table_order.status == Order.OrderStatus.CLOSED
        assert table_order.items.count() == 0
        assert Table.objects.get(number=1).is_occupied is False

    def test_merge_without_target_order(self, table_order):
        with pytest.raises(NotFoundError):
            TableAllocator.merge(table_order.id, 4)

        assert table_order.items.count() == 2

    def test_merge_closed_source(self, table_order, make_order):
        make_order(table_number=2)
        OrderLedger.close(table_order.id)

        with pytest.raises(StateError):
            TableAllocator.merge(table_order.id, 2)


# ============================================================================
# API TESTS
# ============================================================================

@pytest.mark.django_db
class TestTablesAPI:

    def test_list_tables(self, api_client, table_order, make_order):
        make_order(table_number=3)

        response = api_client.get('/api/tables/')

        assert [(t['number'], t['is_occupied']) for t in response.json()] == [(1, True), (3, True)]

    def test_move_endpoint_conflict(self, api_client, table_order, make_order):
        make_order(table_number=2)

        response = api_client.post(
            f'/api/tables/orders/{table_order.id}/move/', {'new_table_number': 2}, format='json'
        )

        assert response.status_code == 409
        assert response.json()['error'] == 'Destination table is occupied'

    def test_merge_endpoint(self, api_client, table_order, make_order):
        target = make_order(table_number=2)

        response = api_client.post(
            f'/api/tables/orders/{table_order.id}/merge/', {'target_table_number': 2}, format='json'
        )

        assert response.status_code == 200
        assert response.json()['id'] == target.id
        assert len(response.json()['items']) == 2
