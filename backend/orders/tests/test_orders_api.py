"""
Orders API Integration Tests

Tests the /api/orders/ surface end to end through DRF.

Test Categories:
1. Create / List / Retrieve
2. Item Upserts
3. Status Actions
"""
import pytest

from core_backend.tests.fixtures import item_payload
from orders.models import Order


@pytest.mark.django_db
class TestOrdersAPI:

    def test_create_table_order(self, api_client, open_register, burger):
        response = api_client.post('/api/orders/', {
            'kind': 'table',
            'table_number': 3,
            'items': [item_payload(burger, 'a', 2, confirmed=True)],
        }, format='json')

        assert response.status_code == 201, response.content
        body = response.json()
        assert body['status'] == 'confirmed'
        assert body['table_number'] == 3
        assert [item['unique_id'] for item in body['items']] == ['a']

    def test_create_with_register_closed_returns_409(self, api_client, db):
        response = api_client.post('/api/orders/', {'kind': 'phone'}, format='json')

        assert response.status_code == 409
        assert response.json()['code'] == 'register_closed'

    def test_create_on_occupied_table_returns_409(self, api_client, table_order):
        response = api_client.post('/api/orders/', {'kind': 'table', 'table_number': 1}, format='json')

        assert response.status_code == 409
        assert response.json()['code'] == 'table_occupied'

    def test_list_hides_closed_orders(self, api_client, table_order, make_order):
        other = make_order(table_number=2)
        api_client.post(f'/api/orders/{table_order.id}/close/')

        open_ids = [o['id'] for o in api_client.get('/api/orders/').json()]
        all_ids = [o['id'] for o in api_client.get('/api/orders/?include_closed=true').json()]

        assert open_ids == [other.id]
        assert set(all_ids) == {other.id, table_order.id}

    def test_list_filter_by_table(self, api_client, table_order, make_order):
        make_order(table_number=2)

        response = api_client.get('/api/orders/?table_number=1')

        assert [o['id'] for o in response.json()] == [table_order.id]

    def test_list_with_non_numeric_table_returns_400(self, api_client, table_order):
        response = api_client.get('/api/orders/?table_number=abc')

        assert response.status_code == 400
        assert 'table_number' in response.json()

    def test_list_with_unknown_kind_returns_400(self, api_client, table_order):
        assert api_client.get('/api/orders/?kind=drive-through').status_code == 400

    def test_upsert_items_twice(self, api_client, make_order, burger):
        order = make_order(table_number=2)
        payload = {'items': [item_payload(burger, 'a', 1)]}

        first = api_client.post(f'/api/orders/{order.id}/items/', payload, format='json')
        second = api_client.post(f'/api/orders/{order.id}/items/', payload, format='json')

        assert first.status_code == second.status_code == 201
        assert first.json()[0]['id'] == second.json()[0]['id']
        assert len(api_client.get(f'/api/orders/{order.id}/items/').json()) == 1

    def test_upsert_invalid_item_returns_400(self, api_client, make_order):
        order = make_order(table_number=2)

        response = api_client.post(
            f'/api/orders/{order.id}/items/', {'items': [{'quantity': 0, 'name': 'x'}]}, format='json'
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'validation_error'

    def test_status_paid(self, api_client, table_order):
        response = api_client.post(
            f'/api/orders/{table_order.id}/status/',
            {'status': 'paid', 'total': '15.50', 'payment_method': 'card'},
            format='json',
        )

        assert response.status_code == 200
        assert response.json()['is_paid'] is True
        assert response.json()['payment_method'] == 'card'

    def test_reopen_and_reset(self, api_client, make_order):
        order = make_order(table_number=4)

        assert api_client.post(f'/api/orders/{order.id}/reset-if-empty/').json() == {'closed': True}
        response = api_client.post(f'/api/orders/{order.id}/reopen/')

        assert response.status_code == 200
        assert response.json()['status'] == 'occupied'

    def test_confirm_online_on_table_order_returns_422(self, api_client, table_order):
        response = api_client.post(f'/api/orders/{table_order.id}/confirm-online/')

        assert response.status_code == 422

    def test_confirm_online_phone(self, api_client, phone_order):
        response = api_client.post(f'/api/orders/{phone_order.id}/confirm-online/')

        assert response.status_code == 200
        assert Order.objects.get(pk=phone_order.id).status == 'confirmed'
