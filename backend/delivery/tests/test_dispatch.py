"""
Driver Dispatch Tests

Test Categories:
1. Claim (conflict, not found)
2. Driver Status Progress
3. Location Cache
4. Daily Driver Report
5. API
"""
import pytest
from datetime import timedelta
from decimal import Decimal
from django.test import override_settings
from django.utils import timezone

from core_backend.exceptions import AlreadyClaimedError, OrderNotFoundError, StateError, ValidationError
from delivery.locations import DriverLocationCache
from delivery.services import DriverDispatchService
from orders.models import Order


# ============================================================================
# CLAIM TESTS
# ============================================================================

@pytest.mark.django_db
class TestClaim:

    def test_claim_assigns_driver(self, phone_order, events, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            order = DriverDispatchService.claim(phone_order.id, 7)

        assert order.driver_id == 7
        assert order.driver_status == Order.DriverStatus.ASSIGNED
        assert events.names() == ['orders_updated']

    def test_second_claim_conflicts(self, phone_order):
        DriverDispatchService.claim(phone_order.id, 7)

        with pytest.raises(AlreadyClaimedError):
            DriverDispatchService.claim(phone_order.id, 8)

        phone_order.refresh_from_db()
        assert phone_order.driver_id == 7, "Losing claim must not overwrite the winner"

    def test_claim_missing_order(self, db):
        with pytest.raises(OrderNotFoundError):
            DriverDispatchService.claim(55555, 7)

    def test_claim_requires_driver(self, phone_order):
        with pytest.raises(ValidationError):
            DriverDispatchService.claim(phone_order.id, None)


# ============================================================================
# DRIVER STATUS TESTS
# ============================================================================

@pytest.mark.django_db
class TestDriverStatus:

    def test_status_needs_assigned_driver(self, phone_order):
        with pytest.raises(StateError):
            DriverDispatchService.update_driver_status(phone_order.id, 'picked_up')

    def test_progress_stamps_times(self, phone_order):
        DriverDispatchService.claim(phone_order.id, 7)

        picked = DriverDispatchService.update_driver_status(phone_order.id, 'picked_up')
        assert picked.picked_up_at is not None

        delivered = DriverDispatchService.update_driver_status(phone_order.id, 'delivered')
        first_delivery = delivered.delivered_at
        assert first_delivery is not None

        again = DriverDispatchService.update_driver_status(phone_order.id, 'delivered')
        assert again.delivered_at == first_delivery, "delivered_at is stamped once"

    def test_invalid_driver_status(self, phone_order):
        with pytest.raises(ValidationError):
            DriverDispatchService.update_driver_status(phone_order.id, 'lost')


# ============================================================================
# LOCATION CACHE TESTS
# ============================================================================

class TestDriverLocationCache:

    def test_update_and_get(self):
        cache = DriverLocationCache()

        fix = cache.update(3, '41.0082', 28.9784)

        assert cache.get(3) == fix
        assert fix['lat'] == pytest.approx(41.0082)
        assert cache.get(4) is None

    def test_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            DriverLocationCache().update(3, 91, 0)

    def test_zero_ttl_expires_immediately(self):
        with override_settings(DRIVER_LOCATION_TTL=0):
            cache = DriverLocationCache()
            cache.update(3, 1, 1)

        # Django treats a timeout of 0 as "expire immediately"
        assert cache.get(3) is None

    def test_forget(self):
        cache = DriverLocationCache()
        cache.update(3, 1, 1)

        cache.forget(3)

        assert cache.get(3) is None


# ============================================================================
# DRIVER REPORT TESTS
# ============================================================================

@pytest.mark.django_db
class TestDriverReport:

    def test_report_sums_delivered_closed_orders(self, burger, fries):
        """
        Scenario:
        - Driver 7 delivered two closed orders today (cash 9.50, card 6.00)
        - A third order is delivered but still open
        - Expected: 2 packets, 15.50 sales split by method, durations in seconds
        """
        now = timezone.now()

        def delivered_order(method, product, quantity, closed=True):
            order = Order.objects.create(
                kind=Order.OrderKind.PHONE,
                status=Order.OrderStatus.CLOSED if closed else Order.OrderStatus.CONFIRMED,
                payment_method=method,
                driver_id=7,
                driver_status=Order.DriverStatus.DELIVERED,
                kitchen_delivered_at=now - timedelta(minutes=30),
                picked_up_at=now - timedelta(minutes=20),
                delivered_at=now,
            )
            order.items.create(product=product, name=product.name, quantity=quantity, price=product.price, unique_id='l1')
            return order

        delivered_order('cash', burger, 1)
        delivered_order('card', fries, 2)
        delivered_order('cash', burger, 3, closed=False)

        report = DriverDispatchService.driver_report(7, timezone.localdate(now))

        assert report['packets_delivered'] == 2
        assert report['total_sales'] == Decimal('15.50')
        assert report['sales_by_method'] == {'cash': Decimal('9.50'), 'card': Decimal('6.00')}
        assert report['orders'][0]['delivery_time_seconds'] == 20 * 60
        assert report['orders'][0]['kitchen_to_delivery_seconds'] == 30 * 60

    def test_report_other_day_empty(self, db):
        report = DriverDispatchService.driver_report(7, timezone.localdate() - timedelta(days=1))

        assert report['packets_delivered'] == 0
        assert report['total_sales'] == Decimal('0.00')


# ============================================================================
# API TESTS
# ============================================================================

@pytest.mark.django_db
class TestDeliveryAPI:

    def test_claim_conflict_returns_409(self, api_client, phone_order):
        url = f'/api/delivery/orders/{phone_order.id}/claim/'

        assert api_client.post(url, {'driver_id': 1}, format='json').status_code == 200
        response = api_client.post(url, {'driver_id': 2}, format='json')

        assert response.status_code == 409
        assert response.json()['code'] == 'already_claimed'

    def test_driver_status_without_driver_returns_422(self, api_client, phone_order):
        response = api_client.post(
            f'/api/delivery/orders/{phone_order.id}/driver-status/', {'driver_status': 'on_road'}, format='json'
        )

        assert response.status_code == 422

    def test_location_round_trip(self, api_client):
        assert api_client.get('/api/delivery/drivers/5/location/').status_code == 404

        api_client.put('/api/delivery/drivers/5/location/', {'lat': 40.1, 'lng': 29.2}, format='json')
        response = api_client.get('/api/delivery/drivers/5/location/')

        assert response.status_code == 200
        assert response.json()['lat'] == 40.1

    def test_report_requires_date(self, api_client, db):
        assert api_client.get('/api/delivery/drivers/5/report/').status_code == 400

        response = api_client.get('/api/delivery/drivers/5/report/?date=2026-03-01')

        assert response.status_code == 200
        assert response.json()['packets_delivered'] == 0
