"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like the cash register, products, stock and orders.
"""
import pytest
from decimal import Decimal

from inventory.models import StockItem
from notifications.publishers import InMemoryEventPublisher, set_event_publisher
from orders.models import Order, OrderItem
from products.models import Product
from registers.services import RegisterService


# ============================================================================
# EVENT FIXTURES
# ============================================================================

@pytest.fixture
def events():
    """
    Record published events instead of broadcasting them.

    Usage:
        def test_broadcast(events, django_capture_on_commit_callbacks):
            with django_capture_on_commit_callbacks(execute=True):
                OrderLedger.close(order.id)
            assert "orders_updated" in events.names()
    """
    publisher = InMemoryEventPublisher()
    previous = set_event_publisher(publisher)
    yield publisher
    set_event_publisher(previous)


# ============================================================================
# REGISTER FIXTURES
# ============================================================================

@pytest.fixture
def open_register(db):
    """Open the cash register; orders cannot be created otherwise."""
    return RegisterService.open_register(amount=Decimal('100.00'), note='test float')


# ============================================================================
# PRODUCT FIXTURES
# ============================================================================

@pytest.fixture
def burger(db):
    """5 minute product with two stocked ingredients."""
    return Product.objects.create(
        name='Burger',
        price=Decimal('9.50'),
        category='mains',
        preparation_time=5,
        ingredients=[
            {'v': 1, 'name': 'Bun', 'quantity': '1', 'unit': 'pcs'},
            {'v': 1, 'name': 'Beef patty', 'quantity': '150', 'unit': 'g'},
        ],
    )


@pytest.fixture
def fries(db):
    """3 minute product."""
    return Product.objects.create(
        name='Fries',
        price=Decimal('3.00'),
        category='sides',
        preparation_time=3,
        ingredients=[{'v': 1, 'name': 'Potatoes', 'quantity': '200', 'unit': 'g'}],
    )


@pytest.fixture
def soda(db):
    """Product without a preparation time (falls back to one minute)."""
    return Product.objects.create(
        name='Soda',
        price=Decimal('2.25'),
        category='drinks',
        preparation_time=None,
    )


# ============================================================================
# STOCK FIXTURES
# ============================================================================

@pytest.fixture
def stock(db):
    """Stock rows matching the burger and fries ingredients."""
    return {
        'bun': StockItem.objects.create(name='Bun', unit='pcs', quantity=Decimal('50'), critical_quantity=Decimal('10')),
        'beef': StockItem.objects.create(name='Beef Patty', unit='g', quantity=Decimal('5000'), critical_quantity=Decimal('1000')),
        'potatoes': StockItem.objects.create(name='Potatoes', unit='g', quantity=Decimal('10000')),
    }


# ============================================================================
# ORDER FIXTURES
# ============================================================================

def item_payload(product=None, unique_id=None, quantity=1, **extra):
    """Build one order line the way a terminal sends it."""
    payload = {'quantity': quantity}
    if product is not None:
        payload['product_id'] = product.id
        payload.setdefault('name', product.name)
    if unique_id is not None:
        payload['unique_id'] = unique_id
    payload.update(extra)
    return payload


@pytest.fixture
def make_order(open_register):
    """
    Factory for orders created through the ledger.

    Usage:
        order = make_order(table_number=4, items=[item_payload(burger, 'a')])
    """
    from orders.services import OrderLedger

    def _make(kind=Order.OrderKind.TABLE, table_number=None, items=(), **kwargs):
        if kind == Order.OrderKind.TABLE and table_number is None:
            table_number = 1
        return OrderLedger.create_order(kind=kind, table_number=table_number, items=list(items), **kwargs)

    return _make


@pytest.fixture
def table_order(make_order, burger, fries):
    """Confirmed table order at table 1: one burger, two fries."""
    return make_order(
        table_number=1,
        items=[
            item_payload(burger, 'line-burger', 1, confirmed=True),
            item_payload(fries, 'line-fries', 2, confirmed=True),
        ],
    )


@pytest.fixture
def phone_order(burger):
    """Unconfirmed phone order for delivery."""
    order = Order.objects.create(
        kind=Order.OrderKind.PHONE,
        status=Order.OrderStatus.OCCUPIED,
        customer_name='Jo Doe',
        customer_phone='555-0100',
        customer_address='1 Main St',
    )
    OrderItem.objects.create(
        order=order, product=burger, name=burger.name, quantity=1, price=burger.price, unique_id='phone-burger'
    )
    return order
