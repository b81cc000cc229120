import pytest
from decimal import Decimal

from products.models import Product


@pytest.mark.django_db
class TestProduct:

    def test_prep_minutes_falls_back_to_kitchen_default(self, settings):
        settings.POS_KITCHEN = {**settings.POS_KITCHEN, 'DEFAULT_PREP_MINUTES': 4}
        product = Product.objects.create(name='Tea', price=Decimal('1.50'))

        assert product.prep_minutes == 4

    def test_prep_minutes_uses_preparation_time(self, burger):
        assert burger.prep_minutes == 5
        assert str(burger) == 'Burger'
