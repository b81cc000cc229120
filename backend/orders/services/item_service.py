from typing import Iterable, List, Optional
import logging

from django.utils import timezone

from core_backend.exceptions import ValidationError
from orders.models import Order, OrderItem
from orders.values import OrderItemInput, dump_lines, parse_lines
from products.models import Product

logger = logging.getLogger(__name__)


class OrderItemService:
    """
    Line-level writes. Every method expects the caller to hold the order row
    lock inside a transaction; none of them publishes events.
    """

    @staticmethod
    def parse(items: Iterable, receipt_id=None) -> List[OrderItemInput]:
        if items is None:
            return []
        if isinstance(items, (str, bytes, dict)):
            raise ValidationError("items must be a list")
        return [OrderItemInput.from_dict(item, receipt_id=receipt_id) for item in items]

    @staticmethod
    def upsert_lines(order: Order, items: Iterable, receipt_id=None) -> List[OrderItem]:
        """
        Insert each line keyed on (order, unique_id), or update the discount of
        the line already stored under that key. Nothing else of an existing
        line changes, so a terminal can resend its whole cart safely.
        """
        lines = OrderItemService.parse(items, receipt_id)

        product_ids = {line.product_id for line in lines if line.product_id is not None}
        products = Product.objects.in_bulk(product_ids)
        missing = product_ids - set(products)
        if missing:
            raise ValidationError(f"Unknown products: {', '.join(str(i) for i in sorted(missing))}")

        saved = []
        for line in lines:
            existing = (
                OrderItem.objects.select_for_update()
                .filter(order=order, unique_id=line.unique_id)
                .first()
            )
            if existing:
                existing.discount_type = line.discount_type
                existing.discount_value = line.discount_value
                existing.save(update_fields=["discount_type", "discount_value"])
                saved.append(existing)
                continue

            product = products.get(line.product_id)
            ingredients = line.ingredients
            extras = line.extras
            if product is not None and not ingredients:
                ingredients = parse_lines(product.ingredients)

            if line.price is not None:
                price = line.price
            else:
                price = product.price if product is not None else 0

            saved.append(
                OrderItem.objects.create(
                    order=order,
                    product=product,
                    name=line.name or (product.name if product else ""),
                    quantity=line.quantity,
                    price=price,
                    ingredients=dump_lines(ingredients),
                    extras=dump_lines(extras),
                    unique_id=line.unique_id,
                    confirmed=line.confirmed,
                    kitchen_status=line.initial_kitchen_status,
                    payment_method=line.payment_method,
                    receipt_id=line.receipt_id,
                    note=line.note,
                    discount_type=line.discount_type,
                    discount_value=line.discount_value,
                )
            )

        logger.debug(f"Upserted {len(saved)} items on order {order.id}")
        return saved

    @staticmethod
    def stamp_paid(order: Order, payment_method: Optional[str] = None, unique_ids=None, **extra_fields) -> int:
        """
        Mark the unpaid lines of an order as paid and confirmed.

        Kitchen status is left alone: paying never moves a line through the
        kitchen. Limit to some lines with unique_ids.
        """
        lines = OrderItem.objects.filter(order=order, paid_at__isnull=True)
        if unique_ids is not None:
            lines = lines.filter(unique_id__in=list(unique_ids))
        updates = {"paid_at": timezone.now(), "confirmed": True, **extra_fields}
        if payment_method:
            updates["payment_method"] = payment_method
        return lines.update(**updates)
