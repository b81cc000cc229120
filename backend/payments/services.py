from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
import logging
import uuid

from core_backend.exceptions import ValidationError
from core_backend.transactions import atomic_operation
from inventory.services import InventoryService
from notifications.publishers import ORDERS_UPDATED, publish_on_commit
from orders.models import Order
from orders.services import OrderItemService
from orders.values import parse_receipt_id
from .models import Payment, PaymentMethodChange, ReceiptMethod, SubOrder
from .money import ZERO, sum_money, to_money

logger = logging.getLogger(__name__)

COMPOSITE_SEPARATOR = "+"


@dataclass(frozen=True)
class SplitResult:
    receipt_id: uuid.UUID
    payment_method: Optional[str]
    total: Decimal


def _split_amounts(methods) -> Dict[str, Decimal]:
    """
    Normalize a split into {method: amount}.

    Accepts a mapping, or a list of {"method"|"payment_method", "amount"}
    rows. Repeated methods are added together.
    """
    if isinstance(methods, dict):
        rows = [{"method": method, "amount": amount} for method, amount in methods.items()]
    elif isinstance(methods, (list, tuple)):
        rows = methods
    else:
        raise ValidationError("methods must be an object or a list")

    amounts: Dict[str, Decimal] = {}
    for row in rows:
        if not isinstance(row, dict):
            raise ValidationError("Each split row must be an object")
        method = row.get("method") or row.get("payment_method")
        if not isinstance(method, str) or not method.strip():
            raise ValidationError("Each split row needs a payment method")
        method = method.strip()
        if COMPOSITE_SEPARATOR in method:
            raise ValidationError(f"Payment method {method!r} cannot contain {COMPOSITE_SEPARATOR!r}")
        amount = to_money(row.get("amount"))
        if amount < 0:
            raise ValidationError(f"Amount for {method} cannot be negative")
        amounts[method] = amounts.get(method, ZERO) + amount
    return amounts


def composite_method(amounts: Dict[str, Decimal]) -> Optional[str]:
    """Sorted positive methods joined with "+", e.g. "card+cash"."""
    methods = sorted(method for method, amount in amounts.items() if amount > 0)
    return COMPOSITE_SEPARATOR.join(methods) or None


class PaymentReconciler:
    """
    Full payments, split receipts and partial (sub-order) payments.

    Paying never moves an item through the kitchen; it only stamps paid_at,
    confirmed and the payment method on the lines.
    """

    @staticmethod
    def _record_method_change(order: Order, new_method, changed_by="system"):
        if order.payment_method == new_method:
            return None
        change = PaymentMethodChange.objects.create(
            order=order,
            old_method=order.payment_method,
            new_method=new_method,
            changed_by=changed_by or "system",
        )
        order.payment_method = new_method
        order.save(update_fields=["payment_method", "updated_at"])
        return change

    @staticmethod
    @atomic_operation
    def pay_full(order_id, payment_method: str, total) -> Payment:
        if not payment_method:
            raise ValidationError("payment_method is required")
        amount = to_money(total)
        if amount < 0:
            raise ValidationError("total cannot be negative")

        order = Order.objects.locked(order_id)
        payment = Payment.objects.create(order=order, amount=amount, payment_method=payment_method)

        order.payment_method = payment_method
        order.total = amount
        order.is_paid = True
        order.save(update_fields=["payment_method", "total", "is_paid", "updated_at"])

        stamped = OrderItemService.stamp_paid(order, payment_method=payment_method)
        InventoryService.schedule_deduction(order.id)

        logger.info(f"Order {order.id} paid in full: {amount} by {payment_method} ({stamped} items)")
        publish_on_commit(ORDERS_UPDATED)
        return payment

    @staticmethod
    @atomic_operation
    def pay_split(methods, receipt_id=None, order_id=None, changed_by="system") -> SplitResult:
        """
        Record how a receipt was split across payment methods.

        The stored rows of the receipt are replaced, never appended to, so
        they always sum to the latest split. Without a receipt id a new one
        is minted for order_id. Every order bound to the receipt gets the
        composite method; each change is audited.
        """
        amounts = _split_amounts(methods)
        receipt_id = parse_receipt_id(receipt_id)

        if receipt_id is None and order_id is None:
            raise ValidationError("receipt_id or order_id is required")

        if order_id is not None:
            order = Order.objects.locked(order_id)
            if receipt_id is None:
                receipt_id = order.receipt_id or uuid.uuid4()
            if order.receipt_id != receipt_id:
                order.receipt_id = receipt_id
                order.save(update_fields=["receipt_id", "updated_at"])

        rows = ReceiptMethod.objects.replace_all(receipt_id, amounts)
        method = composite_method(amounts)
        total = sum_money(row.amount for row in rows)

        if method:
            for bound in Order.objects.select_for_update().filter(receipt_id=receipt_id).order_by("id"):
                PaymentReconciler._record_method_change(bound, method, changed_by)

        logger.info(f"Receipt {receipt_id} split as {method} totalling {total}")
        publish_on_commit(ORDERS_UPDATED)
        return SplitResult(receipt_id=receipt_id, payment_method=method, total=total)

    @staticmethod
    def get_receipt_methods(receipt_id) -> List[ReceiptMethod]:
        receipt_id = parse_receipt_id(receipt_id)
        if receipt_id is None:
            raise ValidationError("receipt_id is required")
        return list(ReceiptMethod.objects.filter(receipt_id=receipt_id).order_by("payment_method"))

    @staticmethod
    @atomic_operation
    def create_sub_order(order_id, total, payment_method=None, items: Iterable = (), receipt_id=None) -> SubOrder:
        """
        Pay for part of an order.

        The given lines are upserted like any other (resending them is safe),
        then stamped as paid and attached to the new sub-order. The sub-order
        total is added to the parent order total.
        """
        amount = to_money(total)
        if amount < 0:
            raise ValidationError("total cannot be negative")
        receipt_id = parse_receipt_id(receipt_id)

        order = Order.objects.locked(order_id)
        sub_order = SubOrder.objects.create(
            order=order,
            total=amount,
            payment_method=payment_method or None,
            receipt_id=receipt_id,
        )

        lines = OrderItemService.upsert_lines(order, items or [], receipt_id)
        stamped = OrderItemService.stamp_paid(
            order,
            payment_method=payment_method,
            unique_ids=[line.unique_id for line in lines],
            sub_order=sub_order,
            receipt_id=receipt_id,
        )

        order.total = to_money(order.total + amount)
        order.save(update_fields=["total", "updated_at"])

        logger.info(f"Sub-order {sub_order.id} of Order {order.id}: {amount} by {payment_method}, {stamped} items")
        publish_on_commit(ORDERS_UPDATED)
        return sub_order

    @staticmethod
    @atomic_operation
    def change_payment_method(order_id, payment_method: str, changed_by="system") -> Order:
        if not payment_method:
            raise ValidationError("payment_method is required")
        order = Order.objects.locked(order_id)
        if PaymentReconciler._record_method_change(order, payment_method, changed_by):
            logger.info(f"Order {order.id} payment method changed to {payment_method} by {changed_by}")
            publish_on_commit(ORDERS_UPDATED)
        return order

    @staticmethod
    def payment_changes(order_id):
        return PaymentMethodChange.objects.filter(order_id=order_id).order_by("-changed_at", "-id")

    @staticmethod
    def sub_orders(order_id=None):
        sub_orders = SubOrder.objects.prefetch_related("items").order_by("created_at", "id")
        if order_id is not None:
            sub_orders = sub_orders.filter(order_id=order_id)
        return sub_orders
