from django.db import models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from orders.models import Order


class Payment(models.Model):
    """One full payment of an order."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="payments")
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    payment_method = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")

    def __str__(self):
        return f"{self.amount} by {self.payment_method} for Order {self.order_id}"


class SubOrder(models.Model):
    """
    A partial payment of an order: the guest settles some of the lines and the
    rest of the order stays open.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="sub_orders")
    total = models.DecimalField(max_digits=10, decimal_places=2)
    payment_method = models.CharField(max_length=100, null=True, blank=True)
    receipt_id = models.UUIDField(null=True, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name = _("Sub-order")
        verbose_name_plural = _("Sub-orders")

    def __str__(self):
        return f"Sub-order {self.pk} of Order {self.order_id} ({self.total})"


class ReceiptMethodManager(models.Manager):
    @transaction.atomic
    def replace_all(self, receipt_id, amounts_by_method):
        """
        Replace every split row of a receipt.

        Rows with a non-positive amount are dropped. Runs as one transaction, so
        a reader sees either the previous split or the new one.
        """
        self.filter(receipt_id=receipt_id).delete()
        rows = [
            self.model(receipt_id=receipt_id, payment_method=method, amount=amount)
            for method, amount in amounts_by_method.items()
            if amount > 0
        ]
        return self.bulk_create(rows)


class ReceiptMethod(models.Model):
    """How much of a receipt was paid with one method."""

    receipt_id = models.UUIDField(db_index=True)
    payment_method = models.CharField(max_length=100)
    amount = models.DecimalField(max_digits=10, decimal_places=2)

    objects = ReceiptMethodManager()

    class Meta:
        ordering = ["payment_method"]
        verbose_name = _("Receipt method")
        verbose_name_plural = _("Receipt methods")
        constraints = [
            models.UniqueConstraint(
                fields=["receipt_id", "payment_method"], name="unique_method_per_receipt"
            ),
            models.CheckConstraint(condition=models.Q(amount__gt=0), name="receipt_method_amount_positive"),
        ]

    def __str__(self):
        return f"{self.payment_method}: {self.amount} ({self.receipt_id})"


class PaymentMethodChange(models.Model):
    """Audit trail of payment method corrections."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="payment_method_changes")
    old_method = models.CharField(max_length=100, null=True, blank=True)
    new_method = models.CharField(max_length=100)
    changed_by = models.CharField(max_length=100, default="system")
    changed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-changed_at", "-id"]
        verbose_name = _("Payment method change")
        verbose_name_plural = _("Payment method changes")

    def __str__(self):
        return f"Order {self.order_id}: {self.old_method} -> {self.new_method} by {self.changed_by}"
