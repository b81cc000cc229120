from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core_backend.exceptions import OrderNotFoundError
from products.models import Product
from .values import KITCHEN_STATUSES, parse_lines


class OrderQuerySet(models.QuerySet):
    def open(self):
        return self.exclude(status=Order.OrderStatus.CLOSED)

    def locked(self, order_id):
        """Fetch one order with a row lock. Must be called inside a transaction."""
        try:
            return self.select_for_update().get(pk=order_id)
        except (Order.DoesNotExist, ValueError, TypeError):
            raise OrderNotFoundError(order_id)


class Order(models.Model):
    # --- Status Fields ---
    class OrderStatus(models.TextChoices):
        OCCUPIED = "occupied", _("Occupied")  # Seated, nothing billed yet
        CONFIRMED = "confirmed", _("Confirmed")  # Items billed and sent to the kitchen
        PAID = "paid", _("Paid")
        CLOSED = "closed", _("Closed")  # Terminal unless reopened

    class OrderKind(models.TextChoices):
        TABLE = "table", _("Table")
        PHONE = "phone", _("Phone")
        PACKET = "packet", _("Packet")  # Online marketplace delivery

    class DriverStatus(models.TextChoices):
        ASSIGNED = "assigned", _("Assigned")
        PICKED_UP = "picked_up", _("Picked Up")
        ON_ROAD = "on_road", _("On Road")
        DELIVERED = "delivered", _("Delivered")

    kind = models.CharField(max_length=10, choices=OrderKind.choices, default=OrderKind.TABLE)
    table_number = models.PositiveIntegerField(null=True, blank=True, db_index=True)
    status = models.CharField(
        max_length=20, choices=OrderStatus.choices, default=OrderStatus.OCCUPIED, db_index=True
    )

    # --- Money ---
    total = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    payment_method = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        help_text=_("Single method, or a composite such as 'card+cash' for split receipts."),
    )
    is_paid = models.BooleanField(default=False)
    receipt_id = models.UUIDField(null=True, blank=True, db_index=True)

    # --- Customer (phone and packet orders) ---
    customer_name = models.CharField(max_length=200, blank=True, default="")
    customer_phone = models.CharField(max_length=50, blank=True, default="")
    customer_address = models.TextField(blank=True, default="")

    # --- Kitchen timing ---
    prep_started_at = models.DateTimeField(null=True, blank=True)
    estimated_ready_at = models.DateTimeField(null=True, blank=True)
    kitchen_delivered_at = models.DateTimeField(null=True, blank=True)

    # --- Delivery ---
    driver_id = models.PositiveIntegerField(null=True, blank=True, db_index=True)
    driver_status = models.CharField(
        max_length=20, choices=DriverStatus.choices, null=True, blank=True
    )
    picked_up_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)

    stock_deducted_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text=_("Set once ingredient stock has been deducted for this order."),
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OrderQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        indexes = [
            models.Index(fields=["status", "kind"], name="order_status_kind_idx"),
            models.Index(fields=["driver_id", "delivered_at"], name="order_driver_delivered_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["table_number"],
                condition=models.Q(table_number__isnull=False) & ~models.Q(status="closed"),
                name="one_open_order_per_table",
            ),
        ]

    def __str__(self):
        where = f"table {self.table_number}" if self.table_number else self.kind
        return f"Order {self.pk} ({where}) - {self.status}"

    @property
    def is_open(self) -> bool:
        return self.status != self.OrderStatus.CLOSED


class OrderItem(models.Model):
    class KitchenStatus(models.TextChoices):
        NEW = "new", _("New")
        PREPARING = "preparing", _("Preparing")
        READY = "ready", _("Ready")
        DELIVERED = "delivered", _("Delivered")

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        related_name="order_items",
        null=True,
        blank=True,
        help_text=_("Catalog product. Null for items from external channels."),
    )
    name = models.CharField(max_length=200, blank=True, default="")
    quantity = models.PositiveIntegerField(default=1)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Unit price at the time of sale."),
    )
    ingredients = models.JSONField(default=list, blank=True)
    extras = models.JSONField(default=list, blank=True)
    unique_id = models.CharField(
        max_length=64,
        help_text=_("Client-generated key; resending a line with the same key never duplicates it."),
    )
    confirmed = models.BooleanField(default=False)
    kitchen_status = models.CharField(
        max_length=20, choices=KitchenStatus.choices, default=KitchenStatus.NEW, db_index=True
    )
    payment_method = models.CharField(max_length=100, null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    receipt_id = models.UUIDField(null=True, blank=True, db_index=True)
    sub_order = models.ForeignKey(
        "payments.SubOrder",
        on_delete=models.SET_NULL,
        related_name="items",
        null=True,
        blank=True,
    )
    note = models.TextField(blank=True, default="", help_text=_("Customer notes, e.g., 'no onions'"))
    discount_type = models.CharField(max_length=20, null=True, blank=True)
    discount_value = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["order", "unique_id"], name="unique_item_key_per_order"),
            models.CheckConstraint(condition=models.Q(quantity__gt=0), name="order_item_quantity_positive"),
        ]

    def __str__(self):
        return f"{self.quantity} of {self.display_name} in Order {self.order_id}"

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        return self.product.name if self.product_id else ""

    @property
    def kitchen_rank(self) -> int:
        return KITCHEN_STATUSES.index(self.kitchen_status)

    @property
    def ingredient_lines(self):
        return parse_lines(self.ingredients)

    @property
    def extra_lines(self):
        return parse_lines(self.extras)

    @property
    def line_total(self):
        return self.quantity * self.price
