from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("products", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "kind",
                    models.CharField(
                        choices=[("table", "Table"), ("phone", "Phone"), ("packet", "Packet")],
                        default="table",
                        max_length=10,
                    ),
                ),
                ("table_number", models.PositiveIntegerField(blank=True, db_index=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("occupied", "Occupied"),
                            ("confirmed", "Confirmed"),
                            ("paid", "Paid"),
                            ("closed", "Closed"),
                        ],
                        db_index=True,
                        default="occupied",
                        max_length=20,
                    ),
                ),
                ("total", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                (
                    "payment_method",
                    models.CharField(
                        blank=True,
                        help_text="Single method, or a composite such as 'card+cash' for split receipts.",
                        max_length=100,
                        null=True,
                    ),
                ),
                ("is_paid", models.BooleanField(default=False)),
                ("receipt_id", models.UUIDField(blank=True, db_index=True, null=True)),
                ("customer_name", models.CharField(blank=True, default="", max_length=200)),
                ("customer_phone", models.CharField(blank=True, default="", max_length=50)),
                ("customer_address", models.TextField(blank=True, default="")),
                ("prep_started_at", models.DateTimeField(blank=True, null=True)),
                ("estimated_ready_at", models.DateTimeField(blank=True, null=True)),
                ("kitchen_delivered_at", models.DateTimeField(blank=True, null=True)),
                ("driver_id", models.PositiveIntegerField(blank=True, db_index=True, null=True)),
                (
                    "driver_status",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("assigned", "Assigned"),
                            ("picked_up", "Picked Up"),
                            ("on_road", "On Road"),
                            ("delivered", "Delivered"),
                        ],
                        max_length=20,
                        null=True,
                    ),
                ),
                ("picked_up_at", models.DateTimeField(blank=True, null=True)),
                ("delivered_at", models.DateTimeField(blank=True, null=True)),
                (
                    "stock_deducted_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="Set once ingredient stock has been deducted for this order.",
                        null=True,
                    ),
                ),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["status", "kind"], name="order_status_kind_idx"),
                    models.Index(fields=["driver_id", "delivered_at"], name="order_driver_delivered_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("table_number__isnull", False), models.Q(("status", "closed"), _negated=True)),
                        fields=("table_number",),
                        name="one_open_order_per_table",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(blank=True, default="", max_length=200)),
                ("quantity", models.PositiveIntegerField(default=1)),
                (
                    "price",
                    models.DecimalField(decimal_places=2, help_text="Unit price at the time of sale.", max_digits=10),
                ),
                ("ingredients", models.JSONField(blank=True, default=list)),
                ("extras", models.JSONField(blank=True, default=list)),
                (
                    "unique_id",
                    models.CharField(
                        help_text="Client-generated key; resending a line with the same key never duplicates it.",
                        max_length=64,
                    ),
                ),
                ("confirmed", models.BooleanField(default=False)),
                (
                    "kitchen_status",
                    models.CharField(
                        choices=[
                            ("new", "New"),
                            ("preparing", "Preparing"),
                            ("ready", "Ready"),
                            ("delivered", "Delivered"),
                        ],
                        db_index=True,
                        default="new",
                        max_length=20,
                    ),
                ),
                ("payment_method", models.CharField(blank=True, max_length=100, null=True)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("receipt_id", models.UUIDField(blank=True, db_index=True, null=True)),
                (
                    "note",
                    models.TextField(blank=True, default="", help_text="Customer notes, e.g., 'no onions'"),
                ),
                ("discount_type", models.CharField(blank=True, max_length=20, null=True)),
                ("discount_value", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="items", to="orders.order"
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        help_text="Catalog product. Null for items from external channels.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="order_items",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Order Item",
                "verbose_name_plural": "Order Items",
                "ordering": ["id"],
                "constraints": [
                    models.UniqueConstraint(fields=("order", "unique_id"), name="unique_item_key_per_order"),
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gt", 0)), name="order_item_quantity_positive"
                    ),
                ],
            },
        ),
    ]
