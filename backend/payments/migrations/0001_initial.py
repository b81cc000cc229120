from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("payment_method", models.CharField(max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="payments", to="orders.order"
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment",
                "verbose_name_plural": "Payments",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="SubOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("total", models.DecimalField(decimal_places=2, max_digits=10)),
                ("payment_method", models.CharField(blank=True, max_length=100, null=True)),
                ("receipt_id", models.UUIDField(blank=True, db_index=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="sub_orders", to="orders.order"
                    ),
                ),
            ],
            options={
                "verbose_name": "Sub-order",
                "verbose_name_plural": "Sub-orders",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="ReceiptMethod",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("receipt_id", models.UUIDField(db_index=True)),
                ("payment_method", models.CharField(max_length=100)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10)),
            ],
            options={
                "verbose_name": "Receipt method",
                "verbose_name_plural": "Receipt methods",
                "ordering": ["payment_method"],
                "constraints": [
                    models.UniqueConstraint(fields=("receipt_id", "payment_method"), name="unique_method_per_receipt"),
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="receipt_method_amount_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentMethodChange",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("old_method", models.CharField(blank=True, max_length=100, null=True)),
                ("new_method", models.CharField(max_length=100)),
                ("changed_by", models.CharField(default="system", max_length=100)),
                ("changed_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payment_method_changes",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment method change",
                "verbose_name_plural": "Payment method changes",
                "ordering": ["-changed_at", "-id"],
            },
        ),
    ]
