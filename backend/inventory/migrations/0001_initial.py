from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StockItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("unit", models.CharField(blank=True, default="", max_length=20)),
                ("quantity", models.DecimalField(decimal_places=3, default=0, max_digits=12)),
                (
                    "critical_quantity",
                    models.DecimalField(
                        blank=True,
                        decimal_places=3,
                        help_text="A stock_low alert is raised when quantity falls to or below this level.",
                        max_digits=12,
                        null=True,
                    ),
                ),
                (
                    "auto_added_to_cart",
                    models.BooleanField(default=False, help_text="Already placed on the supplier shopping list."),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Stock item",
                "verbose_name_plural": "Stock items",
                "ordering": ["name"],
                "indexes": [models.Index(fields=["name", "unit"], name="stock_name_unit_idx")],
            },
        ),
    ]
