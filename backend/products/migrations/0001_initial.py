from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Name of the product.", max_length=200)),
                (
                    "price",
                    models.DecimalField(decimal_places=2, help_text="The selling price of the product.", max_digits=10),
                ),
                ("category", models.CharField(blank=True, default="", max_length=100)),
                (
                    "preparation_time",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Typical preparation time in minutes. Unset uses the kitchen default.",
                        null=True,
                    ),
                ),
                (
                    "ingredients",
                    models.JSONField(
                        blank=True, default=list, help_text="Default ingredient lines copied onto new order items."
                    ),
                ),
                ("extras", models.JSONField(blank=True, default=list)),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["category", "is_active"], name="product_category_active_idx"),
                    models.Index(fields=["name"], name="product_name_idx"),
                ],
            },
        ),
    ]
