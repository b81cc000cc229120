from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="KitchenTimer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(blank=True, default="", max_length=100)),
                ("seconds_left", models.PositiveIntegerField(default=0)),
                ("total_seconds", models.PositiveIntegerField(default=0)),
                ("running", models.BooleanField(db_index=True, default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Kitchen timer",
                "verbose_name_plural": "Kitchen timers",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="KitchenCompileSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("excluded_ingredients", models.JSONField(blank=True, default=list)),
                ("excluded_categories", models.JSONField(blank=True, default=list)),
                ("excluded_items", models.JSONField(blank=True, default=list)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Kitchen compile settings",
                "verbose_name_plural": "Kitchen compile settings",
            },
        ),
    ]
