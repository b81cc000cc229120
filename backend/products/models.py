from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Product(models.Model):
    name = models.CharField(max_length=200, help_text=_("Name of the product."))
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("The selling price of the product."),
    )
    category = models.CharField(max_length=100, blank=True, default="")
    preparation_time = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text=_("Typical preparation time in minutes. Unset uses the kitchen default."),
    )
    ingredients = models.JSONField(
        default=list,
        blank=True,
        help_text=_("Default ingredient lines copied onto new order items."),
    )
    extras = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Product")
        verbose_name_plural = _("Products")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category", "is_active"], name="product_category_active_idx"),
            models.Index(fields=["name"], name="product_name_idx"),
        ]

    def __str__(self):
        return self.name

    @property
    def prep_minutes(self) -> int:
        if self.preparation_time:
            return self.preparation_time
        return settings.POS_KITCHEN["DEFAULT_PREP_MINUTES"]
