from django.db import models
from django.utils.translation import gettext_lazy as _


class StockItem(models.Model):
    """
    A raw ingredient on the shelf. Order items are matched to stock by
    case-insensitive name and exact unit.
    """

    name = models.CharField(max_length=200)
    unit = models.CharField(max_length=20, blank=True, default="")
    quantity = models.DecimalField(max_digits=12, decimal_places=3, default=0)
    critical_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        null=True,
        blank=True,
        help_text=_("A stock_low alert is raised when quantity falls to or below this level."),
    )
    auto_added_to_cart = models.BooleanField(
        default=False,
        help_text=_("Already placed on the supplier shopping list."),
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = _("Stock item")
        verbose_name_plural = _("Stock items")
        indexes = [
            models.Index(fields=["name", "unit"], name="stock_name_unit_idx"),
        ]

    def __str__(self):
        return f"{self.name}: {self.quantity} {self.unit}"

    @property
    def is_low(self) -> bool:
        return bool(self.critical_quantity) and self.quantity <= self.critical_quantity
