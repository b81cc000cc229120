from django.db import models
from django.utils.translation import gettext_lazy as _


class Table(models.Model):
    """A dining table. Occupied exactly while an open order is seated at it."""

    number = models.PositiveIntegerField(unique=True)
    is_occupied = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["number"]
        verbose_name = _("Table")
        verbose_name_plural = _("Tables")

    def __str__(self):
        return f"Table {self.number}{' (occupied)' if self.is_occupied else ''}"
