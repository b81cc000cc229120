from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class CashRegisterLog(models.Model):
    """
    One opening or closing of the cash register.

    The register is open when the newest entry is an "open" entry.
    """

    class EntryType(models.TextChoices):
        OPEN = "open", _("Open")
        CLOSE = "close", _("Close")

    type = models.CharField(max_length=10, choices=EntryType.choices)
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        help_text=_("Cash counted in the drawer when the entry was made."),
    )
    note = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = _("Cash register log")
        verbose_name_plural = _("Cash register logs")

    def __str__(self):
        return f"{self.get_type_display()} {self.amount} at {self.created_at:%Y-%m-%d %H:%M}"
