from django.db import models
from django.utils.translation import gettext_lazy as _


class KitchenTimer(models.Model):
    """A countdown the kitchen runs for things that are not order lines (oven, fryer, proofing)."""

    name = models.CharField(max_length=100, blank=True, default="")
    seconds_left = models.PositiveIntegerField(default=0)
    total_seconds = models.PositiveIntegerField(default=0)
    running = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name = _("Kitchen timer")
        verbose_name_plural = _("Kitchen timers")

    def __str__(self):
        state = "running" if self.running else "paused"
        return f"{self.name or 'Timer'} {self.seconds_left}/{self.total_seconds}s ({state})"


class KitchenCompileSettings(models.Model):
    """
    What the kitchen screen leaves out. Single row, always pk=1.

    excluded_categories and excluded_items (product ids) hide lines from the
    kitchen queue; excluded_ingredients is kept for the screen's ingredient
    summary.
    """

    SINGLETON_ID = 1

    excluded_ingredients = models.JSONField(default=list, blank=True)
    excluded_categories = models.JSONField(default=list, blank=True)
    excluded_items = models.JSONField(default=list, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Kitchen compile settings")
        verbose_name_plural = _("Kitchen compile settings")

    def __str__(self):
        return "Kitchen compile settings"

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_ID
        super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> "KitchenCompileSettings":
        settings, _created = cls.objects.get_or_create(pk=cls.SINGLETON_ID)
        return settings
