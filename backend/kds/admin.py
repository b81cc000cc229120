from django.contrib import admin

from .models import KitchenCompileSettings, KitchenTimer


@admin.register(KitchenTimer)
class KitchenTimerAdmin(admin.ModelAdmin):
    list_display = ("name", "seconds_left", "total_seconds", "running", "updated_at")
    list_filter = ("running",)


@admin.register(KitchenCompileSettings)
class KitchenCompileSettingsAdmin(admin.ModelAdmin):
    list_display = ("__str__", "updated_at")

    def has_add_permission(self, request):
        return not KitchenCompileSettings.objects.exists()
