from django.contrib import admin

from .models import StockItem


@admin.register(StockItem)
class StockItemAdmin(admin.ModelAdmin):
    list_display = ("name", "unit", "quantity", "critical_quantity", "auto_added_to_cart")
    search_fields = ("name",)
    list_filter = ("unit", "auto_added_to_cart")
