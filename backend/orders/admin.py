from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("unique_id", "product", "name", "quantity", "price", "kitchen_status", "confirmed", "paid_at")
    readonly_fields = ("unique_id", "kitchen_status", "paid_at")
    autocomplete_fields = ("product",)

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin configuration for the Order model.
    """

    list_display = ("id", "kind", "table_number", "status", "total", "payment_method", "driver_id", "created_at")
    list_filter = ("status", "kind", "driver_status")
    search_fields = ("id", "customer_name", "customer_phone")
    readonly_fields = ("created_at", "updated_at", "stock_deducted_at")
    inlines = [OrderItemInline]


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "display_name", "quantity", "price", "kitchen_status", "confirmed", "paid_at")
    list_filter = ("kitchen_status", "confirmed")
    search_fields = ("name", "unique_id")
