from django.contrib import admin

from .models import Payment, PaymentMethodChange, ReceiptMethod, SubOrder


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "amount", "payment_method", "created_at")
    list_filter = ("payment_method",)
    search_fields = ("order__id",)


@admin.register(SubOrder)
class SubOrderAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "total", "payment_method", "receipt_id", "created_at")
    search_fields = ("order__id", "receipt_id")


@admin.register(ReceiptMethod)
class ReceiptMethodAdmin(admin.ModelAdmin):
    list_display = ("receipt_id", "payment_method", "amount")
    search_fields = ("receipt_id",)


@admin.register(PaymentMethodChange)
class PaymentMethodChangeAdmin(admin.ModelAdmin):
    list_display = ("order", "old_method", "new_method", "changed_by", "changed_at")
    readonly_fields = ("order", "old_method", "new_method", "changed_by", "changed_at")
