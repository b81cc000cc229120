from django.contrib import admin

from .models import CashRegisterLog


@admin.register(CashRegisterLog)
class CashRegisterLogAdmin(admin.ModelAdmin):
    list_display = ("type", "amount", "note", "created_at")
    list_filter = ("type",)
    ordering = ("-created_at",)
