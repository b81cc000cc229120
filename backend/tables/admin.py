from django.contrib import admin

from .models import Table


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ("number", "is_occupied", "updated_at")
    list_filter = ("is_occupied",)
