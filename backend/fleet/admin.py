from django.contrib import admin
from fleet.models import Car


@admin.register(Car)
class CarAdmin(admin.ModelAdmin):
    """Admin panel for managing the fleet"""

    list_display = [
        "plate_number",
        "make",
        "model",
        "year",
        "driver",
        "status",
    ]

    list_filter = [
        "status",
        "type",
    ]

    search_fields = [
        "plate_number",
        "make",
        "model",
        "driver__username",
    ]

    ordering = ("id",)
