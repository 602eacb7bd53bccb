from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from accounts.models import User
from fleet.models import Car


class CarInline(admin.TabularInline):
    """Cars operated by a driver"""
    model = Car
    fk_name = "driver"
    fields = ("plate_number", "make", "model", "status")
    extra = 0
    show_change_link = True


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin panel for custom User model"""

    inlines = [CarInline]

    list_display = [
        "username",
        "email",
        "role",
        "status",
        "phone_number",
        "is_active",
        "is_staff",
    ]

    list_filter = [
        "role",
        "status",
        "is_active",
        "is_staff",
    ]

    search_fields = [
        "username",
        "email",
        "phone_number",
        "license_number",
    ]

    ordering = ("username",)

    # Extend default Django UserAdmin fieldsets
    fieldsets = BaseUserAdmin.fieldsets + (
        (
            "Dispatch Info",
            {
                "fields": (
                    "role",
                    "status",
                    "phone_number",
                    "license_number",
                )
            },
        ),
    )

    # For create user page in admin
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        (
            "Dispatch Info",
            {
                "fields": (
                    "role",
                    "status",
                    "phone_number",
                    "license_number",
                )
            },
        ),
    )
