"""Tells what to show in the Django admin interface for bookings app"""

from django.contrib import admin
from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Booking admin"""
    list_display = ['id', 'customer', 'driver', 'car', 'status', 'amount', 'created_at', 'paid_at']
    list_filter = ['status', 'created_at']
    search_fields = ['customer__username', 'driver__username', 'car__plate_number', 'pickup', 'dropoff']
    readonly_fields = ['amount', 'created_at', 'accepted_at', 'completed_at', 'paid_at']
    date_hierarchy = 'created_at'
