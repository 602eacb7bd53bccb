from django.db import models
from django.conf import settings
from django.utils import timezone

STATUS_PENDING = 'pending'
STATUS_ACCEPTED = 'accepted'
STATUS_COMPLETED = 'completed'
STATUS_PAID = 'paid'


class Booking(models.Model):
    """A ride request tying a customer to an optional car and driver"""

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_ACCEPTED, 'Accepted'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_PAID, 'Paid'),
    ]

    # Foreign keys
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='customer_bookings'
    )

    driver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='driver_bookings'
    )

    car = models.ForeignKey(
        'fleet.Car',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='bookings'
    )

    # Free text locations, not geocoded here
    pickup = models.TextField()
    dropoff = models.TextField()

    # Supplied by the caller, never changed after creation
    amount = models.DecimalField(max_digits=10, decimal_places=2)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)

    # Timestamps
    created_at = models.DateTimeField(default=timezone.now)
    accepted_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'bookings'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='booking_status_idx'),
        ]

    def __str__(self):
        return f"Booking #{self.id} - {self.customer} - {self.status}"
