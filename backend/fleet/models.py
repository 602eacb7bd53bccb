from django.db import models
from django.conf import settings

User = settings.AUTH_USER_MODEL


class Car(models.Model):
    """A vehicle in the fleet, optionally operated by a driver"""
    STATUS_AVAILABLE = 'available'
    STATUS_BUSY = 'busy'
    STATUS_MAINTENANCE = 'maintenance'
    STATUS_OUT_OF_SERVICE = 'out_of_service'

    # Only available/busy are toggled by dispatch; the rest are set by admins
    STATUS_CHOICES = [
        (STATUS_AVAILABLE, 'Available'),
        (STATUS_BUSY, 'Busy'),
        (STATUS_MAINTENANCE, 'Maintenance'),
        (STATUS_OUT_OF_SERVICE, 'Out of Service'),
    ]

    driver = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='cars',
        limit_choices_to={'role': 'driver'},
    )

    # Vehicle details
    make = models.CharField(max_length=50)
    model = models.CharField(max_length=50)
    year = models.PositiveIntegerField(null=True, blank=True)
    plate_number = models.CharField(max_length=20, unique=True)
    color = models.CharField(max_length=30, blank=True)
    type = models.CharField(max_length=30, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_AVAILABLE)

    class Meta:
        db_table = 'cars'
        ordering = ['id']

    def __str__(self):
        return f"{self.make} {self.model} ({self.plate_number})"
