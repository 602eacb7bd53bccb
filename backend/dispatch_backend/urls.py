from django.contrib import admin
from django.urls import path, include

from .views import health_check

urlpatterns = [
    path('admin/', admin.site.urls),
    path("health/", health_check),  # Health check endpoint

    # Customer APIs (book a ride, my bookings)
    path('api/customer/', include('customers.urls')),

    # Driver APIs (pending rides, accept, complete, ride lists)
    path('api/driver/', include('drivers.urls')),

    # Admin booking APIs (all bookings, mark paid, statistics)
    path('api/admin/', include('bookings.urls')),
]
