from django.urls import path
from .views import (
    PendingRidesView,
    AcceptRideView,
    CompleteRideView,
    AcceptedRidesView,
    CompletedRidesView,
)

urlpatterns = [
    path("pending-rides/", PendingRidesView.as_view(), name="driver-pending-rides"),
    path("bookings/<int:booking_id>/accept/", AcceptRideView.as_view(), name="driver-accept-ride"),
    path("bookings/<int:booking_id>/complete/", CompleteRideView.as_view(), name="driver-complete-ride"),
    path("accepted-rides/", AcceptedRidesView.as_view(), name="driver-accepted-rides"),
    path("completed-rides/", CompletedRidesView.as_view(), name="driver-completed-rides"),
]
