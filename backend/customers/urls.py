# customers/urls.py

from django.urls import path

from .views import BookRideView, MyBookingsView

app_name = "customers"

urlpatterns = [
    path("book/", BookRideView.as_view(), name="book-ride"),
    path("bookings/", MyBookingsView.as_view(), name="my-bookings"),
]
