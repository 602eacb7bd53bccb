from django.urls import path
from . import views

app_name = 'bookings'

urlpatterns = [
    path('bookings/', views.AdminBookingListView.as_view(), name='all-bookings'),
    path('bookings/<int:booking_id>/mark-paid/', views.MarkBookingPaidView.as_view(), name='mark-paid'),
    path('statistics/', views.BookingStatisticsView.as_view(), name='statistics'),
]
