from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from services.booking_management import (
    BookingError,
    all_bookings,
    booking_statistics,
    mark_booking_paid,
)
from .errors import booking_error_response
from .permissions import IsAdminRole


class AdminBookingListView(APIView):
    """
    GET: Every booking with customer, driver and car names.
    """
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get(self, request):
        bookings = all_bookings()
        return Response({"count": len(bookings), "bookings": bookings})


class MarkBookingPaidView(APIView):
    """
    POST: Mark a completed booking as paid.
    """
    permission_classes = [IsAuthenticated, IsAdminRole]

    def post(self, request, booking_id: int):
        try:
            result = mark_booking_paid(booking_id)
        except BookingError as exc:
            return booking_error_response(exc)

        return Response({
            "success": True,
            "message": result.message,
            "booking_id": result.booking.id,
            "status": result.booking.status,
            "paid_at": result.booking.paid_at,
        }, status=status.HTTP_200_OK)


class BookingStatisticsView(APIView):
    """
    GET: Booking counts by status, paid revenue and user totals.
    """
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get(self, request):
        return Response(booking_statistics())
