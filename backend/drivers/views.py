from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from bookings.errors import booking_error_response
from bookings.models import STATUS_ACCEPTED, STATUS_COMPLETED
from services.booking_management import (
    BookingError,
    accept_booking,
    complete_booking,
    driver_bookings,
    pending_bookings,
)
from drivers.permissions import IsDriver


class PendingRidesView(APIView):
    """GET: Bookings still waiting for a driver."""
    permission_classes = [IsAuthenticated, IsDriver]

    def get(self, request):
        rides = pending_bookings()
        return Response({"rides": rides, "count": len(rides)})


class AcceptRideView(APIView):
    """POST: Driver accepts a pending booking."""
    permission_classes = [IsAuthenticated, IsDriver]

    def post(self, request, booking_id: int):
        try:
            result = accept_booking(booking_id, request.user.id)
        except BookingError as exc:
            return booking_error_response(exc)

        booking = result.booking
        return Response({
            "success": True,
            "message": result.message,
            "booking_id": booking.id,
            "status": booking.status,
            "driver_id": booking.driver_id,
            "car_id": booking.car_id,
        })


class CompleteRideView(APIView):
    """POST: Driver completes an accepted booking; its car becomes available."""
    permission_classes = [IsAuthenticated, IsDriver]

    def post(self, request, booking_id: int):
        try:
            result = complete_booking(booking_id, request.user.id)
        except BookingError as exc:
            return booking_error_response(exc)

        return Response({
            "success": True,
            "message": result.message,
            "booking_id": result.booking.id,
            "status": result.booking.status,
        })


class AcceptedRidesView(APIView):
    permission_classes = [IsAuthenticated, IsDriver]

    def get(self, request):
        rides = driver_bookings(request.user.id, STATUS_ACCEPTED)
        return Response({"rides": rides, "count": len(rides)})


class CompletedRidesView(APIView):
    permission_classes = [IsAuthenticated, IsDriver]

    def get(self, request):
        rides = driver_bookings(request.user.id, STATUS_COMPLETED)
        return Response({"rides": rides, "count": len(rides)})
