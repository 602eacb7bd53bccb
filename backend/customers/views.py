# customers/views.py

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from bookings.errors import booking_error_response
from bookings.serializers import BookRideSerializer
from services.booking_management import BookingError, customer_bookings
from services.dispatch import create_booking
from .permissions import IsCustomer


class BookRideView(APIView):
    """
    POST: Customer books a ride.

    Body:
    {
        "pickup": "Main Street 1",
        "dropoff": "Airport",
        "amount": "12.50"
    }
    """
    permission_classes = [IsAuthenticated, IsCustomer]

    def post(self, request):
        serializer = BookRideSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({
                "success": False,
                "error": "validation_error",
                "message": "Pickup, dropoff and amount are required",
                "errors": serializer.errors,
            }, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        try:
            result = create_booking(
                customer_id=request.user.id,
                pickup=data["pickup"],
                dropoff=data["dropoff"],
                amount=data["amount"],
            )
        except BookingError as exc:
            return booking_error_response(exc)

        booking = result.booking
        return Response({
            "id": booking.id,
            "pickup": booking.pickup,
            "dropoff": booking.dropoff,
            "status": booking.status,
            "amount": str(booking.amount),
            "date": booking.created_at,
            "message": result.message,
            "car_assigned": result.car_assigned,
            "driver_name": result.driver_name,
            "driver_id": booking.driver_id,
            "car_id": booking.car_id,
        }, status=status.HTTP_201_CREATED)


class MyBookingsView(APIView):
    """
    GET: The customer's ten most recent bookings.
    """
    permission_classes = [IsAuthenticated, IsCustomer]

    def get(self, request):
        return Response(customer_bookings(request.user.id))
