from rest_framework import serializers

from .models import Booking

NOT_ASSIGNED = "Not assigned"


class BookingViewSerializer(serializers.ModelSerializer):
    """
    Read-only booking row with display names resolved at read time.

    Car and driver are optional on a booking; missing values are rendered as
    "Not assigned" instead of null.
    """
    customer_name = serializers.SerializerMethodField()
    driver_name = serializers.SerializerMethodField()
    car_make = serializers.SerializerMethodField()
    car_model = serializers.SerializerMethodField()
    car_plate = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = ['id', 'customer_id', 'customer_name', 'driver_id', 'driver_name',
                  'car_id', 'car_make', 'car_model', 'car_plate', 'pickup', 'dropoff',
                  'status', 'amount', 'created_at', 'accepted_at', 'completed_at', 'paid_at']
        read_only_fields = fields

    def get_customer_name(self, obj):
        return obj.customer.display_name if obj.customer_id else NOT_ASSIGNED

    def get_driver_name(self, obj):
        return obj.driver.display_name if obj.driver_id else NOT_ASSIGNED

    def get_car_make(self, obj):
        return obj.car.make if obj.car_id else NOT_ASSIGNED

    def get_car_model(self, obj):
        return obj.car.model if obj.car_id else NOT_ASSIGNED

    def get_car_plate(self, obj):
        return obj.car.plate_number if obj.car_id else NOT_ASSIGNED


class BookRideSerializer(serializers.Serializer):
    """
    Shape of a ride booking request body.

    Only checks that the fields are present; blank locations and the amount
    rules are enforced by the dispatch service so they hold for every caller.
    """
    pickup = serializers.CharField(allow_blank=True, trim_whitespace=False)
    dropoff = serializers.CharField(allow_blank=True, trim_whitespace=False)
    amount = serializers.CharField()
