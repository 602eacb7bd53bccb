"""Booking lifecycle event kinds broadcast to connected listeners."""

NEW_BOOKING_CREATED = "new_booking_created"
RIDE_ACCEPTED = "ride_accepted"
RIDE_COMPLETED = "ride_completed"
BOOKING_PAID = "booking_paid"

EVENT_KINDS = (
    NEW_BOOKING_CREATED,
    RIDE_ACCEPTED,
    RIDE_COMPLETED,
    BOOKING_PAID,
)
