from decimal import Decimal
from unittest.mock import patch

from django.db import OperationalError
from django.test import TestCase, override_settings

from bookings.models import Booking
from fleet.models import Car
from services.booking_management import repository
from services.booking_management.exceptions import (
	NotFoundError,
	TransientStorageError,
	ValidationError,
)
from services.dispatch import create_booking, validate_booking_request

from .helpers import make_car, make_customer, make_driver


class CreateBookingTests(TestCase):
	def setUp(self):
		self.customer = make_customer(first_name='Alice', last_name='Smith')
		self.driver = make_driver(first_name='Bob', last_name='Jones')
		self.car = make_car(self.driver, 'KA-1001')

	def test_assigns_available_car_and_its_driver(self):
		result = create_booking(self.customer.id, 'Main Street 1', 'Airport', '12.50')

		self.assertTrue(result.car_assigned)
		self.assertEqual(result.message, 'Ride booked successfully! Driver assigned.')
		self.assertEqual(result.driver_name, 'Bob Jones')

		booking = Booking.objects.get(id=result.booking.id)
		self.assertEqual(booking.status, 'pending')
		self.assertEqual(booking.car_id, self.car.id)
		self.assertEqual(booking.driver_id, self.driver.id)
		self.assertEqual(booking.amount, Decimal('12.50'))

		self.car.refresh_from_db()
		self.assertEqual(self.car.status, Car.STATUS_BUSY)

	def test_second_booking_waits_when_only_car_is_busy(self):
		first = create_booking(self.customer.id, 'A', 'B', '10')
		second = create_booking(self.customer.id, 'C', 'D', '10')

		self.assertTrue(first.car_assigned)
		self.assertFalse(second.car_assigned)
		self.assertEqual(second.message, 'Ride booked successfully! Waiting for available driver.')
		self.assertEqual(second.driver_name, 'Not assigned yet')
		self.assertIsNone(second.booking.car_id)
		self.assertIsNone(second.booking.driver_id)
		self.assertEqual(Car.objects.filter(status=Car.STATUS_BUSY).count(), 1)

	def test_lowest_car_id_is_chosen(self):
		other_driver = make_driver(username='driver_two')
		make_car(other_driver, 'KA-1002')

		result = create_booking(self.customer.id, 'A', 'B', '10')

		self.assertEqual(result.booking.car_id, self.car.id)

	def test_cars_of_inactive_drivers_or_not_available_are_skipped(self):
		self.car.status = Car.STATUS_MAINTENANCE
		self.car.save()
		on_leave = make_driver(username='on_leave', status='on_leave')
		make_car(on_leave, 'KA-2001')
		make_car(None, 'KA-2002')

		result = create_booking(self.customer.id, 'A', 'B', '10')

		self.assertFalse(result.car_assigned)
		self.assertFalse(Car.objects.filter(status=Car.STATUS_BUSY).exists())

	def test_no_cars_at_all_creates_unassigned_booking(self):
		Car.objects.all().delete()

		result = create_booking(self.customer.id, 'A', 'B', '5.00')

		self.assertFalse(result.car_assigned)
		self.assertTrue(Booking.objects.filter(id=result.booking.id, status='pending').exists())

	def test_unknown_customer_raises_not_found(self):
		with self.assertRaises(NotFoundError) as ctx:
			create_booking(9999, 'A', 'B', '10')

		self.assertEqual(ctx.exception.message, 'Customer with ID 9999 not found')
		self.assertFalse(Booking.objects.exists())
		self.car.refresh_from_db()
		self.assertEqual(self.car.status, Car.STATUS_AVAILABLE)

	def test_driver_cannot_book_as_customer(self):
		with self.assertRaises(NotFoundError):
			create_booking(self.driver.id, 'A', 'B', '10')

	def test_lost_claim_moves_to_next_candidate(self):
		second_driver = make_driver(username='driver_two')
		second_car = make_car(second_driver, 'KA-1002')
		real_claim = repository.claim_car

		def claim(car):
			if car.id == self.car.id:
				return False
			return real_claim(car)

		with patch('services.booking_management.repository.claim_car', side_effect=claim) as mock_claim:
			result = create_booking(self.customer.id, 'A', 'B', '10')

		self.assertEqual(mock_claim.call_count, 2)
		self.assertEqual(result.booking.car_id, second_car.id)
		self.assertEqual(result.booking.driver_id, second_driver.id)

	def test_every_claim_lost_falls_back_to_unassigned(self):
		make_car(make_driver(username='driver_two'), 'KA-1002')

		with patch('services.booking_management.repository.claim_car', return_value=False):
			result = create_booking(self.customer.id, 'A', 'B', '10')

		self.assertFalse(result.car_assigned)
		self.assertIsNone(result.booking.car_id)

	@override_settings(DISPATCH_MAX_CANDIDATES=1)
	def test_candidate_search_is_bounded(self):
		make_car(make_driver(username='driver_two'), 'KA-1002')

		with patch('services.booking_management.repository.claim_car', return_value=False) as mock_claim:
			result = create_booking(self.customer.id, 'A', 'B', '10')

		self.assertEqual(mock_claim.call_count, 1)
		self.assertFalse(result.car_assigned)

	def test_transient_error_is_retried(self):
		real_get_customer = repository.get_customer

		with patch(
			'services.booking_management.repository.get_customer',
			side_effect=[OperationalError('database is locked'), real_get_customer(self.customer.id)],
		) as mock_get:
			result = create_booking(self.customer.id, 'A', 'B', '10')

		self.assertEqual(mock_get.call_count, 2)
		self.assertEqual(Booking.objects.count(), 1)
		self.assertTrue(result.car_assigned)

	def test_retry_rolls_back_partial_work(self):
		real_insert = repository.insert_booking
		calls = []

		def insert(booking):
			calls.append(booking)
			if len(calls) == 1:
				raise OperationalError('deadlock detected')
			return real_insert(booking)

		with patch('services.booking_management.repository.insert_booking', side_effect=insert):
			result = create_booking(self.customer.id, 'A', 'B', '10')

		self.assertEqual(len(calls), 2)
		self.assertEqual(Booking.objects.count(), 1)
		self.assertEqual(result.booking.car_id, self.car.id)
		self.assertEqual(Car.objects.filter(status=Car.STATUS_BUSY).count(), 1)

	def test_retries_exhausted_raises_transient_storage_error(self):
		with patch(
			'services.booking_management.repository.get_customer',
			side_effect=OperationalError('lock timeout'),
		) as mock_get:
			with self.assertRaises(TransientStorageError):
				create_booking(self.customer.id, 'A', 'B', '10')

		self.assertEqual(mock_get.call_count, 3)
		self.assertFalse(Booking.objects.exists())


class ValidateBookingRequestTests(TestCase):
	def test_invalid_input_never_touches_storage(self):
		cases = [
			(0, 'A', 'B', '10'),
			(-3, 'A', 'B', '10'),
			('abc', 'A', 'B', '10'),
			(True, 'A', 'B', '10'),
			(1, '', 'B', '10'),
			(1, '   ', 'B', '10'),
			(1, 'A', '\t', '10'),
			(1, 'A', None, '10'),
			(1, 'A', 'B', '4.99'),
			(1, 'A', 'B', 'ten'),
			(1, 'A', 'B', 'NaN'),
			(1, 'A', 'B', 'Infinity'),
			(1, 'A', 'B', None),
		]
		with patch('services.booking_management.repository.get_customer') as mock_get, \
				patch('services.booking_management.repository.insert_booking') as mock_insert:
			for case in cases:
				with self.subTest(case=case):
					with self.assertRaises(ValidationError):
						create_booking(*case)

		mock_get.assert_not_called()
		mock_insert.assert_not_called()

	def test_minimum_amount_message(self):
		with self.assertRaises(ValidationError) as ctx:
			validate_booking_request(1, 'A', 'B', '3')

		self.assertEqual(ctx.exception.message, 'Amount must be at least 5.00')

	def test_minimum_amount_is_inclusive(self):
		request = validate_booking_request('7', ' Main Street ', 'Airport', 5)

		self.assertEqual(request.customer_id, 7)
		self.assertEqual(request.pickup, 'Main Street')
		self.assertEqual(request.amount, Decimal('5.00'))

	def test_amount_is_rounded_to_cents(self):
		request = validate_booking_request(1, 'A', 'B', '12.345')

		self.assertEqual(request.amount, Decimal('12.34'))

	def test_upper_bound_is_checked_after_rounding(self):
		with self.assertRaises(ValidationError) as ctx:
			validate_booking_request(1, 'A', 'B', '99999999.995')

		self.assertEqual(ctx.exception.message, 'Amount is too large')
		self.assertEqual(
			validate_booking_request(1, 'A', 'B', '99999999.994').amount,
			Decimal('99999999.99'),
		)

	def test_lower_bound_is_checked_after_rounding(self):
		self.assertEqual(validate_booking_request(1, 'A', 'B', '4.995').amount, Decimal('5.00'))

		with self.assertRaises(ValidationError):
			validate_booking_request(1, 'A', 'B', '4.994')

	def test_out_of_range_amounts_never_reach_storage(self):
		with patch('services.booking_management.repository.insert_booking') as mock_insert:
			for amount in ('99999999.995', '1E+40', '-1E+40', '0.001'):
				with self.subTest(amount=amount):
					with self.assertRaises(ValidationError):
						create_booking(1, 'A', 'B', amount)

		mock_insert.assert_not_called()

	@override_settings(MINIMUM_BOOKING_AMOUNT=Decimal('20.00'))
	def test_minimum_amount_comes_from_settings(self):
		with self.assertRaises(ValidationError):
			validate_booking_request(1, 'A', 'B', '19.99')
