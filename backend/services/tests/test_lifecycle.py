from unittest.mock import patch

from django.db import OperationalError
from django.test import TestCase

from fleet.models import Car
from services.booking_management import (
	InvalidTransitionError,
	NotFoundError,
	ValidationError,
	accept_booking,
	complete_booking,
	mark_booking_paid,
)
from services.booking_management import repository
from services.dispatch import create_booking

from .helpers import make_booking, make_car, make_customer, make_driver


class FullRideFlowTests(TestCase):
	def setUp(self):
		self.customer = make_customer(first_name='Alice', last_name='Smith')
		self.driver = make_driver(first_name='Bob', last_name='Jones')
		self.car = make_car(self.driver, 'KA-1001')

	def test_book_accept_complete_pay(self):
		booking = create_booking(self.customer.id, 'Main Street 1', 'Airport', '25.00').booking

		accepted = accept_booking(booking.id, self.driver.id)
		self.assertEqual(accepted.booking.status, 'accepted')
		self.assertEqual(accepted.message, 'Ride accepted successfully')
		self.assertIsNotNone(accepted.booking.accepted_at)
		self.assertFalse(accepted.car_attached)
		self.car.refresh_from_db()
		self.assertEqual(self.car.status, Car.STATUS_BUSY)

		completed = complete_booking(booking.id, self.driver.id)
		self.assertEqual(completed.booking.status, 'completed')
		self.assertEqual(completed.message, 'Ride completed successfully')
		self.assertTrue(completed.car_released)
		self.car.refresh_from_db()
		self.assertEqual(self.car.status, Car.STATUS_AVAILABLE)

		paid = mark_booking_paid(booking.id)
		self.assertEqual(paid.booking.status, 'paid')
		self.assertEqual(paid.message, 'Payment marked successfully')
		self.assertIsNotNone(paid.booking.paid_at)

		with self.assertRaises(InvalidTransitionError):
			mark_booking_paid(booking.id)

		booking.refresh_from_db()
		self.assertEqual(booking.status, 'paid')
		self.assertLessEqual(booking.accepted_at, booking.completed_at)
		self.assertLessEqual(booking.completed_at, booking.paid_at)

	def test_released_car_is_dispatched_again(self):
		first = create_booking(self.customer.id, 'A', 'B', '10').booking
		waiting = create_booking(self.customer.id, 'C', 'D', '10')
		self.assertFalse(waiting.car_assigned)

		accept_booking(first.id, self.driver.id)
		complete_booking(first.id, self.driver.id)

		third = create_booking(self.customer.id, 'E', 'F', '10')
		self.assertTrue(third.car_assigned)
		self.assertEqual(third.booking.car_id, self.car.id)


class AcceptBookingTests(TestCase):
	def setUp(self):
		self.customer = make_customer()
		self.driver = make_driver()
		self.other_driver = make_driver(username='other_driver')

	def test_unassigned_booking_attaches_drivers_available_car(self):
		car = make_car(self.driver, 'KA-1001')
		booking = make_booking(self.customer)

		result = accept_booking(booking.id, self.driver.id)

		self.assertTrue(result.car_attached)
		booking.refresh_from_db()
		self.assertEqual(booking.status, 'accepted')
		self.assertEqual(booking.driver_id, self.driver.id)
		self.assertEqual(booking.car_id, car.id)
		car.refresh_from_db()
		self.assertEqual(car.status, Car.STATUS_BUSY)

	def test_unassigned_booking_accepted_without_car(self):
		make_car(self.driver, 'KA-1001', status=Car.STATUS_BUSY)
		booking = make_booking(self.customer)

		result = accept_booking(booking.id, self.driver.id)

		self.assertFalse(result.car_attached)
		booking.refresh_from_db()
		self.assertEqual(booking.status, 'accepted')
		self.assertEqual(booking.driver_id, self.driver.id)
		self.assertIsNone(booking.car_id)

	def test_booking_assigned_to_another_driver_is_rejected(self):
		car = make_car(self.other_driver, 'KA-1001', status=Car.STATUS_BUSY)
		booking = make_booking(self.customer, driver=self.other_driver, car=car)

		with self.assertRaises(ValidationError):
			accept_booking(booking.id, self.driver.id)

		booking.refresh_from_db()
		self.assertEqual(booking.status, 'pending')
		self.assertEqual(booking.driver_id, self.other_driver.id)

	def test_missing_booking(self):
		with self.assertRaises(NotFoundError):
			accept_booking(9999, self.driver.id)

	def test_missing_or_non_driver(self):
		booking = make_booking(self.customer)

		with self.assertRaises(NotFoundError):
			accept_booking(booking.id, 9999)
		with self.assertRaises(NotFoundError):
			accept_booking(booking.id, self.customer.id)

	def test_accepting_twice_is_an_invalid_transition(self):
		booking = make_booking(self.customer)
		accept_booking(booking.id, self.driver.id)

		with self.assertRaises(InvalidTransitionError) as ctx:
			accept_booking(booking.id, self.driver.id)

		self.assertEqual(ctx.exception.current, 'accepted')
		self.assertEqual(ctx.exception.attempted, 'accepted')

	def test_transient_error_rolls_back_car_claim(self):
		car = make_car(self.driver, 'KA-1001')
		booking = make_booking(self.customer)
		real_update = repository.update_booking
		calls = []

		def update(b, fields):
			calls.append(fields)
			if len(calls) == 1:
				raise OperationalError('database is locked')
			return real_update(b, fields)

		with patch('services.booking_management.repository.update_booking', side_effect=update):
			result = accept_booking(booking.id, self.driver.id)

		self.assertEqual(len(calls), 2)
		self.assertTrue(result.car_attached)
		car.refresh_from_db()
		self.assertEqual(car.status, Car.STATUS_BUSY)


class CompleteBookingTests(TestCase):
	def setUp(self):
		self.customer = make_customer()
		self.driver = make_driver()
		self.car = make_car(self.driver, 'KA-1001', status=Car.STATUS_BUSY)

	def test_other_driver_cannot_complete(self):
		other = make_driver(username='other_driver')
		booking = make_booking(self.customer, status='accepted', driver=self.driver, car=self.car)

		with self.assertRaises(NotFoundError):
			complete_booking(booking.id, other.id)

		self.car.refresh_from_db()
		self.assertEqual(self.car.status, Car.STATUS_BUSY)

	def test_pending_booking_cannot_be_completed(self):
		booking = make_booking(self.customer, driver=self.driver, car=self.car)

		with self.assertRaises(InvalidTransitionError):
			complete_booking(booking.id, self.driver.id)

		self.car.refresh_from_db()
		self.assertEqual(self.car.status, Car.STATUS_BUSY)

	def test_completing_twice_does_not_release_twice(self):
		booking = make_booking(self.customer, status='accepted', driver=self.driver, car=self.car)
		complete_booking(booking.id, self.driver.id)

		with patch('services.booking_management.repository.release_car') as mock_release:
			with self.assertRaises(InvalidTransitionError):
				complete_booking(booking.id, self.driver.id)

		mock_release.assert_not_called()

	def test_carless_booking_completes(self):
		booking = make_booking(self.customer, status='accepted', driver=self.driver)

		result = complete_booking(booking.id, self.driver.id)

		self.assertEqual(result.booking.status, 'completed')
		self.assertFalse(result.car_released)
		self.car.refresh_from_db()
		self.assertEqual(self.car.status, Car.STATUS_BUSY)


class MarkBookingPaidTests(TestCase):
	def setUp(self):
		self.customer = make_customer()
		self.driver = make_driver()

	def test_only_completed_bookings_can_be_paid(self):
		for status in ('pending', 'accepted', 'paid'):
			booking = make_booking(self.customer, status=status, driver=self.driver)
			with self.subTest(status=status):
				with self.assertRaises(InvalidTransitionError) as ctx:
					mark_booking_paid(booking.id)
				self.assertEqual(ctx.exception.current, status)
				booking.refresh_from_db()
				self.assertEqual(booking.status, status)
				self.assertIsNone(booking.paid_at)

	def test_missing_booking(self):
		with self.assertRaises(NotFoundError):
			mark_booking_paid(9999)


class ReleaseCarTests(TestCase):
	def setUp(self):
		self.car = make_car(make_driver(), 'KA-1001', status=Car.STATUS_BUSY)

	def test_release_is_idempotent(self):
		self.assertTrue(repository.release_car(self.car.id))
		self.assertFalse(repository.release_car(self.car.id))

		self.car.refresh_from_db()
		self.assertEqual(self.car.status, Car.STATUS_AVAILABLE)

	def test_release_without_car(self):
		self.assertFalse(repository.release_car(None))

	def test_claim_only_succeeds_once(self):
		repository.release_car(self.car.id)
		first = Car.objects.get(id=self.car.id)
		second = Car.objects.get(id=self.car.id)

		self.assertTrue(repository.claim_car(first))
		self.assertFalse(repository.claim_car(second))
		self.assertEqual(second.status, Car.STATUS_AVAILABLE)
