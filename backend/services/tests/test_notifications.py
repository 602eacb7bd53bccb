from unittest.mock import patch

from django.test import TestCase

from realtime import events
from services.booking_management import (
	accept_booking,
	complete_booking,
	mark_booking_paid,
)
from services.dispatch import create_booking

from .helpers import make_booking, make_car, make_customer, make_driver


class BookingEventTests(TestCase):
	def setUp(self):
		self.customer = make_customer(first_name='Alice', last_name='Smith')
		self.driver = make_driver(first_name='Bob', last_name='Jones')
		self.car = make_car(self.driver, 'KA-1001')

	@patch('realtime.notifications.publish', return_value=True)
	def test_each_transition_emits_once_after_commit(self, mock_publish):
		with self.captureOnCommitCallbacks(execute=True) as callbacks:
			booking = create_booking(self.customer.id, 'A', 'B', '12.50').booking
			mock_publish.assert_not_called()
		self.assertEqual(len(callbacks), 1)
		mock_publish.assert_called_once_with(
			events.NEW_BOOKING_CREATED, {'booking_id': booking.id}
		)

		mock_publish.reset_mock()
		with self.captureOnCommitCallbacks(execute=True):
			accept_booking(booking.id, self.driver.id)
		mock_publish.assert_called_once_with(
			events.RIDE_ACCEPTED, {'booking_id': booking.id, 'driver_id': self.driver.id}
		)

		mock_publish.reset_mock()
		with self.captureOnCommitCallbacks(execute=True):
			complete_booking(booking.id, self.driver.id)
		mock_publish.assert_called_once_with(
			events.RIDE_COMPLETED, {'booking_id': booking.id}
		)

		mock_publish.reset_mock()
		with self.captureOnCommitCallbacks(execute=True):
			result = mark_booking_paid(booking.id)
		mock_publish.assert_called_once()
		kind, payload = mock_publish.call_args[0]
		self.assertEqual(kind, events.BOOKING_PAID)
		self.assertEqual(payload, {
			'booking_id': booking.id,
			'customer_id': self.customer.id,
			'customer_name': 'Alice Smith',
			'driver_id': self.driver.id,
			'driver_name': 'Bob Jones',
			'amount': '12.50',
			'paid_at': result.booking.paid_at.isoformat(),
		})

	@patch('realtime.notifications.publish', return_value=True)
	def test_failed_operation_emits_nothing(self, mock_publish):
		booking = make_booking(self.customer, status='accepted', driver=self.driver)

		with self.captureOnCommitCallbacks(execute=True) as callbacks:
			with self.assertRaises(Exception):
				mark_booking_paid(booking.id)

		self.assertEqual(callbacks, [])
		mock_publish.assert_not_called()

	@patch('realtime.notifications.publish', return_value=True)
	def test_retried_attempt_emits_once(self, mock_publish):
		from django.db import OperationalError
		from services.booking_management import repository

		real_update = repository.update_booking
		calls = []

		def update(b, fields):
			calls.append(fields)
			if len(calls) == 1:
				raise OperationalError('database is locked')
			return real_update(b, fields)

		booking = make_booking(self.customer)
		with patch('services.booking_management.repository.update_booking', side_effect=update):
			with self.captureOnCommitCallbacks(execute=True) as callbacks:
				accept_booking(booking.id, self.driver.id)

		self.assertEqual(len(calls), 2)
		self.assertEqual(len(callbacks), 1)
		mock_publish.assert_called_once()

	def test_enqueue_failure_does_not_fail_booking(self):
		with patch('realtime.tasks.broadcast_booking_event_task') as mock_task:
			mock_task.delay.side_effect = ConnectionError('broker down')
			with self.captureOnCommitCallbacks(execute=True):
				result = create_booking(self.customer.id, 'A', 'B', '10')

		mock_task.delay.assert_called_once()
		self.assertTrue(result.car_assigned)

	@patch('realtime.notifications.get_channel_layer')
	def test_channel_layer_failure_does_not_fail_booking(self, mock_get_layer):
		mock_get_layer.side_effect = RuntimeError('redis down')

		with self.captureOnCommitCallbacks(execute=True):
			result = create_booking(self.customer.id, 'A', 'B', '10')

		mock_get_layer.assert_called_once()
		self.assertTrue(result.car_assigned)
