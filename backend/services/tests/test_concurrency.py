import threading
from unittest.mock import patch

from django.db import connection
from django.test import TransactionTestCase

from bookings.models import Booking
from fleet.models import Car
from services.dispatch import create_booking

from .helpers import make_car, make_customer, make_driver

CONCURRENT_BOOKINGS = 8


class ConcurrentDispatchTests(TransactionTestCase):
	"""Many customers booking at once against a single eligible car."""

	def setUp(self):
		self.customers = [
			make_customer(username='customer_%d' % i) for i in range(CONCURRENT_BOOKINGS)
		]
		self.car = make_car(make_driver(), 'KA-1001')

	def _book_all_at_once(self):
		barrier = threading.Barrier(CONCURRENT_BOOKINGS)
		results = []
		errors = []
		lock = threading.Lock()

		def book(customer):
			try:
				barrier.wait()
				result = create_booking(customer.id, 'Main Street 1', 'Airport', '10.00')
				with lock:
					results.append(result)
			except Exception as exc:
				with lock:
					errors.append(exc)
			finally:
				connection.close()

		threads = [threading.Thread(target=book, args=(c,)) for c in self.customers]
		for thread in threads:
			thread.start()
		for thread in threads:
			thread.join(timeout=60)

		return results, errors

	@patch('realtime.notifications.publish', return_value=True)
	def test_only_one_booking_gets_the_car(self, mock_publish):
		results, errors = self._book_all_at_once()

		self.assertEqual(errors, [])
		self.assertEqual(len(results), CONCURRENT_BOOKINGS)
		self.assertEqual(Booking.objects.count(), CONCURRENT_BOOKINGS)
		self.assertEqual(Booking.objects.filter(car__isnull=False).count(), 1)
		self.assertEqual(Booking.objects.filter(driver__isnull=False).count(), 1)
		self.assertEqual(sum(1 for r in results if r.car_assigned), 1)

		self.car.refresh_from_db()
		self.assertEqual(self.car.status, Car.STATUS_BUSY)
		self.assertEqual(Booking.objects.get(car__isnull=False).car_id, self.car.id)
		self.assertTrue(mock_publish.called)

	@patch('realtime.notifications.publish', return_value=True)
	def test_every_customer_gets_exactly_one_booking(self, mock_publish):
		self._book_all_at_once()

		for customer in self.customers:
			self.assertEqual(Booking.objects.filter(customer=customer).count(), 1)
