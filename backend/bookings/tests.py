from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from fleet.models import Car
from services.booking_management import (
	all_bookings,
	booking_statistics,
	customer_bookings,
	driver_bookings,
	pending_bookings,
)
from services.tests.helpers import (
	make_admin,
	make_booking,
	make_car,
	make_customer,
	make_driver,
)


class BookingQueryTests(TestCase):
	def setUp(self):
		self.customer = make_customer(first_name='Alice', last_name='Smith')
		self.driver = make_driver(first_name='Bob', last_name='Jones')
		self.car = make_car(self.driver, 'KA-1001', status=Car.STATUS_BUSY, make='Honda', model='Civic')

	def test_unassigned_rows_use_sentinel(self):
		make_booking(self.customer)

		row = pending_bookings()[0]

		self.assertEqual(row['customer_name'], 'Alice Smith')
		self.assertEqual(row['driver_name'], 'Not assigned')
		self.assertEqual(row['car_make'], 'Not assigned')
		self.assertEqual(row['car_model'], 'Not assigned')
		self.assertEqual(row['car_plate'], 'Not assigned')
		self.assertIsNone(row['driver_id'])
		self.assertEqual(row['amount'], '12.50')

	def test_assigned_rows_carry_names(self):
		make_booking(self.customer, status='accepted', driver=self.driver, car=self.car)

		row = driver_bookings(self.driver.id, 'accepted')[0]

		self.assertEqual(row['driver_name'], 'Bob Jones')
		self.assertEqual(row['car_make'], 'Honda')
		self.assertEqual(row['car_model'], 'Civic')
		self.assertEqual(row['car_plate'], 'KA-1001')

	def test_customer_history_is_newest_first_and_capped(self):
		now = timezone.now()
		for i in range(12):
			make_booking(self.customer, pickup='Stop %d' % i, created_at=now - timedelta(minutes=12 - i))
		make_booking(make_customer(username='someone_else'))

		rows = customer_bookings(self.customer.id)

		self.assertEqual(len(rows), 10)
		self.assertEqual(rows[0]['pickup'], 'Stop 11')
		self.assertEqual(rows[-1]['pickup'], 'Stop 2')

	def test_pending_only_lists_pending(self):
		make_booking(self.customer)
		make_booking(self.customer, status='accepted', driver=self.driver)

		self.assertEqual([row['status'] for row in pending_bookings()], ['pending'])

	def test_driver_lists_are_scoped_to_driver_and_status(self):
		other = make_driver(username='other_driver')
		make_booking(self.customer, status='accepted', driver=self.driver)
		make_booking(self.customer, status='completed', driver=self.driver)
		make_booking(self.customer, status='completed', driver=other)

		self.assertEqual(len(driver_bookings(self.driver.id, 'accepted')), 1)
		self.assertEqual(len(driver_bookings(self.driver.id, 'completed')), 1)
		self.assertEqual(len(driver_bookings(other.id, 'accepted')), 0)

	def test_driver_lists_reject_other_statuses(self):
		with self.assertRaises(ValueError):
			driver_bookings(self.driver.id, 'pending')

	def test_all_bookings(self):
		make_booking(self.customer)
		make_booking(self.customer, status='paid', driver=self.driver)

		self.assertEqual(len(all_bookings()), 2)

	def test_statistics(self):
		make_customer(username='second_customer')
		make_booking(self.customer)
		make_booking(self.customer, status='accepted', driver=self.driver)
		make_booking(self.customer, status='completed', driver=self.driver, amount='40.00')
		make_booking(self.customer, status='paid', driver=self.driver, amount='10.25')
		make_booking(self.customer, status='paid', driver=self.driver, amount='20.00')

		stats = booking_statistics()

		self.assertEqual(stats['total_bookings'], 5)
		self.assertEqual(stats['pending_bookings'], 1)
		self.assertEqual(stats['accepted_bookings'], 1)
		self.assertEqual(stats['completed_bookings'], 1)
		self.assertEqual(stats['paid_bookings'], 2)
		self.assertEqual(stats['total_revenue'], Decimal('30.25'))
		self.assertEqual(stats['total_drivers'], 1)
		self.assertEqual(stats['total_customers'], 2)

	def test_statistics_with_no_bookings(self):
		stats = booking_statistics()

		self.assertEqual(stats['total_bookings'], 0)
		self.assertEqual(stats['total_revenue'], Decimal('0.00'))


class AdminBookingApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.admin = make_admin()
		self.customer = make_customer()
		self.driver = make_driver()
		self.client.force_authenticate(user=self.admin)

	def test_mark_paid(self):
		booking = make_booking(self.customer, status='completed', driver=self.driver)

		response = self.client.post('/api/admin/bookings/%d/mark-paid/' % booking.id)

		self.assertEqual(response.status_code, 200)
		self.assertTrue(response.data['success'])
		self.assertEqual(response.data['status'], 'paid')
		self.assertEqual(response.data['message'], 'Payment marked successfully')

	def test_mark_paid_on_pending_is_conflict(self):
		booking = make_booking(self.customer)

		response = self.client.post('/api/admin/bookings/%d/mark-paid/' % booking.id)

		self.assertEqual(response.status_code, 409)
		self.assertFalse(response.data['success'])
		self.assertEqual(response.data['error'], 'invalid_transition')
		self.assertEqual(response.data['current_status'], 'pending')
		self.assertEqual(response.data['attempted_status'], 'paid')

	def test_mark_paid_missing_booking(self):
		response = self.client.post('/api/admin/bookings/9999/mark-paid/')

		self.assertEqual(response.status_code, 404)
		self.assertEqual(response.data['error'], 'not_found')

	def test_list_and_statistics(self):
		make_booking(self.customer)

		listing = self.client.get('/api/admin/bookings/')
		stats = self.client.get('/api/admin/statistics/')

		self.assertEqual(listing.status_code, 200)
		self.assertEqual(listing.data['count'], 1)
		self.assertEqual(stats.status_code, 200)
		self.assertEqual(stats.data['pending_bookings'], 1)

	def test_non_admin_is_forbidden(self):
		self.client.force_authenticate(user=self.customer)

		response = self.client.get('/api/admin/bookings/')

		self.assertEqual(response.status_code, 403)

	def test_anonymous_is_rejected(self):
		self.client.force_authenticate(user=None)

		response = self.client.get('/api/admin/statistics/')

		self.assertIn(response.status_code, (401, 403))
