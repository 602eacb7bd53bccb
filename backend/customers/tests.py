from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from bookings.models import Booking
from services.tests.helpers import make_car, make_customer, make_driver


class BookRideApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.customer = make_customer(first_name='Alice', last_name='Smith')
		self.driver = make_driver(first_name='Bob', last_name='Jones')
		self.client.force_authenticate(user=self.customer)

	def test_book_with_available_car(self):
		car = make_car(self.driver, 'KA-1001')

		response = self.client.post('/api/customer/book/', {
			'pickup': 'Main Street 1',
			'dropoff': 'Airport',
			'amount': '12.50',
		}, format='json')

		self.assertEqual(response.status_code, 201)
		self.assertTrue(response.data['car_assigned'])
		self.assertEqual(response.data['status'], 'pending')
		self.assertEqual(response.data['amount'], '12.50')
		self.assertEqual(response.data['driver_name'], 'Bob Jones')
		self.assertEqual(response.data['car_id'], car.id)
		self.assertEqual(response.data['message'], 'Ride booked successfully! Driver assigned.')

	def test_book_without_car(self):
		response = self.client.post('/api/customer/book/', {
			'pickup': 'Main Street 1',
			'dropoff': 'Airport',
			'amount': 9,
		}, format='json')

		self.assertEqual(response.status_code, 201)
		self.assertFalse(response.data['car_assigned'])
		self.assertEqual(response.data['driver_name'], 'Not assigned yet')

	def test_amount_below_minimum(self):
		response = self.client.post('/api/customer/book/', {
			'pickup': 'Main Street 1',
			'dropoff': 'Airport',
			'amount': '4.99',
		}, format='json')

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data, {
			'success': False,
			'error': 'validation_error',
			'message': 'Amount must be at least 5.00',
		})
		self.assertFalse(Booking.objects.exists())

	def test_blank_pickup(self):
		response = self.client.post('/api/customer/book/', {
			'pickup': '   ',
			'dropoff': 'Airport',
			'amount': '10',
		}, format='json')

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'validation_error')

	def test_missing_fields(self):
		response = self.client.post('/api/customer/book/', {'pickup': 'A'}, format='json')

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'validation_error')
		self.assertIn('amount', response.data['errors'])

	@patch('services.booking_management.repository.get_customer')
	def test_storage_unavailable(self, mock_get_customer):
		from django.db import OperationalError
		mock_get_customer.side_effect = OperationalError('database is locked')

		response = self.client.post('/api/customer/book/', {
			'pickup': 'A',
			'dropoff': 'B',
			'amount': '10',
		}, format='json')

		self.assertEqual(response.status_code, 503)
		self.assertEqual(response.data['error'], 'storage_unavailable')

	def test_driver_cannot_book(self):
		self.client.force_authenticate(user=self.driver)

		response = self.client.post('/api/customer/book/', {
			'pickup': 'A',
			'dropoff': 'B',
			'amount': '10',
		}, format='json')

		self.assertEqual(response.status_code, 403)


class MyBookingsApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.customer = make_customer()
		self.client.force_authenticate(user=self.customer)

	def test_lists_own_bookings(self):
		self.client.post('/api/customer/book/', {
			'pickup': 'A',
			'dropoff': 'B',
			'amount': '10',
		}, format='json')

		response = self.client.get('/api/customer/bookings/')

		self.assertEqual(response.status_code, 200)
		self.assertEqual(len(response.data), 1)
		self.assertEqual(response.data[0]['driver_name'], 'Not assigned')
