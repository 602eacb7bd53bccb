from django.test import TestCase
from rest_framework.test import APIClient

from fleet.models import Car
from services.tests.helpers import make_booking, make_car, make_customer, make_driver


class DriverRideApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.customer = make_customer()
		self.driver = make_driver()
		self.car = make_car(self.driver, 'KA-1001')
		self.client.force_authenticate(user=self.driver)

	def test_pending_rides(self):
		make_booking(self.customer)
		make_booking(self.customer, status='accepted', driver=self.driver)

		response = self.client.get('/api/driver/pending-rides/')

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['count'], 1)

	def test_accept_and_complete(self):
		booking = make_booking(self.customer)

		accepted = self.client.post('/api/driver/bookings/%d/accept/' % booking.id)
		self.assertEqual(accepted.status_code, 200)
		self.assertEqual(accepted.data['status'], 'accepted')
		self.assertEqual(accepted.data['driver_id'], self.driver.id)
		self.assertEqual(accepted.data['car_id'], self.car.id)

		listed = self.client.get('/api/driver/accepted-rides/')
		self.assertEqual(listed.data['count'], 1)

		completed = self.client.post('/api/driver/bookings/%d/complete/' % booking.id)
		self.assertEqual(completed.status_code, 200)
		self.assertEqual(completed.data['message'], 'Ride completed successfully')

		self.car.refresh_from_db()
		self.assertEqual(self.car.status, Car.STATUS_AVAILABLE)
		self.assertEqual(self.client.get('/api/driver/completed-rides/').data['count'], 1)
		self.assertEqual(self.client.get('/api/driver/accepted-rides/').data['count'], 0)

	def test_accept_twice_is_conflict(self):
		booking = make_booking(self.customer)
		self.client.post('/api/driver/bookings/%d/accept/' % booking.id)

		response = self.client.post('/api/driver/bookings/%d/accept/' % booking.id)

		self.assertEqual(response.status_code, 409)
		self.assertEqual(response.data['current_status'], 'accepted')

	def test_accept_booking_of_other_driver(self):
		other = make_driver(username='other_driver')
		booking = make_booking(self.customer, driver=other)

		response = self.client.post('/api/driver/bookings/%d/accept/' % booking.id)

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'validation_error')

	def test_complete_someone_elses_booking(self):
		other = make_driver(username='other_driver')
		booking = make_booking(self.customer, status='accepted', driver=other)

		response = self.client.post('/api/driver/bookings/%d/complete/' % booking.id)

		self.assertEqual(response.status_code, 404)
		self.assertEqual(response.data['error'], 'not_found')

	def test_customer_cannot_accept(self):
		booking = make_booking(self.customer)
		self.client.force_authenticate(user=self.customer)

		response = self.client.post('/api/driver/bookings/%d/accept/' % booking.id)

		self.assertEqual(response.status_code, 403)
