from unittest.mock import MagicMock, patch

from django.test import TestCase
from rest_framework.test import APIClient

from dispatch_backend.celery import app as celery_app


@patch('dispatch_backend.views.redis.Redis.from_url')
class HealthCheckTests(TestCase):
	def setUp(self):
		self.client = APIClient()

	def test_all_services_healthy(self, mock_redis):
		response = self.client.get('/health/')

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['status'], 'healthy')
		self.assertEqual(response.data['services']['celery'], 'healthy')
		mock_redis.return_value.ping.assert_called_once()

	def test_unregistered_task_is_unhealthy(self, mock_redis):
		missing = MagicMock()
		missing.name = 'realtime.tasks.missing_task'

		with patch('dispatch_backend.views.broadcast_booking_event_task', missing):
			response = self.client.get('/health/')

		self.assertEqual(response.status_code, 503)
		self.assertTrue(response.data['services']['celery'].startswith('unhealthy'))
		self.assertIn('missing_task', response.data['services']['celery'])

	def test_unreachable_broker_is_unhealthy(self, mock_redis):
		with patch.object(celery_app, 'connection_for_write', side_effect=OSError('broker down')):
			response = self.client.get('/health/')

		self.assertEqual(response.status_code, 503)
		self.assertEqual(response.data['services']['celery'], 'unhealthy: broker down')
		self.assertEqual(response.data['services']['database'], 'healthy')

	def test_redis_failure_is_reported(self, mock_redis):
		mock_redis.return_value.ping.side_effect = ConnectionError('refused')

		response = self.client.get('/health/')

		self.assertEqual(response.status_code, 503)
		self.assertEqual(response.data['services']['redis'], 'unhealthy: refused')
		self.assertEqual(response.data['services']['celery'], 'healthy')
