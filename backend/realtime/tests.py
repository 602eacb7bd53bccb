from unittest.mock import AsyncMock, MagicMock, patch

from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import SimpleTestCase

from realtime import events
from realtime.consumers import BookingEventsConsumer
from realtime.middleware import JWTOrCookieAuthMiddleware
from realtime.notifications import publish
from realtime.tasks import broadcast_booking_event_task

User = get_user_model()


class PublishTests(SimpleTestCase):
	@patch('realtime.notifications.get_channel_layer')
	def test_sends_to_bookings_group(self, mock_get_layer):
		layer = MagicMock()
		layer.group_send = AsyncMock()
		mock_get_layer.return_value = layer

		delivered = publish(events.RIDE_ACCEPTED, {'booking_id': 5, 'driver_id': 2})

		self.assertTrue(delivered)
		layer.group_send.assert_awaited_once_with(
			'bookings', {'type': 'ride_accepted', 'booking_id': 5, 'driver_id': 2}
		)

	@patch('realtime.notifications.get_channel_layer')
	def test_unknown_event_kind_is_refused(self, mock_get_layer):
		self.assertFalse(publish('ride_cancelled', {'booking_id': 5}))
		mock_get_layer.assert_not_called()

	@patch('realtime.notifications.get_channel_layer')
	def test_layer_failure_is_swallowed(self, mock_get_layer):
		layer = MagicMock()
		layer.group_send = AsyncMock(side_effect=ConnectionError('redis down'))
		mock_get_layer.return_value = layer

		self.assertFalse(publish(events.RIDE_COMPLETED, {'booking_id': 5}))

	@patch('realtime.notifications.get_channel_layer', return_value=None)
	def test_missing_layer(self, mock_get_layer):
		self.assertFalse(publish(events.NEW_BOOKING_CREATED, {'booking_id': 5}))

	@patch('realtime.notifications.publish', return_value=True)
	def test_task_delivers_through_publish(self, mock_publish):
		delivered = broadcast_booking_event_task(events.RIDE_COMPLETED, {'booking_id': 9})

		self.assertTrue(delivered)
		mock_publish.assert_called_once_with(events.RIDE_COMPLETED, {'booking_id': 9})


class BookingEventsConsumerTests(SimpleTestCase):
	def _communicator(self, user):
		communicator = WebsocketCommunicator(BookingEventsConsumer.as_asgi(), '/ws/bookings/')
		communicator.scope['user'] = user
		return communicator

	async def test_listener_receives_booking_events(self):
		user = User(id=7, username='bob', role=User.ROLE_DRIVER)
		communicator = self._communicator(user)

		connected, _ = await communicator.connect()
		self.assertTrue(connected)
		greeting = await communicator.receive_json_from()
		self.assertEqual(greeting['type'], 'connection_established')
		self.assertEqual(greeting['user_id'], 7)

		await get_channel_layer().group_send('bookings', {
			'type': 'booking_paid',
			'booking_id': 3,
			'customer_id': 1,
			'customer_name': 'Alice Smith',
			'driver_id': 7,
			'driver_name': 'bob',
			'amount': '12.50',
			'paid_at': '2024-01-01T10:00:00+00:00',
		})
		event = await communicator.receive_json_from()
		self.assertEqual(event['type'], 'booking_paid')
		self.assertEqual(event['booking_id'], 3)
		self.assertEqual(event['amount'], '12.50')

		await communicator.send_json_to({'type': 'ping'})
		self.assertEqual(await communicator.receive_json_from(), {'type': 'pong'})

		await communicator.disconnect()

	async def test_anonymous_connection_is_closed(self):
		communicator = self._communicator(AnonymousUser())

		connected, _ = await communicator.connect()

		self.assertFalse(connected)


class JWTOrCookieAuthMiddlewareTests(SimpleTestCase):
	async def _scope_after_middleware(self, scope):
		seen = {}

		async def inner(scope, receive, send):
			seen.update(scope)

		await JWTOrCookieAuthMiddleware(inner)(scope, None, None)
		return seen

	async def test_invalid_token_is_anonymous(self):
		scope = await self._scope_after_middleware({
			'type': 'websocket',
			'query_string': b'token=not-a-jwt',
		})

		self.assertTrue(scope['user'].is_anonymous)

	async def test_session_user_is_kept_without_token(self):
		user = User(id=3, username='alice', role=User.ROLE_CUSTOMER)

		scope = await self._scope_after_middleware({
			'type': 'websocket',
			'query_string': b'',
			'user': user,
		})

		self.assertIs(scope['user'], user)
