from unittest import mock

import requests
from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.exceptions import NotFound
from rest_framework.test import APIClient

from notifications.models import Notification
from notifications.services import notification_service, push_service


class NotificationServiceTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.user = User.objects.create_user(username='mhs_notif')
        self.other = User.objects.create_user(username='mhs_lain')
        for i in range(3):
            notification_service.create_notification(self.user, title=f'Info {i}', type='info', reference_id=i + 1)
        self.foreign = notification_service.create_notification(self.other, title='Bukan milikmu')

    def test_list_newest_first_with_unread_count(self):
        result = notification_service.list_notifications(self.user, limit=2)
        self.assertEqual([n.title for n in result['items']], ['Info 2', 'Info 1'])
        self.assertEqual(result['unread_count'], 3)

    def test_mark_read_is_scoped_to_owner(self):
        with self.assertRaises(NotFound):
            notification_service.mark_as_read(self.user, self.foreign.pk)

        first = Notification.objects.filter(user=self.user).first()
        self.assertTrue(notification_service.mark_as_read(self.user, first.pk).is_read)
        self.assertEqual(notification_service.unread_count(self.user), 2)
        self.assertEqual(notification_service.mark_all_as_read(self.user), 2)
        self.assertEqual(notification_service.unread_count(self.other), 1)

    def test_create_for_users_dedupes(self):
        created = notification_service.create_for_users(
            [self.user.pk, self.other.pk, self.user.pk], title='Pengumuman', reference_id=7,
        )
        self.assertEqual(len(created), 2)
        self.assertEqual(Notification.objects.filter(title='Pengumuman', reference_id='7').count(), 2)
        self.assertEqual(notification_service.create_for_users([], title='x'), [])

    def test_delete(self):
        with self.assertRaises(NotFound):
            notification_service.delete_notification(self.user, self.foreign.pk)
        self.assertEqual(notification_service.delete_all(self.user), 3)
        self.assertTrue(Notification.objects.filter(pk=self.foreign.pk).exists())


class PushServiceTests(TestCase):
    def test_no_recipients(self):
        self.assertFalse(push_service.send_push([], title='t', body='b').ok)

    @override_settings(PUSH_NOTIFICATIONS_ENABLED=True, PUSH_GATEWAY_URL='')
    def test_unconfigured_gateway_only_logs(self):
        with mock.patch('notifications.services.push_service.requests.post') as post:
            outcome = push_service.send_push([1, 2], title='t', body='b')
        self.assertTrue(outcome.ok)
        post.assert_not_called()

    @override_settings(PUSH_NOTIFICATIONS_ENABLED=True, PUSH_GATEWAY_URL='https://push.test/send',
                       PUSH_GATEWAY_API_KEY='secret')
    def test_posts_to_gateway(self):
        response = mock.Mock(status_code=200, text='ok')
        with mock.patch('notifications.services.push_service.requests.post', return_value=response) as post:
            outcome = push_service.send_push(['3'], title='Judul', body='Isi', data={'thesis_id': 9})

        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.user_ids, [3])
        _, kwargs = post.call_args
        self.assertEqual(kwargs['json']['data'], {'thesis_id': '9'})
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer secret')

    @override_settings(PUSH_NOTIFICATIONS_ENABLED=True, PUSH_GATEWAY_URL='https://push.test/send')
    def test_gateway_errors_do_not_raise(self):
        with mock.patch('notifications.services.push_service.requests.post',
                        side_effect=requests.ConnectionError('refused')):
            self.assertFalse(push_service.send_push([1], title='t', body='b').ok)

        response = mock.Mock(status_code=503, text='unavailable')
        with mock.patch('notifications.services.push_service.requests.post', return_value=response):
            outcome = push_service.send_push([1], title='t', body='b')
        self.assertFalse(outcome.ok)
        self.assertIn('503', outcome.message)


class NotificationApiTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username='dosen_notif')
        self.note = notification_service.create_notification(self.user, title='Jadwal seminar')
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def test_read_flow(self):
        resp = self.client.get('/api/notifications/?only_unread=true')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data['items']), 1)

        resp = self.client.patch(f'/api/notifications/{self.note.pk}/read/')
        self.assertTrue(resp.data['is_read'])

        resp = self.client.get('/api/notifications/unread-count/')
        self.assertEqual(resp.data['unread_count'], 0)

        resp = self.client.patch('/api/notifications/999999/read/')
        self.assertEqual(resp.status_code, 404)

    def test_requires_authentication(self):
        resp = APIClient().get('/api/notifications/')
        self.assertEqual(resp.status_code, 401)
