from unittest import mock

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.http import HttpResponse
from django.test import RequestFactory, SimpleTestCase, TestCase, override_settings
from rest_framework.exceptions import NotFound
from rest_framework.test import APIClient

from accounts import roles
from accounts.utils import assign_roles
from sita import middleware
from sita.exceptions import Conflict, custom_exception_handler


class ExceptionHandlerTests(SimpleTestCase):
    def setUp(self):
        self.request = RequestFactory().get('/api/obe/cpl/')

    def _handle(self, exc):
        return custom_exception_handler(exc, {'request': self.request})

    def test_django_validation_error_becomes_400(self):
        resp = self._handle(ValidationError('Start time must be before end time.'))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['status_code'], 400)
        self.assertEqual(resp.data['detail'], 'Start time must be before end time.')
        self.assertEqual(resp.data['path'], '/api/obe/cpl/')
        self.assertNotIn('errors', resp.data)

    def test_field_errors_are_kept(self):
        resp = self._handle(ValidationError({'columns': ['Missing required column(s): nim']}))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['detail'], 'Missing required column(s): nim')
        self.assertIn('columns', resp.data['errors'])

    def test_conflict_and_not_found(self):
        self.assertEqual(self._handle(Conflict('CPL code "CPL-01" is already in use.')).status_code, 409)
        resp = self._handle(NotFound('CPL not found.'))
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data['detail'], 'CPL not found.')

    def test_unknown_exception_is_left_to_django(self):
        self.assertIsNone(self._handle(RuntimeError('boom')))


class SlowApiRequestMiddlewareTests(TestCase):
    def test_api_app_from_path(self):
        self.assertEqual(middleware.api_app('/api/thesis/12/milestones/'), 'thesis')
        self.assertEqual(middleware.api_app('/admin/login/'), '')

    @override_settings(API_SLOW_REQUEST_MS=0)
    def test_slow_call_is_tagged_with_app_and_roles(self):
        user = get_user_model().objects.create_user(username='dosen_lambat')
        assign_roles(user, [roles.PEMBIMBING_1, roles.PENGUJI])
        client = APIClient()
        client.force_authenticate(user)

        with self.assertLogs('sita.requests', level='WARNING') as logs:
            client.get('/api/notifications/')

        line = logs.output[0]
        self.assertIn('app=notifications GET /api/notifications/ status=200', line)
        self.assertIn('user=dosen_lambat roles=pembimbing 1,penguji', line)

    @override_settings(API_SLOW_REQUEST_MS=0)
    def test_non_api_paths_are_not_timed(self):
        handler = middleware.SlowApiRequestMiddleware(lambda request: HttpResponse('ok'))
        with mock.patch.object(middleware.logger, 'warning') as warning:
            handler(RequestFactory().get('/static/app.css'))
            handler(RequestFactory().get('/api/thesis/topics/'))
        self.assertEqual(warning.call_count, 1)
        self.assertEqual(warning.call_args[0][1], 'thesis')
        self.assertEqual(warning.call_args[0][-1], '-')
