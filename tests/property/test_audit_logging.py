"""
Property-based tests for audit logging, request timing and error bodies.
"""
from hypothesis import given, strategies as st, settings
from hypothesis.extra.django import TestCase
from django.conf import settings as django_settings
from django.contrib.auth import get_user_model
from django.test import RequestFactory, override_settings
from django.urls import reverse
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from core.audit import get_client_ip, log_activity
from core.authentication import issue_token
from core.exceptions import api_exception_handler
from core.models import Log

User = get_user_model()

PASSWORD = 'Str0ng-Passw0rd!'
COOKIE = django_settings.AUTH_COOKIE['NAME']


class AuditLoggingPropertyTests(TestCase):
    """Tests for the audit trail."""

    @classmethod
    def setUpTestData(cls):
        """Set up test data."""
        cls.user = User.objects.create_user(
            email='audit@example.com', password=PASSWORD, name='Auditor'
        )

    def setUp(self):
        self.factory = RequestFactory()

    @given(
        action=st.sampled_from(['LOGIN', 'CREATE_ROUTER', 'BLOCK_USER', 'RESOLVE_ALERT']),
        details=st.text(alphabet=st.characters(blacklist_categories=('Cs', 'Cc')), max_size=200),
    )
    @settings(max_examples=25, deadline=None)
    def test_entries_are_stored_verbatim(self, action, details):
        """
        Every call appends exactly one entry holding what was passed in.
        """
        before = Log.objects.count()
        entry = log_activity(self.user, action, details)

        self.assertEqual(Log.objects.count(), before + 1)
        entry.refresh_from_db()
        self.assertEqual(entry.user, self.user)
        self.assertEqual(entry.action, action)
        self.assertEqual(entry.details, details)
        self.assertIsNone(entry.ip_address)

    def test_request_metadata_recorded(self):
        request = self.factory.get('/', HTTP_USER_AGENT='pytest-agent', REMOTE_ADDR='192.0.2.7')
        entry = log_activity(self.user, 'LOGIN', 'hello', request)
        self.assertEqual(entry.ip_address, '192.0.2.7')
        self.assertEqual(entry.user_agent, 'pytest-agent')

    def test_forwarded_for_takes_first_hop(self):
        request = self.factory.get(
            '/', HTTP_X_FORWARDED_FOR='203.0.113.9, 10.0.0.1', REMOTE_ADDR='10.0.0.1'
        )
        self.assertEqual(get_client_ip(request), '203.0.113.9')

    def test_unparseable_addresses_are_dropped(self):
        """Junk forwarded headers fall back to the peer address, never reach the log."""
        cases = (
            ({'HTTP_X_FORWARDED_FOR': 'unknown', 'REMOTE_ADDR': '10.0.0.1'}, '10.0.0.1'),
            ({'HTTP_X_FORWARDED_FOR': '  , 203.0.113.9', 'REMOTE_ADDR': '10.0.0.1'}, '10.0.0.1'),
            ({'HTTP_X_FORWARDED_FOR': '2001:db8::1', 'REMOTE_ADDR': '10.0.0.1'}, '2001:db8::1'),
            ({'HTTP_X_FORWARDED_FOR': 'unknown', 'REMOTE_ADDR': 'garbage'}, None),
        )
        for meta, expected in cases:
            with self.subTest(meta=meta):
                request = self.factory.get('/', **meta)
                self.assertEqual(get_client_ip(request), expected)

        request = self.factory.get('/', HTTP_X_FORWARDED_FOR='unknown', REMOTE_ADDR='192.0.2.7')
        entry = log_activity(self.user, 'LOGIN', '', request)
        entry.refresh_from_db()
        self.assertEqual(entry.ip_address, '192.0.2.7')

    def test_login_with_junk_forwarded_header(self):
        client = APIClient(HTTP_X_FORWARDED_FOR='unknown')
        response = client.post(
            reverse('core:login'), {'email': 'audit@example.com', 'password': PASSWORD}, format='json'
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(Log.objects.get(action='LOGIN').ip_address, '127.0.0.1')

    def test_entries_newest_first(self):
        first = log_activity(self.user, 'LOGIN')
        second = log_activity(self.user, 'LOGOUT')
        self.assertEqual(list(Log.objects.all()), [second, first])


class RequestHandlingTests(TestCase):
    """Tests for the timing middleware and JSON error rendering."""

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(
            email='audit@example.com', password=PASSWORD, name='Auditor'
        )

    def setUp(self):
        self.client = APIClient()

    def test_response_time_header(self):
        self.client.cookies[COOKIE] = issue_token(self.user)
        response = self.client.get(reverse('core:me'))
        self.assertIn('X-Response-Time-Ms', response)
        self.assertGreaterEqual(float(response['X-Response-Time-Ms']), 0)

    def test_validation_error_body(self):
        exc = ValidationError({'name': ['This field is required.']})
        response = api_exception_handler(exc, {})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'name: This field is required.')
        self.assertIn('name', response.data['fields'])

    def test_unexpected_error_is_generic(self):
        for debug, has_details in ((False, False), (True, True)):
            with self.subTest(debug=debug):
                with override_settings(DEBUG=debug):
                    response = api_exception_handler(RuntimeError('kaboom'), {})
                self.assertEqual(response.status_code, 500)
                self.assertEqual(response.data['error'], 'Internal server error')
                self.assertEqual('details' in response.data, has_details)
