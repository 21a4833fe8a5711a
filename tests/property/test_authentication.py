"""
Property-based tests for authentication and role checks.

These tests validate the cookie session flow, the 401/403 split and the
audit entries written for login and logout.
"""
from hypothesis import given, strategies as st, settings, assume
from hypothesis.extra.django import TestCase
from django.conf import settings as django_settings
from django.contrib.auth import get_user_model
from django.test import RequestFactory
from django.urls import reverse
from rest_framework.exceptions import NotAuthenticated, PermissionDenied
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from core.authentication import issue_token
from core.models import Log
from core.permissions import require_auth

User = get_user_model()

PASSWORD = 'Str0ng-Passw0rd!'
COOKIE = django_settings.AUTH_COOKIE['NAME']


class AuthenticationPropertyTests(TestCase):
    """Tests for login, logout and session checks."""

    @classmethod
    def setUpTestData(cls):
        """Set up test data."""
        cls.admin = User.objects.create_superuser(
            email='admin@example.com', password=PASSWORD, name='Admin User'
        )
        cls.staff = User.objects.create_user(
            email='staff@example.com', password=PASSWORD, name='Staff User'
        )

    def setUp(self):
        self.client = APIClient()

    def _login(self, email, password=PASSWORD):
        return self.client.post(
            reverse('core:login'), {'email': email, 'password': password}, format='json'
        )

    def test_login_sets_http_only_cookie(self):
        """A successful login returns the user and sets the session cookie."""
        response = self._login('admin@example.com')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['user']['email'], 'admin@example.com')
        self.assertEqual(response.data['user']['role'], 'ADMIN')
        self.assertNotIn('password', response.data['user'])

        cookie = response.cookies[COOKIE]
        self.assertTrue(cookie['httponly'])
        self.assertEqual(cookie['samesite'], 'Lax')

        token = AccessToken(cookie.value)
        self.assertEqual(token['role'], 'ADMIN')
        self.assertEqual(str(token['user_id']), str(self.admin.id))

        self.assertTrue(Log.objects.filter(user=self.admin, action='LOGIN').exists())

    def test_login_email_is_case_insensitive(self):
        response = self._login('STAFF@Example.com')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['user']['id'], str(self.staff.id))

    @given(password=st.text(min_size=1, max_size=40))
    @settings(max_examples=20, deadline=None)
    def test_wrong_password_is_rejected(self, password):
        """
        Any password other than the real one yields 401 and no cookie.
        """
        assume(password != PASSWORD)
        client = APIClient()
        response = client.post(
            reverse('core:login'),
            {'email': 'staff@example.com', 'password': password},
            format='json'
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data, {'error': 'Invalid credentials'})
        self.assertNotIn(COOKIE, response.cookies)

    def test_unknown_email_is_rejected(self):
        response = self._login('nobody@example.com')
        self.assertEqual(response.status_code, 401)

    def test_malformed_login_requests(self):
        """Missing fields are validation errors, not auth failures."""
        for payload in ({}, {'email': 'admin@example.com'}, {'email': 'not-an-email', 'password': 'x'}):
            with self.subTest(payload=payload):
                response = self.client.post(reverse('core:login'), payload, format='json')
                self.assertEqual(response.status_code, 400)
                self.assertIn('error', response.data)

    def test_inactive_user_cannot_log_in(self):
        self.staff.is_active = False
        self.staff.save()
        response = self._login('staff@example.com')
        self.assertEqual(response.status_code, 401)

    def test_stale_cookie_does_not_block_login(self):
        self.client.cookies[COOKIE] = 'garbage'
        response = self._login('admin@example.com')
        self.assertEqual(response.status_code, 200)

    def test_me_requires_session(self):
        response = self.client.get(reverse('core:me'))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data, {'error': 'Authentication required'})

    def test_me_returns_current_user(self):
        self._login('staff@example.com')
        response = self.client.get(reverse('core:me'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['user']['email'], 'staff@example.com')
        self.assertEqual(response.data['user']['role'], 'STAFF')

    def test_bearer_header_is_accepted(self):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(self.staff)}')
        response = client.get(reverse('core:me'))
        self.assertEqual(response.status_code, 200)

    def test_invalid_token_is_unauthorized(self):
        self.client.cookies[COOKIE] = 'not.a.token'
        response = self.client.get(reverse('core:me'))
        self.assertEqual(response.status_code, 401)

    def test_token_for_deleted_user_is_unauthorized(self):
        token = issue_token(self.staff)
        self.staff.delete()
        self.client.cookies[COOKIE] = token
        response = self.client.get(reverse('core:me'))
        self.assertEqual(response.status_code, 401)

    def test_logout_clears_cookie(self):
        """Logout records the event and expires the cookie."""
        self._login('staff@example.com')
        response = self.client.post(reverse('core:logout'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.cookies[COOKIE].value, '')
        self.assertTrue(Log.objects.filter(user=self.staff, action='LOGOUT').exists())

        response = self.client.get(reverse('core:me'))
        self.assertEqual(response.status_code, 401)

    def test_session_refresh_reissues_cookie(self):
        self._login('staff@example.com')
        response = self.client.post(reverse('core:session'))
        self.assertEqual(response.status_code, 200)
        self.assertIn(COOKIE, response.cookies)

    def test_staff_is_forbidden_on_admin_routes(self):
        """Authenticated STAFF get 403 from admin-only endpoints."""
        self._login('staff@example.com')
        routes = [
            reverse('core_admin:staff-list'),
            reverse('core_admin:settings'),
            reverse('network:router-list'),
            reverse('network:alert-list'),
            reverse('network:connected-user-list'),
            reverse('api:admin-stats'),
            reverse('api:activity'),
        ]
        for url in routes:
            with self.subTest(url=url):
                response = self.client.get(url)
                self.assertEqual(response.status_code, 403)
                self.assertEqual(response.data, {'error': 'Insufficient permissions'})

    def test_admin_passes_staff_routes(self):
        self._login('admin@example.com')
        for name in ('staff:routers', 'staff:alerts', 'staff:assigned-towns', 'staff:stats'):
            with self.subTest(name=name):
                self.assertEqual(self.client.get(reverse(name)).status_code, 200)

    def test_require_auth_role_hierarchy(self):
        """ADMIN satisfies every role; STAFF only its own."""
        factory = RequestFactory()

        request = factory.get('/')
        request.user = self.staff
        self.assertEqual(require_auth(request), self.staff)
        self.assertEqual(require_auth(request, User.Role.STAFF), self.staff)
        with self.assertRaises(PermissionDenied):
            require_auth(request, User.Role.ADMIN)

        request.user = self.admin
        self.assertEqual(require_auth(request, User.Role.STAFF), self.admin)
        self.assertEqual(require_auth(request, User.Role.ADMIN), self.admin)

        request.user = None
        with self.assertRaises(NotAuthenticated):
            require_auth(request)


class AccountManagementTests(TestCase):
    """Profile and password changes for the signed-in user."""

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(
            email='staff@example.com', password=PASSWORD, name='Staff User'
        )
        User.objects.create_user(email='taken@example.com', password=PASSWORD, name='Other')

    def setUp(self):
        self.client = APIClient()
        self.client.cookies[COOKIE] = issue_token(self.user)

    def test_profile_update(self):
        response = self.client.put(
            reverse('core:profile'), {'name': 'Renamed', 'email': 'New@Example.com'}, format='json'
        )
        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertEqual(self.user.name, 'Renamed')
        self.assertEqual(self.user.email, 'new@example.com')
        self.assertTrue(Log.objects.filter(user=self.user, action='UPDATE_PROFILE').exists())

    def test_profile_rejects_taken_email(self):
        response = self.client.put(
            reverse('core:profile'), {'name': 'X', 'email': 'taken@example.com'}, format='json'
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn('Email is already taken by another user', response.data['error'])

    def test_profile_requires_name_and_email(self):
        response = self.client.put(reverse('core:profile'), {'name': 'Only'}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_change_password(self):
        response = self.client.put(
            reverse('core:change_password'),
            {'current_password': PASSWORD, 'new_password': 'An0ther-Passw0rd!'},
            format='json'
        )
        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('An0ther-Passw0rd!'))
        self.assertTrue(Log.objects.filter(user=self.user, action='CHANGE_PASSWORD').exists())

    def test_change_password_wrong_current(self):
        response = self.client.put(
            reverse('core:change_password'),
            {'current_password': 'wrong', 'new_password': 'An0ther-Passw0rd!'},
            format='json'
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn('Current password is incorrect', response.data['error'])
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password(PASSWORD))

    def test_change_password_enforces_validators(self):
        response = self.client.put(
            reverse('core:change_password'),
            {'current_password': PASSWORD, 'new_password': '123'},
            format='json'
        )
        self.assertEqual(response.status_code, 400)
