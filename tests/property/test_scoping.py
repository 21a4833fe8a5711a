"""
Property-based tests for geographic scoping of staff data.

Staff assigned to a district see only that district; staff assigned to a
province see the whole province; unassigned staff see everything but may
not change anything.
"""
from hypothesis import given, strategies as st, settings
from hypothesis.extra.django import TestCase
from django.conf import settings as django_settings
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework.test import APIClient

from core.authentication import issue_token
from core.models import Log
from network.models import Alert, District, Province, Router, Town
from network.scoping import can_manage_town, scope_queryset

User = get_user_model()

PASSWORD = 'Str0ng-Passw0rd!'
COOKIE = django_settings.AUTH_COOKIE['NAME']


class ScopingPropertyTests(TestCase):
    """Tests for district-first read scoping and write restrictions."""

    @classmethod
    def setUpTestData(cls):
        """Two provinces, three districts, one town and router per district."""
        cls.north = Province.objects.create(name='North', code='N')
        cls.south = Province.objects.create(name='South', code='S')
        cls.n1 = District.objects.create(name='North One', code='N1', province=cls.north)
        cls.n2 = District.objects.create(name='North Two', code='N2', province=cls.north)
        cls.s1 = District.objects.create(name='South One', code='S1', province=cls.south)

        cls.towns = {}
        cls.routers = {}
        cls.alerts = {}
        for index, district in enumerate((cls.n1, cls.n2, cls.s1), start=1):
            town = Town.objects.create(name=f'Town {district.code}', code=f'T{index}', district=district)
            router = Router.objects.create(
                name=f'Router {district.code}', ip_address=f'10.0.{index}.1',
                capacity=100, town=town, status=Router.Status.ONLINE
            )
            cls.towns[district.code] = town
            cls.routers[district.code] = router
            cls.alerts[district.code] = Alert.objects.create(
                router=router, message=f'Link down in {district.code}', severity=Alert.Severity.HIGH
            )

        cls.admin = User.objects.create_superuser(
            email='admin@example.com', password=PASSWORD, name='Admin'
        )
        cls.district_staff = User.objects.create_user(
            email='district@example.com', password=PASSWORD, name='District Staff',
            assigned_province=cls.north, assigned_district=cls.n1
        )
        cls.province_staff = User.objects.create_user(
            email='province@example.com', password=PASSWORD, name='Province Staff',
            assigned_province=cls.north
        )
        cls.unscoped_staff = User.objects.create_user(
            email='free@example.com', password=PASSWORD, name='Unscoped Staff'
        )

    def setUp(self):
        self.client = APIClient()

    def _as(self, user):
        self.client.cookies[COOKIE] = issue_token(user)

    def _router_names(self):
        response = self.client.get(reverse('staff:routers'))
        self.assertEqual(response.status_code, 200)
        return {r['name'] for r in response.data['routers']}

    def test_visibility_by_assignment(self):
        """
        Each user sees exactly the routers, towns and alerts of their scope.
        """
        cases = [
            (self.district_staff, {'N1'}),
            (self.province_staff, {'N1', 'N2'}),
            (self.unscoped_staff, {'N1', 'N2', 'S1'}),
            (self.admin, {'N1', 'N2', 'S1'}),
        ]
        for user, codes in cases:
            with self.subTest(user=user.email):
                self._as(user)

                self.assertEqual(self._router_names(), {f'Router {c}' for c in codes})

                towns = self.client.get(reverse('staff:assigned-towns')).data['towns']
                self.assertEqual({t['name'] for t in towns}, {f'Town {c}' for c in codes})
                for town in towns:
                    self.assertEqual(town['router_count'], 1)

                alerts = self.client.get(reverse('staff:alerts')).data['alerts']
                self.assertEqual({a['message'] for a in alerts}, {f'Link down in {c}' for c in codes})

                stats = self.client.get(reverse('staff:stats')).data
                self.assertEqual(stats['total_routers'], len(codes))
                self.assertEqual(stats['online_routers'], len(codes))
                self.assertEqual(stats['active_alerts'], len(codes))
                self.assertEqual(stats['total_towns'], len(codes))

    def test_district_takes_precedence_over_province(self):
        """A district assignment narrows even when a province is also set."""
        self.assertEqual(
            set(scope_queryset(Router.objects.all(), self.district_staff, 'router')),
            {self.routers['N1']}
        )

    @given(status=st.sampled_from(['RESOLVED', 'DISMISSED']))
    @settings(max_examples=4, deadline=None)
    def test_alert_status_filter(self, status):
        """Staff alert listing defaults to ACTIVE and honours ALL."""
        Alert.objects.filter(pk=self.alerts['N2'].pk).update(status=status)
        self._as(self.province_staff)

        active = self.client.get(reverse('staff:alerts')).data['alerts']
        self.assertEqual({a['message'] for a in active}, {'Link down in N1'})

        everything = self.client.get(reverse('staff:alerts'), {'status': 'ALL'}).data['alerts']
        self.assertEqual(len(everything), 2)

        only = self.client.get(reverse('staff:alerts'), {'status': status}).data['alerts']
        self.assertEqual([a['status'] for a in only], [status])

    def test_staff_router_status_filter(self):
        Router.objects.filter(pk=self.routers['N2'].pk).update(status=Router.Status.OFFLINE)
        self._as(self.province_staff)

        response = self.client.get(reverse('staff:routers'), {'status': 'offline'})
        self.assertEqual([r['name'] for r in response.data['routers']], ['Router N2'])

        response = self.client.get(reverse('staff:routers'), {'status': 'unplugged'})
        self.assertEqual(response.status_code, 400)
        self.assertIn('status', response.data['fields'])

    def test_staff_user_listing_is_scoped(self):
        self._as(self.province_staff)
        users = self.client.get(reverse('staff:users')).data['users']
        self.assertEqual(
            {u['email'] for u in users},
            {'district@example.com', 'province@example.com'}
        )

        self._as(self.district_staff)
        users = self.client.get(reverse('staff:users')).data['users']
        self.assertEqual({u['email'] for u in users}, {'district@example.com'})

    def test_available_routers_excludes_inactive(self):
        Router.objects.filter(pk=self.routers['N2'].pk).update(is_active=False)
        self._as(self.province_staff)

        available = self.client.get(reverse('staff:available-routers')).data['routers']
        self.assertEqual({r['name'] for r in available}, {'Router N1'})
        self.assertEqual(self._router_names(), {'Router N1', 'Router N2'})

    def test_can_manage_town(self):
        """Writes need an assignment covering the town."""
        self.assertTrue(can_manage_town(self.admin, self.towns['S1']))
        self.assertTrue(can_manage_town(self.district_staff, self.towns['N1']))
        self.assertFalse(can_manage_town(self.district_staff, self.towns['N2']))
        self.assertTrue(can_manage_town(self.province_staff, self.towns['N2']))
        self.assertFalse(can_manage_town(self.province_staff, self.towns['S1']))
        for town in self.towns.values():
            self.assertFalse(can_manage_town(self.unscoped_staff, town))

    def test_relocate_within_scope(self):
        """Province staff may move routers between towns of their province."""
        self._as(self.province_staff)
        router = self.routers['N1']
        response = self.client.post(
            reverse('staff:router-relocate', args=[router.pk]),
            {'town_id': str(self.towns['N2'].pk)}, format='json'
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['router']['town']['id'], str(self.towns['N2'].pk))

        router.refresh_from_db()
        self.assertEqual(router.town, self.towns['N2'])
        log = Log.objects.get(user=self.province_staff, action='RELOCATE_ROUTER')
        self.assertIn('from Town N1 to Town N2', log.details)

    def test_relocate_out_of_scope_is_forbidden(self):
        """
        Moving a router into, or out of, another area is refused and changes nothing.
        """
        self._as(self.district_staff)
        cases = [
            (self.routers['N1'], self.towns['S1']),
            (self.routers['S1'], self.towns['N1']),
        ]
        for router, town in cases:
            with self.subTest(router=router.name, town=town.name):
                response = self.client.post(
                    reverse('staff:router-relocate', args=[router.pk]),
                    {'town_id': str(town.pk)}, format='json'
                )
                self.assertEqual(response.status_code, 403)
                original = router.town_id
                router.refresh_from_db()
                self.assertEqual(router.town_id, original)

        self.assertFalse(Log.objects.filter(action='RELOCATE_ROUTER').exists())

    def test_unscoped_staff_cannot_write(self):
        self._as(self.unscoped_staff)
        router = self.routers['N1']

        response = self.client.post(reverse('staff:router-unassign', args=[router.pk]))
        self.assertEqual(response.status_code, 403)

        response = self.client.post(reverse('staff:alert-resolve', args=[self.alerts['N1'].pk]))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(Alert.objects.get(pk=self.alerts['N1'].pk).status, Alert.Status.ACTIVE)

    def test_assign_and_unassign(self):
        self._as(self.district_staff)
        router = Router.objects.create(name='Spare', ip_address='10.9.9.9', capacity=10)

        response = self.client.post(
            reverse('staff:router-assign', args=[router.pk]),
            {'town_id': str(self.towns['N1'].pk)}, format='json'
        )
        self.assertEqual(response.status_code, 200)
        router.refresh_from_db()
        self.assertEqual(router.town, self.towns['N1'])

        response = self.client.post(reverse('staff:router-unassign', args=[router.pk]))
        self.assertEqual(response.status_code, 200)
        router.refresh_from_db()
        self.assertIsNone(router.town)

        response = self.client.post(reverse('staff:router-unassign', args=[router.pk]))
        self.assertEqual(response.status_code, 400)

        actions = list(Log.objects.filter(user=self.district_staff).values_list('action', flat=True))
        self.assertIn('ASSIGN_ROUTER', actions)
        self.assertIn('UNASSIGN_ROUTER', actions)

    def test_assign_requires_town(self):
        self._as(self.district_staff)
        response = self.client.post(
            reverse('staff:router-assign', args=[self.routers['N1'].pk]), {}, format='json'
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'Town ID is required')
