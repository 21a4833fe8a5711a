"""
State-changing network operations.

Each operation validates its preconditions, applies the change and appends
the matching audit entry inside one transaction.
"""
from datetime import timedelta
import logging
import re

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from core.audit import log_activity
from .firewall import get_firewall_client
from .models import Alert, ConnectedUser, Router, Town
from .scoping import can_manage_alert, can_manage_town

logger = logging.getLogger(__name__)

MAC_ADDRESS_RE = re.compile(r'^([0-9A-Fa-f]{2}[:-]){5}([0-9A-Fa-f]{2})$')

ALERT_ACTIONS = ('RESOLVE', 'DISMISS')


def _lock_alert(alert_id):
    try:
        return Alert.objects.select_for_update(of=('self',)).select_related(
            'router__town__district'
        ).get(pk=alert_id)
    except (Alert.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFound('Alert not found')


def transition_alert(alert_id, action, user, request=None):
    """
    Resolve or dismiss an alert.

    ``action`` is ``RESOLVE`` or ``DISMISS``. Staff may only touch alerts
    on routers inside their scope; others look like missing alerts.
    """
    action = (action or '').upper()
    if action not in ALERT_ACTIONS:
        raise ValidationError('Invalid action. Must be RESOLVE or DISMISS')

    with transaction.atomic():
        alert = _lock_alert(alert_id)
        if not can_manage_alert(user, alert):
            raise NotFound('Alert not found')

        if action == 'RESOLVE':
            alert.resolve(user)
        else:
            alert.dismiss()

        verb = 'Resolved' if action == 'RESOLVE' else 'Dismissed'
        log_activity(
            user,
            f'{action}_ALERT',
            f'{verb} alert for router {alert.router.name}: {alert.message}',
            request,
        )
    return alert


def _get_device(device_id):
    try:
        return ConnectedUser.objects.select_for_update(of=('self',)).select_related('router').get(pk=device_id)
    except (ConnectedUser.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFound('User not found')


def _check_mac(device):
    if not MAC_ADDRESS_RE.match(device.mac_address or ''):
        raise ValidationError('Invalid MAC address format')


def block_device(device_id, user, request=None, client=None):
    """
    Block a connected device on the firewall, then record it locally.

    Firewall failures propagate before any row is written.
    """
    client = client or get_firewall_client()
    with transaction.atomic():
        device = _get_device(device_id)
        if device.is_blocked:
            raise ValidationError('User is already blocked')
        _check_mac(device)

        label = device.device_name or device.ip_address
        result = client.block_device(device.mac_address, description=f'{label} on {device.router.name}')
        if result.skipped:
            logger.warning(f"Firewall integration disabled; {device.mac_address} is blocked locally only")

        now = timezone.now()
        device.is_blocked = True
        device.blocked_at = now
        device.blocked_by = user
        device.status = ConnectedUser.Status.BLOCKED
        device.last_seen = now
        device.save(update_fields=['is_blocked', 'blocked_at', 'blocked_by', 'status', 'last_seen'])

        log_activity(user, 'BLOCK_USER', f'Blocked user: {label} ({device.mac_address})', request)
    return device, result


def unblock_device(device_id, user, request=None, client=None):
    """
    Reverse ``block_device``.
    """
    client = client or get_firewall_client()
    with transaction.atomic():
        device = _get_device(device_id)
        if not device.is_blocked:
            raise ValidationError('User is not currently blocked')
        _check_mac(device)

        result = client.unblock_device(device.mac_address)

        device.is_blocked = False
        device.blocked_at = None
        device.blocked_by = None
        device.status = ConnectedUser.Status.ACTIVE
        device.last_seen = timezone.now()
        device.save(update_fields=['is_blocked', 'blocked_at', 'blocked_by', 'status', 'last_seen'])

        label = device.device_name or device.ip_address
        log_activity(user, 'UNBLOCK_USER', f'Unblocked user: {label} ({device.mac_address})', request)
    return device, result


def _get_router(router_id):
    try:
        return Router.objects.select_for_update(of=('self',)).select_related('town__district').get(pk=router_id)
    except (Router.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFound('Router not found')


def _get_town(town_id):
    if not town_id:
        raise ValidationError('Town ID is required')
    try:
        return Town.objects.select_related('district').get(pk=town_id)
    except (Town.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFound('Town not found')


def assign_router(router_id, town_id, user, request=None):
    """Attach a router to a town inside the caller's scope."""
    with transaction.atomic():
        town = _get_town(town_id)
        router = _get_router(router_id)

        if not can_manage_town(user, town):
            raise PermissionDenied('You can only assign routers to towns in your assigned area')
        if router.town_id and not can_manage_town(user, router.town):
            raise PermissionDenied('Router is assigned to a town outside your area')

        router.town = town
        router.save(update_fields=['town', 'updated_at'])
        log_activity(user, 'ASSIGN_ROUTER', f'Assigned router {router.name} to town {town.name}', request)
    return router


def relocate_router(router_id, town_id, user, request=None):
    """Move a router between towns, both inside the caller's scope."""
    with transaction.atomic():
        town = _get_town(town_id)
        router = _get_router(router_id)

        if router.town_id and not can_manage_town(user, router.town):
            raise PermissionDenied('You can only relocate routers from towns in your assigned area')
        if not can_manage_town(user, town):
            raise PermissionDenied('You can only relocate routers to towns in your assigned area')

        origin = router.town.name if router.town else 'unassigned'
        router.town = town
        router.save(update_fields=['town', 'updated_at'])
        log_activity(
            user, 'RELOCATE_ROUTER',
            f'Relocated router {router.name} from {origin} to {town.name}',
            request,
        )
    return router


def unassign_router(router_id, user, request=None):
    """Detach a router from its town."""
    with transaction.atomic():
        router = _get_router(router_id)
        if router.town_id is None:
            raise ValidationError('Router is not assigned to any town')
        if not can_manage_town(user, router.town):
            raise PermissionDenied('You can only unassign routers from towns in your assigned area')

        town_name = router.town.name
        router.town = None
        router.save(update_fields=['town', 'updated_at'])
        log_activity(user, 'UNASSIGN_ROUTER', f'Unassigned router {router.name} from town {town_name}', request)
    return router


def active_devices():
    """Devices that are active, unblocked and seen within the activity window."""
    minutes = settings.DASHBOARD_SETTINGS['ACTIVE_DEVICE_WINDOW_MINUTES']
    return ConnectedUser.objects.filter(
        status=ConnectedUser.Status.ACTIVE,
        is_blocked=False,
        last_seen__gte=timezone.now() - timedelta(minutes=minutes),
    )
