"""
Network models for NetAdmin.

This module contains the province/district/town hierarchy, the managed
routers attached to it, the end-user devices seen on those routers, and
router alerts with their lifecycle.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
import uuid

from .exceptions import AlertStateError

User = settings.AUTH_USER_MODEL


class Province(models.Model):
    """
    Top level of the administrative hierarchy.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    code = models.CharField(max_length=20, unique=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'network_province'
        verbose_name = 'Province'
        verbose_name_plural = 'Provinces'
        ordering = ['name']

    def __str__(self):
        return self.name


class District(models.Model):
    """
    District within a province.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    code = models.CharField(max_length=20)
    province = models.ForeignKey(Province, on_delete=models.CASCADE, related_name='districts')
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'network_district'
        verbose_name = 'District'
        verbose_name_plural = 'Districts'
        unique_together = ['province', 'code']
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.province.name})"


class Town(models.Model):
    """
    Town within a district; routers are attached at this level.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    code = models.CharField(max_length=20)
    district = models.ForeignKey(District, on_delete=models.CASCADE, related_name='towns')
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'network_town'
        verbose_name = 'Town'
        verbose_name_plural = 'Towns'
        unique_together = ['district', 'code']
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.district.name})"


class Router(models.Model):
    """
    Managed network access point.
    """

    class Status(models.TextChoices):
        ONLINE = 'ONLINE', 'Online'
        OFFLINE = 'OFFLINE', 'Offline'
        MAINTENANCE = 'MAINTENANCE', 'Maintenance'
        ERROR = 'ERROR', 'Error'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    model = models.CharField(max_length=100)
    ip_address = models.GenericIPAddressField(unique=True)
    mac_address = models.CharField(max_length=17, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.OFFLINE)

    # Health and throughput
    uptime = models.FloatField(default=0)  # percent
    bandwidth = models.FloatField(default=0)  # Mbps
    capacity = models.FloatField()  # Mbps

    location = models.CharField(max_length=255, blank=True)
    town = models.ForeignKey(
        Town,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='routers'
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_routers'
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'network_router'
        verbose_name = 'Router'
        verbose_name_plural = 'Routers'
        indexes = [
            models.Index(fields=['status'], name='router_status_idx'),
            models.Index(fields=['town', 'status'], name='router_town_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} ({self.ip_address})"


class ConnectedUser(models.Model):
    """
    End-user device observed on a router.
    """

    class Status(models.TextChoices):
        ACTIVE = 'ACTIVE', 'Active'
        INACTIVE = 'INACTIVE', 'Inactive'
        BLOCKED = 'BLOCKED', 'Blocked'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    router = models.ForeignKey(Router, on_delete=models.CASCADE, related_name='connected_users')
    ip_address = models.GenericIPAddressField()
    mac_address = models.CharField(max_length=17)
    device_name = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    bandwidth = models.FloatField(default=0)  # Mbps

    # Block state
    is_blocked = models.BooleanField(default=False)
    blocked_at = models.DateTimeField(null=True, blank=True)
    blocked_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='blocked_devices'
    )

    last_seen = models.DateTimeField(default=timezone.now)
    connected_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'network_connected_user'
        verbose_name = 'Connected User'
        verbose_name_plural = 'Connected Users'
        indexes = [
            models.Index(fields=['router', 'status'], name='device_router_status_idx'),
            models.Index(fields=['last_seen'], name='device_last_seen_idx'),
        ]
        ordering = ['-last_seen']

    def __str__(self):
        return f"{self.device_name or self.mac_address} on {self.router.name}"


class Alert(models.Model):
    """
    Router alert.

    Only ACTIVE alerts can move; RESOLVED and DISMISSED are terminal.
    """

    class Severity(models.TextChoices):
        LOW = 'LOW', 'Low'
        MEDIUM = 'MEDIUM', 'Medium'
        HIGH = 'HIGH', 'High'
        CRITICAL = 'CRITICAL', 'Critical'

    class Status(models.TextChoices):
        ACTIVE = 'ACTIVE', 'Active'
        RESOLVED = 'RESOLVED', 'Resolved'
        DISMISSED = 'DISMISSED', 'Dismissed'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    router = models.ForeignKey(Router, on_delete=models.CASCADE, related_name='alerts')
    message = models.TextField()
    severity = models.CharField(max_length=10, choices=Severity.choices, default=Severity.MEDIUM)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.ACTIVE)

    resolved_at = models.DateTimeField(null=True, blank=True)
    resolved_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='resolved_alerts'
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_alerts'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'network_alert'
        verbose_name = 'Alert'
        verbose_name_plural = 'Alerts'
        indexes = [
            models.Index(fields=['router', 'status'], name='alert_router_status_idx'),
            models.Index(fields=['severity', 'status'], name='alert_severity_status_idx'),
            models.Index(fields=['status'], name='alert_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.router.name} - {self.message[:50]} ({self.severity})"

    def is_active(self):
        """Check if the alert is still open."""
        return self.status == self.Status.ACTIVE

    def _ensure_active(self, target):
        if not self.is_active():
            raise AlertStateError(
                f"Alert is already {self.status.lower()} and cannot be {target.lower()}"
            )

    def resolve(self, user):
        """Mark the alert as resolved by ``user``."""
        self._ensure_active(self.Status.RESOLVED)
        self.status = self.Status.RESOLVED
        self.resolved_at = timezone.now()
        self.resolved_by = user
        self.save(update_fields=['status', 'resolved_at', 'resolved_by', 'updated_at'])

    def dismiss(self):
        """Dismiss the alert without resolving it."""
        self._ensure_active(self.Status.DISMISSED)
        self.status = self.Status.DISMISSED
        self.save(update_fields=['status', 'updated_at'])
