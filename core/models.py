"""
Core models for NetAdmin.

This module contains the user model with its role and geographic
assignment, the audit trail, and the key/value system settings.
"""

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
import uuid


class UserManager(BaseUserManager):
    """
    Manager for the email-login user model.
    """
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('The email address must be set')
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        extra_fields.setdefault('role', User.Role.STAFF)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', User.Role.ADMIN)

        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """
    Administrator or regional staff member.

    Staff may be assigned to a province and/or district; the assignment
    drives the geographic scoping applied to every staff-facing listing.
    """

    class Role(models.TextChoices):
        ADMIN = 'ADMIN', 'Admin'
        STAFF = 'STAFF', 'Staff'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = None
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150, blank=True)
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.STAFF)
    image = models.CharField(max_length=500, blank=True)

    # Geographic assignment
    assigned_province = models.ForeignKey(
        'network.Province',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_users'
    )
    assigned_district = models.ForeignKey(
        'network.District',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_users'
    )

    # Audit fields
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        db_table = 'core_user'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['role'], name='core_user_role_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name or self.email} ({self.role})"

    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN

    @property
    def is_scoped(self):
        """True when the user carries a district or province assignment."""
        return bool(self.assigned_district_id or self.assigned_province_id)


class Log(models.Model):
    """
    Audit trail entry for a user action.

    Actions are upper-case verb/noun strings such as ``CREATE_ROUTER`` or
    ``RESOLVE_ALERT``.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='logs')
    action = models.CharField(max_length=64)
    details = models.TextField(blank=True)

    # Request context
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)

    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'core_log'
        verbose_name = 'Log Entry'
        verbose_name_plural = 'Log Entries'
        indexes = [
            models.Index(fields=['user', 'timestamp'], name='core_log_user_ts_idx'),
            models.Index(fields=['action', 'timestamp'], name='core_log_action_ts_idx'),
            models.Index(fields=['timestamp'], name='core_log_ts_idx'),
        ]
        ordering = ['-timestamp']

    def __str__(self):
        return f"{self.user.email} - {self.action} at {self.timestamp}"


class Setting(models.Model):
    """
    System-wide configuration setting.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(max_length=100, unique=True)
    value = models.JSONField(null=True, blank=True)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=50, default='general')

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    updated_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)

    class Meta:
        db_table = 'core_setting'
        verbose_name = 'Setting'
        verbose_name_plural = 'Settings'
        ordering = ['category', 'key']

    def __str__(self):
        return f"{self.key}: {self.value}"
