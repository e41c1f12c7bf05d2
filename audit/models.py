"""
Audit Log Model

IMMUTABLE: Audit logs cannot be edited or deleted after creation.
Records who approved, evicted, checked out or billed whom, and why.
"""

from django.db import models
from django.conf import settings
from django.core.exceptions import PermissionDenied


# ============================================================================
# CUSTOM MANAGER AND QUERYSET
# ============================================================================

class AuditLogQuerySet(models.QuerySet):
    """Custom queryset for audit logs with filtering helpers"""

    def for_resource(self, resource_type, resource_id):
        """Filter logs for a specific resource"""
        return self.filter(resource_type=resource_type, resource_id=resource_id)

    def evictions(self):
        """Vacate entries written by administrator evictions"""
        return self.filter(action=AuditLog.ACTION_VACATE, metadata__kind='eviction')


class AuditLogManager(models.Manager.from_queryset(AuditLogQuerySet)):
    """Custom manager for audit logs"""


# ============================================================================
# AUDIT LOG MODEL
# ============================================================================

class AuditLog(models.Model):
    """
    Immutable audit log for occupancy and billing actions.

    Security:
    - Logs CANNOT be edited after creation
    - Logs CANNOT be deleted
    - Only administrators can read them through the API
    """

    # Action types
    ACTION_CREATE = 'CREATE'
    ACTION_UPDATE = 'UPDATE'
    ACTION_DELETE = 'DELETE'
    ACTION_APPROVE = 'APPROVE'
    ACTION_VACATE = 'VACATE'
    ACTION_PAY = 'PAY'
    ACTION_SWEEP = 'SWEEP'
    ACTION_RECONCILE = 'RECONCILE'

    ACTION_CHOICES = [
        (ACTION_CREATE, 'Create'),
        (ACTION_UPDATE, 'Update'),
        (ACTION_DELETE, 'Delete'),
        (ACTION_APPROVE, 'Approve'),
        (ACTION_VACATE, 'Vacate'),
        (ACTION_PAY, 'Pay'),
        (ACTION_SWEEP, 'Overdue Sweep'),
        (ACTION_RECONCILE, 'Reconcile'),
    ]

    # Resource types
    RESOURCE_APPLICATION = 'Application'
    RESOURCE_ACCEPTED_APPLICATION = 'AcceptedApplication'
    RESOURCE_PAYMENT = 'Payment'
    RESOURCE_USER = 'User'

    RESOURCE_TYPE_CHOICES = [
        (RESOURCE_APPLICATION, 'Application'),
        (RESOURCE_ACCEPTED_APPLICATION, 'Accepted Application'),
        (RESOURCE_PAYMENT, 'Payment'),
        (RESOURCE_USER, 'User'),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
        help_text="User who performed the action (empty for system jobs)"
    )

    action = models.CharField(
        max_length=20,
        choices=ACTION_CHOICES,
        db_index=True,
        help_text="Type of action performed"
    )

    resource_type = models.CharField(
        max_length=50,
        choices=RESOURCE_TYPE_CHOICES,
        db_index=True,
        help_text="Type of resource affected"
    )

    resource_id = models.BigIntegerField(
        db_index=True,
        null=True,
        blank=True,
        help_text="ID of the resource affected"
    )

    description = models.TextField(
        help_text="Human-readable description of the action"
    )

    # Request metadata
    ip_address = models.GenericIPAddressField(
        null=True,
        blank=True,
        help_text="IP address of the user"
    )

    user_agent = models.TextField(
        null=True,
        blank=True,
        help_text="User agent string from request"
    )

    # Additional context (JSON)
    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Additional context data"
    )

    timestamp = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the action occurred"
    )

    objects = AuditLogManager()

    class Meta:
        verbose_name = "Audit Log"
        verbose_name_plural = "Audit Logs"
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['user', '-timestamp'], name='audit_user_ts_idx'),
            models.Index(fields=['resource_type', 'resource_id'], name='audit_resource_idx'),
            models.Index(fields=['action', '-timestamp'], name='audit_action_ts_idx'),
        ]

    def __str__(self):
        username = self.user.username if self.user else 'System'
        return f"{username} - {self.action} - {self.resource_type} #{self.resource_id} - {self.timestamp}"

    def save(self, *args, **kwargs):
        """
        Override save to enforce immutability.
        Only allow creation, not updates.
        """
        if self.pk is not None:
            raise PermissionDenied(
                "Audit logs are immutable and cannot be modified after creation."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise PermissionDenied(
            "Audit logs are immutable and cannot be deleted."
        )

    @property
    def user_display(self):
        """Get user display name"""
        if self.user:
            return self.user.get_full_name() or self.user.username
        return "System"

    @property
    def action_display(self):
        return dict(self.ACTION_CHOICES).get(self.action, self.action)

    @property
    def resource_display(self):
        return dict(self.RESOURCE_TYPE_CHOICES).get(self.resource_type, self.resource_type)
