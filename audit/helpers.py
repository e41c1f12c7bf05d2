"""
Audit Logging Helper Functions

Provides a centralized way to record occupancy and billing actions.
Audit writes never fail the operation being audited.
"""

from django.db import transaction, DatabaseError
from audit.models import AuditLog
import logging

logger = logging.getLogger(__name__)


def log_action(user, action, resource_type, resource_id, description, request=None, metadata=None):
    """
    Log an action to the audit log.

    Args:
        user: User who performed the action (None for system jobs)
        action: Action type (APPROVE, VACATE, etc.)
        resource_type: Type of resource (Application, Payment, etc.)
        resource_id: ID of the resource
        description: Human-readable description
        request: Django request object (optional)
        metadata: Additional context data (optional)

    Returns:
        AuditLog instance, or None if the write failed

    Example:
        log_action(
            user=request.user,
            action=AuditLog.ACTION_APPROVE,
            resource_type=AuditLog.RESOURCE_ACCEPTED_APPLICATION,
            resource_id=accepted.id,
            description=f"Approved application #{accepted.application_id}",
            request=request
        )
    """
    ip_address = None
    user_agent = None

    if request is not None:
        ip_address = get_client_ip(request)
        user_agent = request.META.get('HTTP_USER_AGENT', '')[:500]

    actor = user if user is not None and getattr(user, 'pk', None) else None

    try:
        # Savepoint keeps a failed audit write from poisoning the caller's transaction
        with transaction.atomic():
            audit_log = AuditLog.objects.create(
                user=actor,
                action=action,
                resource_type=resource_type,
                resource_id=resource_id,
                description=description,
                ip_address=ip_address,
                user_agent=user_agent,
                metadata=metadata or {}
            )
    except DatabaseError as e:
        logger.error(f"Failed to create audit log: {e}", exc_info=True)
        return None

    username = actor.username if actor else 'system'
    logger.info(f"Audit: {username} - {action} - {resource_type} #{resource_id}")
    return audit_log


def get_client_ip(request):
    """
    Extract client IP address from request.
    Handles proxies and load balancers.
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')

    if x_forwarded_for:
        # X-Forwarded-For can contain multiple IPs, get the first one
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')

    return ip


def log_approval(user, accepted, request=None):
    """Log an application approval"""
    return log_action(
        user=user,
        action=AuditLog.ACTION_APPROVE,
        resource_type=AuditLog.RESOURCE_ACCEPTED_APPLICATION,
        resource_id=accepted.id,
        description=f"Approved application #{accepted.application_id} for room {accepted.room_id} ({accepted.academic_year})",
        request=request,
        metadata={
            'application_id': accepted.application_id,
            'user_id': accepted.user_id,
            'room_id': accepted.room_id,
            'academic_year': accepted.academic_year,
        }
    )


def log_eviction(user, accepted, reason, request=None):
    """Log an administrator eviction together with its reason"""
    return log_action(
        user=user,
        action=AuditLog.ACTION_VACATE,
        resource_type=AuditLog.RESOURCE_ACCEPTED_APPLICATION,
        resource_id=accepted.id,
        description=f"Evicted user {accepted.user_id} from room {accepted.room_id}: {reason}",
        request=request,
        metadata={
            'kind': 'eviction',
            'reason': reason,
            'user_id': accepted.user_id,
            'room_id': accepted.room_id,
            'application_id': accepted.application_id,
        }
    )


def log_checkout(user, accepted, request=None):
    """Log a self-service checkout"""
    return log_action(
        user=user,
        action=AuditLog.ACTION_VACATE,
        resource_type=AuditLog.RESOURCE_ACCEPTED_APPLICATION,
        resource_id=accepted.id,
        description=f"User {accepted.user_id} checked out of room {accepted.room_id}",
        request=request,
        metadata={
            'kind': 'checkout',
            'user_id': accepted.user_id,
            'room_id': accepted.room_id,
            'application_id': accepted.application_id,
        }
    )


def log_payment_status(user, payment, old_status, request=None):
    """Log a payment being marked paid or unpaid"""
    return log_action(
        user=user,
        action=AuditLog.ACTION_PAY,
        resource_type=AuditLog.RESOURCE_PAYMENT,
        resource_id=payment.id,
        description=f"Payment {payment.period} changed from {old_status} to {payment.status}",
        request=request,
        metadata={
            'application_id': payment.application_id,
            'period': payment.period,
            'amount': str(payment.amount),
            'old_status': old_status,
            'new_status': payment.status,
        }
    )


def get_resource_audit_trail(resource_type, resource_id, limit=50):
    """
    Get complete audit trail for a specific resource.

    Returns:
        QuerySet of AuditLog entries, newest first
    """
    return AuditLog.objects.for_resource(resource_type, resource_id).order_by('-timestamp')[:limit]
