"""
Audit Log Admin - READ ONLY

Audit logs are immutable and cannot be edited or deleted via admin.
"""

import json

from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html
from audit.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """
    Read-only admin for audit logs.

    Eviction entries show their reason in the list so administrators can
    review removals without opening each record.
    """

    list_display = ['id', 'timestamp', 'actor_link', 'action', 'resource_type', 'resource_id', 'summary']
    list_filter = ['action', 'resource_type', 'timestamp']
    search_fields = ['description', 'user__username', 'ip_address']
    readonly_fields = [
        'user', 'action', 'resource_type', 'resource_id', 'description',
        'ip_address', 'user_agent', 'pretty_metadata', 'timestamp'
    ]
    fieldsets = (
        ('What happened', {
            'fields': ('action', 'resource_type', 'resource_id', 'description', 'timestamp')
        }),
        ('Who', {
            'fields': ('user', 'ip_address', 'user_agent')
        }),
        ('Context', {
            'fields': ('pretty_metadata',),
            'classes': ('collapse',)
        }),
    )
    date_hierarchy = 'timestamp'
    ordering = ['-timestamp']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_actions(self, request):
        actions = super().get_actions(request)
        actions.pop('delete_selected', None)
        return actions

    @admin.display(description='Actor')
    def actor_link(self, obj):
        if obj.user:
            url = reverse('admin:users_user_change', args=[obj.user.id])
            return format_html('<a href="{}">{}</a>', url, obj.user.username)
        return "System"

    @admin.display(description='Summary')
    def summary(self, obj):
        reason = (obj.metadata or {}).get('reason')
        if reason:
            return f"Reason: {reason[:80]}"
        if len(obj.description) > 80:
            return f"{obj.description[:80]}..."
        return obj.description

    @admin.display(description='Metadata')
    def pretty_metadata(self, obj):
        if obj.metadata:
            return format_html('<pre>{}</pre>', json.dumps(obj.metadata, indent=2))
        return "No metadata"
