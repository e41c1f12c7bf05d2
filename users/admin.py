from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    User management for administrators and students.

    Students register through the identity service; administrators are
    created here with role ADMIN.
    """
    list_display = ['username', 'email', 'role', 'is_active', 'is_staff', 'date_joined']
    list_filter = ['role', 'is_active', 'is_staff']
    search_fields = ['username', 'email', 'phone']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Dormitory Role', {
            'fields': ('role', 'phone'),
            'description': 'ADMIN approves applications and manages billing. STUDENT applies for rooms.'
        }),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Dormitory Role', {
            'fields': ('role', 'phone'),
        }),
    )
