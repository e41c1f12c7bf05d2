"""
Role permissions - administrators manage occupancy, students manage their own applications
"""
from rest_framework import permissions


class IsDormAdmin(permissions.BasePermission):
    """
    Permission to only allow dormitory administrators.
    """
    message = "Administrator role required"

    def has_permission(self, request, view):
        """Check if user is authenticated and an administrator"""
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return getattr(user, 'is_dorm_admin', False)


class IsStudent(permissions.BasePermission):
    """
    Permission to allow the Student role
    """
    message = "Student role required"

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return getattr(user, 'is_student', False)
