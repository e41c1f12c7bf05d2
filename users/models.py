from django.contrib.auth.models import AbstractUser
from django.db import models

from core.constants import UserRole


class User(AbstractUser):
    """Custom User model - Administrator/Student"""
    ROLE_CHOICES = UserRole.CHOICES

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=UserRole.STUDENT)
    phone = models.CharField(max_length=15, blank=True)

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def is_dorm_admin(self):
        """Administrators approve, evict and bill"""
        return self.role == UserRole.ADMIN

    @property
    def is_student(self):
        return self.role == UserRole.STUDENT
