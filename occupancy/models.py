from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from core.constants import Grade
from applications.models import Application
from dormitories.models import Room


class AcceptedApplication(models.Model):
    """
    Occupancy record - a student currently holding a bed in a room.

    Created only by approving an application; removed by eviction or
    checkout. A user holds at most one, and an application is accepted at
    most once; both rules are backed by unique constraints.

    Index number, grade and room are copied from the source application so
    the record survives deletion of that application.
    """
    application = models.OneToOneField(
        Application, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='acceptance'
    )
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='accepted_application'
    )
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name='accepted_applications')
    student_index_number = models.CharField(max_length=50)
    average_grade = models.DecimalField(
        max_digits=4, decimal_places=2,
        validators=[MinValueValidator(Grade.MIN), MaxValueValidator(Grade.MAX)]
    )
    academic_year = models.CharField(max_length=9, help_text="e.g., '2024/2025'")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Accepted Application"
        verbose_name_plural = "Accepted Applications"
        indexes = [
            models.Index(fields=['room'], name='accepted_room_idx'),
            models.Index(fields=['academic_year', 'average_grade'], name='accepted_year_grade_idx'),
        ]

    def __str__(self):
        return f"{self.student_index_number} - {self.room} ({self.academic_year})"
