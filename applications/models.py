from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from core.constants import DeactivationReason, Grade
from dormitories.models import Room


class Application(models.Model):
    """
    A student's request for a bed in a room.

    Stays active until it is accepted, voided by the acceptance of another
    application of the same student, or withdrawn by its owner.
    """
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='applications')
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name='applications')
    student_index_number = models.CharField(max_length=50)
    average_grade = models.DecimalField(
        max_digits=4, decimal_places=2,
        validators=[MinValueValidator(Grade.MIN), MaxValueValidator(Grade.MAX)]
    )
    is_active = models.BooleanField(default=True)
    deactivation_reason = models.CharField(
        max_length=20, choices=DeactivationReason.CHOICES, null=True, blank=True,
        help_text="Why the application stopped being active"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Application"
        verbose_name_plural = "Applications"
        indexes = [
            models.Index(fields=['user', 'room', 'is_active'], name='app_user_room_active_idx'),
            models.Index(fields=['room', 'is_active'], name='app_room_active_idx'),
            models.Index(fields=['student_index_number'], name='app_index_number_idx'),
        ]

    def __str__(self):
        return f"{self.student_index_number} -> {self.room}"
