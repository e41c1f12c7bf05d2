from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from core.constants import Amenity


class Dormitory(models.Model):
    """Student dormitory building"""
    name = models.CharField(max_length=255)
    address = models.TextField()
    telephone = models.CharField(max_length=30, blank=True)
    email = models.EmailField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = "Dormitory"
        verbose_name_plural = "Dormitories"

    def __str__(self):
        return self.name


class Room(models.Model):
    """
    Room inside a dormitory.

    ``capacity`` is the number of beds; occupancy records for the room may
    never exceed it.
    """
    dormitory = models.ForeignKey(Dormitory, on_delete=models.CASCADE, related_name='rooms')
    number = models.CharField(max_length=20, help_text="e.g., '101', 'B-12'")
    capacity = models.PositiveIntegerField(validators=[MinValueValidator(1)], help_text="Number of beds")
    amenities = models.JSONField(default=list, blank=True, help_text="Subset of the supported amenities")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['dormitory', 'number']
        unique_together = ['dormitory', 'number']
        verbose_name = "Room"
        verbose_name_plural = "Rooms"

    def __str__(self):
        return f"{self.dormitory.name} - Room {self.number}"

    def clean(self):
        unknown = set(self.amenities or []) - Amenity.VALUES
        if unknown:
            raise ValidationError({'amenities': f"Unsupported amenities: {', '.join(sorted(unknown))}"})

    @property
    def occupant_count(self):
        """Current occupancy records for this room"""
        return self.accepted_applications.count()

    @property
    def free_beds(self):
        return max(self.capacity - self.occupant_count, 0)
