"""
Repository pattern implementation.
Abstracts data access and provides a clean interface for domain services.
"""
from typing import Generic, TypeVar, Optional
from django.db.models import QuerySet, Model
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Model)


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.
    Follows Repository pattern for data access abstraction.

    Lookups return ``None`` when nothing matches; services decide whether
    absence is an error. Database errors propagate to the caller.
    """

    model: type = None

    def __init__(self, model: Optional[type] = None):
        if model is not None:
            self.model = model

    def get_by_id(self, id: int, **filters) -> Optional[T]:
        """Get a single instance by ID"""
        return self.model.objects.filter(id=id, **filters).first()

    def get_for_update(self, id: int, **filters) -> Optional[T]:
        """Get a single instance by ID with a row lock (inside a transaction)"""
        return self.model.objects.select_for_update().filter(id=id, **filters).first()

    def get_all(self, **filters) -> QuerySet[T]:
        """Get all instances matching filters"""
        return self.model.objects.filter(**filters)

    def first(self, **filters) -> Optional[T]:
        """Get the first instance matching filters"""
        return self.model.objects.filter(**filters).first()

    def create(self, **kwargs) -> T:
        """Create a new instance"""
        return self.model.objects.create(**kwargs)

    def update(self, instance: T, **kwargs) -> T:
        """Update an existing instance"""
        for key, value in kwargs.items():
            setattr(instance, key, value)
        instance.save()
        return instance

    def update_where(self, filters: dict, **values) -> int:
        """Single-statement update; returns the number of matched rows"""
        return self.model.objects.filter(**filters).update(**values)

    def delete(self, instance: T) -> bool:
        """Delete an instance; False if it was already gone"""
        deleted, _ = self.model.objects.filter(pk=instance.pk).delete()
        return deleted > 0

    def exists(self, **filters) -> bool:
        """Check if instance exists"""
        return self.model.objects.filter(**filters).exists()

    def count(self, **filters) -> int:
        """Count instances matching filters"""
        return self.model.objects.filter(**filters).count()

    def get_queryset(self) -> QuerySet[T]:
        """Get base queryset for custom queries"""
        return self.model.objects.all()
