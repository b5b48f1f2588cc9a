"""
Base ORM Models and Mixins.

Provides common functionality for all models:
- UUID primary keys
- Timestamps (created_at, updated_at)
- Change history
"""

import uuid
from django.db import models
from simple_history.models import HistoricalRecords


class TimeStampedMixin(models.Model):
    """Mixin for created_at and updated_at timestamps."""

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created at"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated at"
    )

    class Meta:
        abstract = True


class BaseModel(TimeStampedMixin):
    """
    Base model with UUID primary key and timestamps.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        verbose_name="ID"
    )

    class Meta:
        abstract = True

    def __str__(self):
        return str(self.id)


class BaseModelWithHistory(BaseModel):
    """
    Base model with historical records tracking.

    Uses django-simple-history to track all changes.
    """

    history = HistoricalRecords(inherit=True)

    class Meta:
        abstract = True
