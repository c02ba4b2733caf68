"""
Core models - shared abstract bases.
"""

from django.db import models


class TimestampedModel(models.Model):
    """
    Abstract base with created/updated timestamps.

    Used by reservations and payments.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
