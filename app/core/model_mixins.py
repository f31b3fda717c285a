"""
Model mixins combined with BaseModel.

Available Mixins:
    UUIDPrimaryKeyMixin: Use UUID as primary key
    MetadataMixin: Free-form JSON metadata with small accessors

Usage:
    from core.models import BaseModel
    from core.model_mixins import MetadataMixin, UUIDPrimaryKeyMixin

    class DirectCharge(UUIDPrimaryKeyMixin, MetadataMixin, BaseModel):
        amount = models.PositiveIntegerField()
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from django.db import models

if TYPE_CHECKING:
    from typing import Any


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use a UUID primary key instead of an auto-increment integer.

    Listing and charge ids appear in public URLs, so they should not
    reveal row counts or be guessable.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier (UUID v4)",
    )

    class Meta:
        abstract = True


class MetadataMixin(models.Model):
    """
    JSON metadata column for data that has no fixed schema.

    Fields:
        metadata: JSON object, defaults to {}

    Usage:
        charge.set_metadata("post_id", str(listing.id))
        charge.get_metadata("product_name", "Marketplace Item")
    """

    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Additional metadata as JSON",
    )

    class Meta:
        abstract = True

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return (self.metadata or {}).get(key, default)

    def set_metadata(self, key: str, value: Any, save: bool = False) -> None:
        if self.metadata is None:
            self.metadata = {}
        self.metadata[key] = value
        if save:
            self.save(update_fields=["metadata", "updated_at"])
