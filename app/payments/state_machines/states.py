"""
State enums for payment models.

These are Django TextChoices for database storage and admin integration.

DirectCharge States:
    pending → succeeded
    pending → failed

ConnectStatus (derived, never stored):
    not_connected: user has no connected account record
    pending: onboarding details not yet submitted
    restricted: details submitted but Stripe has not enabled charges
    active: details submitted and charges enabled
"""

from django.db import models


class DirectChargeState(models.TextChoices):
    """
    States for the DirectCharge model lifecycle.

    A row is inserted as PENDING when its checkout session is created and
    moves to SUCCEEDED exactly once, when the session is first seen paid.
    """

    PENDING = "pending", "Pending"
    SUCCEEDED = "succeeded", "Succeeded"
    FAILED = "failed", "Failed"


class ConnectStatus(models.TextChoices):
    """Seller-facing status derived from a connected account's flags."""

    NOT_CONNECTED = "not_connected", "Not connected"
    PENDING = "pending", "Pending"
    RESTRICTED = "restricted", "Restricted"
    ACTIVE = "active", "Active"


class CapabilityStatus(models.TextChoices):
    """Normalized Stripe capability value reported to the client."""

    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


class AccountType(models.TextChoices):
    """Stripe Connect account types."""

    EXPRESS = "express", "Express"
    STANDARD = "standard", "Standard"
    CUSTOM = "custom", "Custom"
