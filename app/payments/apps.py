"""
Payments app configuration.

This app provides seller payment infrastructure:
- Stripe Connect onboarding and account status
- Checkout sessions as direct charges with a platform fee
- Pending charge settlement (request and Celery task)
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
