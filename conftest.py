"""
Root pytest configuration for the Django project.

Sets environment defaults so the settings module imports without a .env
file, then configures Django. Shared fixtures live in app/conftest.py and
app-specific fixtures in each app's tests/conftest.py.
"""

import os

import django

# Ensure Django settings are configured before any tests run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DEBUG", "True")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("BASE_URL", "http://localhost:3000")


def pytest_configure():
    """Configure Django settings before tests run."""
    django.setup()
