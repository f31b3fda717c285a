"""
Tests for payments app.

This package contains test modules for:
- test_models.py: ConnectedAccount and DirectCharge model tests
- test_services.py: Connect, checkout and sync service tests
- test_views.py: API endpoint tests
- test_tasks.py: Celery task tests
- test_commands.py: Management command tests

Usage:
    pytest payments/tests/
    pytest payments/tests/test_services.py
"""
