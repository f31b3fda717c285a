"""
Tests for core app.

- test_services.py: ServiceResult and BaseService
- test_exception_handler.py: application error rendering
- test_views.py: health check
"""
