"""
Tests for analytics app.

- test_services.py: summary, reporting views, refresh, test transactions
- test_views.py: API endpoint tests
- test_reporting_views.py: reporting view SQL generation
"""
