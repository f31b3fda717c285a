"""
URL configuration for analytics API.

URL Structure:
    /                  GET, POST
    /refresh-views/    POST

All URLs are prefixed with /api/v1/analytics/ in the main URL configuration.
"""

from django.urls import path

from analytics.views import AnalyticsView, RefreshViewsView

app_name = "analytics"

urlpatterns = [
    path("", AnalyticsView.as_view(), name="analytics"),
    path("refresh-views/", RefreshViewsView.as_view(), name="refresh-views"),
]
