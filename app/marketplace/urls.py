"""
URL configuration for marketplace API.

URL Structure:
    Listings:
        /listings/                    GET, POST
        /listings/{id}/               GET, PUT, PATCH, DELETE
        /listings/{id}/mark-sold/     POST
        /listings/upload/             POST

    Messages:
        /messages/                    GET (?user_email=), POST

All URLs are prefixed with /api/v1/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from marketplace.views import ListingViewSet, MessageListCreateView

router = DefaultRouter()
router.register(r"listings", ListingViewSet, basename="listing")

app_name = "marketplace"

urlpatterns = [
    path("", include(router.urls)),
    path("messages/", MessageListCreateView.as_view(), name="messages"),
]
