"""
URL configuration for the marketplace backend.

URL Structure:
    /                                      - ReDoc API documentation
    /admin/                                - Django admin interface
    /health/                               - Health check endpoint
    /schema/                               - OpenAPI schema (YAML)
    /api/v1/auth/                          - Authentication endpoints
        token/                             - Obtain JWT pair
        token/refresh/                     - Refresh access token
        profile/                           - Current user's profile (GET/PATCH)
    /api/v1/                               - Marketplace endpoints
        listings/                          - Listing list/create
        listings/{id}/                     - Listing detail/update/delete
        listings/{id}/mark-sold/           - Mark listing sold
        listings/upload/                   - Upload listing image
        messages/                          - Message list/send
    /api/v1/payments/                      - Payment endpoints
        connect/                           - Start seller onboarding
        connect/status/                    - Reconcile connected account status
        connect/disconnect/                - Forget a connected account locally
        connect/refresh-link/              - New onboarding link
        checkout-session/                  - Create checkout session
        checkout-session/{session_id}/     - Complete / fetch checkout session
        transactions/sync/                 - Re-check pending charges
        transactions/{id}/link-listing/    - Attach a charge to a listing
    /api/v1/analytics/                     - Analytics endpoints
        (root)                             - Summary and SQL view reads
        refresh-views/                     - Re-create analytics views (admin)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
    path("", include("marketplace.urls")),
    path("payments/", include("payments.urls")),
    path("analytics/", include("analytics.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Marketplace Admin"
admin.site.site_title = "Marketplace Admin Portal"
admin.site.index_title = "Listings, sellers and payments"
