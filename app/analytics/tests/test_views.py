"""
Tests for analytics API views.
"""

from rest_framework import status

from payments.models import DirectCharge

ANALYTICS_URL = "/api/v1/analytics/"
REFRESH_URL = "/api/v1/analytics/refresh-views/"


# =============================================================================
# GET /api/v1/analytics/
# =============================================================================


class TestAnalyticsGet:
    """GET /api/v1/analytics/?action="""

    def test_requires_authentication(self, api_client):
        response = api_client.get(ANALYTICS_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_summary_is_default(self, authenticated_client, sales_data):
        response = authenticated_client.get(ANALYTICS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["success"] is True
        assert response.data["summary"]["period"] == "Last 30 days"

    def test_analytics(self, authenticated_client, sales_data):
        response = authenticated_client.get(ANALYTICS_URL, {"action": "analytics"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data["total_days"] == 2
        assert len(response.data["analytics"]) == 2

    def test_sellers(self, authenticated_client, sales_data):
        response = authenticated_client.get(ANALYTICS_URL, {"action": "sellers"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data["total_sellers"] == 2
        assert response.data["sellers"][0]["seller_email"] == "alice@example.com"

    def test_categories(self, authenticated_client, sales_data):
        response = authenticated_client.get(ANALYTICS_URL, {"action": "categories"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data["total_categories"] == 2
        assert response.data["categories"][0]["category"] == "electronics"

    def test_sync(self, authenticated_client, db):
        """Should run the transaction sync; no pending charges means no Stripe calls."""
        response = authenticated_client.get(ANALYTICS_URL, {"action": "sync"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data["message"] == "Stripe data synchronized successfully"
        assert response.data["checked"] == 0
        assert "timestamp" in response.data

    def test_invalid_action(self, authenticated_client):
        response = authenticated_client.get(ANALYTICS_URL, {"action": "bogus"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {"error": "Invalid action"}


# =============================================================================
# POST /api/v1/analytics/
# =============================================================================


class TestAnalyticsPost:
    """POST /api/v1/analytics/"""

    def test_requires_staff(self, authenticated_client):
        response = authenticated_client.post(
            ANALYTICS_URL, {"action": "create_test_transaction"}, format="json"
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not DirectCharge.objects.exists()

    def test_create_test_transaction(self, staff_client):
        response = staff_client.post(
            ANALYTICS_URL,
            {"action": "create_test_transaction", "data": {"amount": 2500}},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["success"] is True
        assert response.data["message"] == "Test transaction created successfully"
        assert response.data["transaction"]["amount"] == 2500
        assert response.data["transaction"]["connected_account_id"] == "acct_test_demo"

    def test_invalid_status(self, staff_client):
        response = staff_client.post(
            ANALYTICS_URL,
            {"action": "create_test_transaction", "data": {"status": "refunded"}},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invalid_action(self, staff_client):
        response = staff_client.post(ANALYTICS_URL, {"action": "drop_tables"}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {"error": "Invalid action"}


# =============================================================================
# POST /api/v1/analytics/refresh-views/
# =============================================================================


class TestRefreshViews:
    """POST /api/v1/analytics/refresh-views/"""

    def test_requires_staff(self, authenticated_client):
        response = authenticated_client.post(REFRESH_URL)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_refresh(self, staff_client, sales_data):
        response = staff_client.post(REFRESH_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["message"] == "Analytics views updated successfully"
        assert set(response.data["test_results"].values()) == {"OK"}
