"""
Tests for registration, the profile endpoint and JWT login.
"""

import datetime
from unittest.mock import patch

import pytest
from rest_framework import status

from authentication.models import User
from authentication.serializers import RegisterSerializer
from authentication.tests.factories import UserFactory

# =============================================================================
# URL Constants
# =============================================================================

PROFILE_URL = "/api/v1/auth/profile/"
TOKEN_URL = "/api/v1/auth/token/"
REGISTER_URL = "/api/v1/auth/register/"


# =============================================================================
# TestProfileViewGet
# =============================================================================


class TestProfileViewGet:
    """GET /api/v1/auth/profile/"""

    def test_returns_profile_for_authenticated_user(self, authenticated_client, user):
        response = authenticated_client.get(PROFILE_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["email"] == user.email
        assert response.data["full_name"] == ""

    def test_requires_authentication(self, api_client, db):
        response = api_client.get(PROFILE_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# TestProfileViewUpdate
# =============================================================================


class TestProfileViewUpdate:
    """PATCH /api/v1/auth/profile/"""

    def test_updates_all_fields(self, authenticated_client, user):
        response = authenticated_client.patch(
            PROFILE_URL,
            {
                "first_name": "Ada",
                "last_name": "Lovelace",
                "phone_number": "+1 650 555 0100",
                "gender": "female",
                "birthday": "1990-12-10",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["full_name"] == "Ada Lovelace"

        user.profile.refresh_from_db()
        assert user.profile.phone_number == "+1 650 555 0100"
        assert user.profile.gender == "female"
        assert user.profile.birthday == datetime.date(1990, 12, 10)

    def test_missing_last_name_is_rejected(self, authenticated_client, user):
        response = authenticated_client.patch(
            PROFILE_URL, {"first_name": "Ada"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "last_name" in response.data

    def test_blank_first_name_is_rejected(self, authenticated_client, user):
        response = authenticated_client.patch(
            PROFILE_URL, {"first_name": "", "last_name": "Lovelace"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_optional_fields_left_untouched_when_omitted(
        self, authenticated_client, user
    ):
        user.profile.phone_number = "555-0000"
        user.profile.save()

        response = authenticated_client.patch(
            PROFILE_URL, {"first_name": "Ada", "last_name": "King"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        user.profile.refresh_from_db()
        assert user.profile.phone_number == "555-0000"

    def test_invalid_gender_is_rejected(self, authenticated_client, user):
        response = authenticated_client.patch(
            PROFILE_URL,
            {"first_name": "Ada", "last_name": "King", "gender": "robot"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "gender" in response.data


# =============================================================================
# TestTokenObtain
# =============================================================================


class TestTokenObtain:
    """POST /api/v1/auth/token/"""

    def test_valid_credentials_return_token_pair(self, api_client, db):
        UserFactory(email="seller@example.com", password="SellerPass123!")

        response = api_client.post(
            TOKEN_URL,
            {"email": "seller@example.com", "password": "SellerPass123!"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert "access" in response.data
        assert "refresh" in response.data

    def test_wrong_password_is_unauthorized(self, api_client, db):
        UserFactory(email="seller@example.com", password="SellerPass123!")

        response = api_client.post(
            TOKEN_URL,
            {"email": "seller@example.com", "password": "nope"},
            format="json",
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# TestRegisterView
# =============================================================================


class TestRegisterView:
    """POST /api/v1/auth/register/"""

    def payload(self, **overrides):
        data = {
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "ada@example.com",
            "password": "Analytical1",
            "confirm_password": "Analytical1",
        }
        data.update(overrides)
        return data

    def test_creates_account_and_returns_tokens(self, api_client, db):
        response = api_client.post(REGISTER_URL, self.payload(), format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["user"]["email"] == "ada@example.com"
        assert response.data["user"]["full_name"] == "Ada Lovelace"
        assert "access" in response.data
        assert "refresh" in response.data

        user = User.objects.get(email="ada@example.com")
        assert user.profile.first_name == "Ada"
        assert user.profile.last_name == "Lovelace"

    def test_new_account_can_log_in(self, api_client, db):
        api_client.post(REGISTER_URL, self.payload(), format="json")

        response = api_client.post(
            TOKEN_URL,
            {"email": "ada@example.com", "password": "Analytical1"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK

    @pytest.mark.parametrize("field", ["first_name", "last_name", "email", "password"])
    def test_required_fields(self, api_client, db, field):
        data = self.payload()
        del data[field]

        response = api_client.post(REGISTER_URL, data, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert field in response.data
        assert not User.objects.exists()

    def test_passwords_must_match(self, api_client, db):
        response = api_client.post(
            REGISTER_URL, self.payload(confirm_password="Analytical2"), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["confirm_password"] == ["Passwords do not match."]

    def test_password_minimum_length(self, api_client, db):
        response = api_client.post(
            REGISTER_URL,
            self.payload(password="short", confirm_password="short"),
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["password"] == [
            "Password must be at least 8 characters long."
        ]

    def test_duplicate_email(self, api_client, user):
        response = api_client.post(
            REGISTER_URL, self.payload(email=user.email.upper()), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "email" in response.data

    def test_email_taken_after_validation_is_conflict(self, api_client, user):
        """Should report a sign-up race on the same email as a conflict."""
        with patch.object(
            RegisterSerializer, "validate_email", side_effect=lambda value: value
        ):
            response = api_client.post(
                REGISTER_URL, self.payload(email=user.email), format="json"
            )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["success"] is False
        assert response.data["error_code"] == "EMAIL_TAKEN"
