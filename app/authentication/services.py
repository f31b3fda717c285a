"""
Account and profile business logic.

- RegistrationService backs POST /api/v1/auth/register/
- ProfileService backs GET/PATCH /api/v1/auth/profile/
"""

from __future__ import annotations

from authentication.models import Profile, User
from core.services import BaseService, ServiceResult

PROFILE_UPDATE_FIELDS = (
    "first_name",
    "last_name",
    "phone_number",
    "gender",
    "birthday",
)


class RegistrationService(BaseService):
    """Email/password sign-up."""

    @classmethod
    def register(
        cls, email: str, password: str, first_name: str, last_name: str
    ) -> ServiceResult[User]:
        """
        Create a user and fill in the names on its Profile.

        Returns:
            ServiceResult with the new User, or a failure when a field is
            missing or the email is taken.
        """
        missing = cls.validate_required(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password,
        )
        if missing is not None:
            return missing

        email = email.lower().strip()
        if User.objects.filter(email__iexact=email).exists():
            return ServiceResult.failure(
                "A user with this email already exists.", error_code="EMAIL_TAKEN"
            )

        with cls.atomic():
            user = User.objects.create_user(email=email, password=password)
            profile = ProfileService.get_or_create_profile(user)
            profile.first_name = first_name.strip()
            profile.last_name = last_name.strip()
            profile.save(update_fields=["first_name", "last_name", "updated_at"])
            user.profile = profile

        cls.get_logger().info(f"User registered: {email}", extra={"user_id": user.pk})
        return ServiceResult.success(user)


class ProfileService(BaseService):
    """Reads and updates the current user's Profile."""

    @classmethod
    def get_or_create_profile(cls, user: User) -> Profile:
        profile, created = Profile.objects.get_or_create(user=user)
        if created:
            cls.get_logger().debug(f"Profile created for user: {user.email}")
        return profile

    @classmethod
    def update_profile(cls, user: User, **data) -> ServiceResult[Profile]:
        """
        Update profile fields for ``user``.

        First and last name must both be present and non-blank; the other
        fields are optional and only written when supplied.

        Returns:
            ServiceResult with the saved Profile, or a MISSING_REQUIRED_FIELDS
            failure naming the absent fields.
        """
        missing = cls.validate_required(
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
        )
        if missing is not None:
            return missing

        profile = cls.get_or_create_profile(user)
        changed = []
        for field_name in PROFILE_UPDATE_FIELDS:
            if field_name in data:
                value = data[field_name]
                if isinstance(value, str):
                    value = value.strip()
                setattr(profile, field_name, value)
                changed.append(field_name)

        profile.save(update_fields=[*changed, "updated_at"])
        cls.get_logger().info(
            f"Profile updated for user {user.pk}",
            extra={"user_id": user.pk, "fields": changed},
        )
        return ServiceResult.success(profile)
