"""
Serializers for authentication models.

- UserSerializer: Current user summary
- ProfileSerializer: Profile read shape (includes full_name)
- ProfileUpdateSerializer: Input validation for profile updates
- RegisterSerializer: Input validation for email/password sign-up
"""

from rest_framework import serializers

from authentication.models import Profile, User


class UserSerializer(serializers.ModelSerializer):
    """Read-only summary of a user."""

    full_name = serializers.CharField(source="get_full_name", read_only=True)

    class Meta:
        model = User
        fields = ["id", "email", "full_name", "date_joined"]
        read_only_fields = fields


class ProfileSerializer(serializers.ModelSerializer):
    """Profile data as returned to the profile page."""

    user_id = serializers.IntegerField(source="user.id", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Profile
        fields = [
            "user_id",
            "email",
            "first_name",
            "last_name",
            "full_name",
            "phone_number",
            "gender",
            "birthday",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.Serializer):
    """
    Input for updating the profile.

    first_name and last_name are required even on PATCH; the profile form
    always submits them.
    """

    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)
    phone_number = serializers.CharField(
        max_length=32, required=False, allow_blank=True
    )
    gender = serializers.ChoiceField(
        choices=Profile.Gender.choices, required=False, allow_blank=True
    )
    birthday = serializers.DateField(required=False, allow_null=True)


class RegisterSerializer(serializers.Serializer):
    """
    Input for POST /api/v1/auth/register/.

    Names are stored on the Profile created for the new user.
    """

    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={"input_type": "password"},
        error_messages={
            "min_length": "Password must be at least 8 characters long.",
        },
    )
    confirm_password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
    )

    def validate_email(self, value):
        email = value.lower().strip()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return email

    def validate(self, attrs):
        if attrs["password"] != attrs["confirm_password"]:
            raise serializers.ValidationError(
                {"confirm_password": "Passwords do not match."}
            )
        return attrs
