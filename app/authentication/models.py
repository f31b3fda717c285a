"""
Authentication models.

- User: Email-based user model (auth fields only)
- Profile: Personal details edited through the profile endpoint

Related files:
    - managers.py: Custom user manager for email-based creation
    - signals.py: Auto-create profile on user creation
    - services.py: ProfileService business logic
"""

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager
from core.models import BaseModel


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the login identifier.

    Marketplace records (listings, messages) reference sellers and buyers
    by email as well, so the address is unique and normalized.

    Usage:
        user = User.objects.create_user(
            email="seller@example.com",
            password="securepassword",
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (login identifier)",
    )
    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )
    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        """Full name from the profile, falling back to the email."""
        try:
            return self.profile.full_name or self.email
        except Profile.DoesNotExist:
            return self.email

    def get_short_name(self):
        try:
            return self.profile.first_name or self.email.split("@")[0]
        except Profile.DoesNotExist:
            return self.email.split("@")[0]


class Profile(BaseModel):
    """
    Personal details shown on the seller/buyer profile page.

    Fields:
        user: OneToOne link to User (also the primary key)
        first_name / last_name: Required once the user saves the profile form
        phone_number: Free-form contact number
        gender: One of Gender choices, blank when not given
        birthday: Optional date of birth

    Note:
        Profile is created automatically by signals when a User is created.
    """

    class Gender(models.TextChoices):
        MALE = "male", "Male"
        FEMALE = "female", "Female"
        NON_BINARY = "non_binary", "Non-binary"
        PREFER_NOT_TO_SAY = "prefer_not_to_say", "Prefer not to say"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        primary_key=True,
        help_text="User this profile belongs to",
    )
    first_name = models.CharField(
        max_length=150,
        blank=True,
        help_text="User's first name",
    )
    last_name = models.CharField(
        max_length=150,
        blank=True,
        help_text="User's last name",
    )
    phone_number = models.CharField(
        max_length=32,
        blank=True,
        help_text="Contact phone number",
    )
    gender = models.CharField(
        max_length=32,
        choices=Gender.choices,
        blank=True,
        help_text="Self-described gender",
    )
    birthday = models.DateField(
        null=True,
        blank=True,
        help_text="Date of birth",
    )

    class Meta:
        db_table = "authentication_profile"
        verbose_name = "profile"
        verbose_name_plural = "profiles"

    def __str__(self):
        return self.full_name or str(self.user)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()
