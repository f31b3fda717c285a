"""
Authentication views.

- RegisterView: Email/password sign-up, returns a JWT pair
- ProfileView: GET/PATCH the current user's profile

Login and token refresh come from djangorestframework-simplejwt and are
wired in urls.py.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.serializers import (
    ProfileSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserSerializer,
)
from authentication.services import ProfileService, RegistrationService
from core.exceptions import ConflictError, exception_for_result


class RegisterView(APIView):
    """
    Create an account with email and password.

    POST: first_name, last_name, email, password and confirm_password are
    required. The password must be at least 8 characters.

    URL: /api/v1/auth/register/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Register",
        tags=["Auth - Registration"],
        request=RegisterSerializer,
        responses={201: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        """
        Response:
            {
                "user": {...},
                "access": "<jwt>",
                "refresh": "<jwt>"
            }
        """
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = RegistrationService.register(
            email=data["email"],
            password=data["password"],
            first_name=data["first_name"],
            last_name=data["last_name"],
        )
        if not result.success:
            raise exception_for_result(result, {"EMAIL_TAKEN": ConflictError})

        refresh = RefreshToken.for_user(result.data)
        return Response(
            {
                "user": UserSerializer(result.data).data,
                "access": str(refresh.access_token),
                "refresh": str(refresh),
            },
            status=status.HTTP_201_CREATED,
        )


class ProfileView(APIView):
    """
    Current user's profile.

    GET: Retrieve the profile
    PUT/PATCH: Update the profile (first_name and last_name required)

    URL: /api/v1/auth/profile/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get current user's profile",
        tags=["Auth - Profile"],
        responses={200: ProfileSerializer},
    )
    def get(self, request):
        profile = ProfileService.get_or_create_profile(request.user)
        return Response(ProfileSerializer(profile).data)

    @extend_schema(
        summary="Update profile",
        tags=["Auth - Profile"],
        request=ProfileUpdateSerializer,
        responses={200: ProfileSerializer},
    )
    def patch(self, request):
        """
        Request body:
            {
                "first_name": "Ada",        // Required
                "last_name": "Lovelace",    // Required
                "phone_number": "...",      // Optional
                "gender": "female",         // Optional
                "birthday": "1990-12-10"    // Optional
            }
        """
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ProfileService.update_profile(
            request.user, **serializer.validated_data
        )
        if not result.success:
            raise exception_for_result(result, {})

        return Response(ProfileSerializer(result.data).data)

    put = patch
