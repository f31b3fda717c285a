"""
Permission classes for marketplace endpoints.
"""

from rest_framework import permissions


class IsSellerOrReadOnly(permissions.BasePermission):
    """
    Anyone may read a listing; only its seller (or staff) may change it.

    The seller is matched by FK, or by email for listings created before
    sellers had accounts.
    """

    message = "Only the seller can modify this listing."

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True

        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_staff:
            return True
        if obj.seller_id is not None:
            return obj.seller_id == user.pk
        return obj.seller_email.lower() == user.email.lower()
