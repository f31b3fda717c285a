"""
Django admin configuration for marketplace models.
"""

from django.contrib import admin

from marketplace.models import Listing, Message


class MessageInline(admin.TabularInline):
    """Read-only conversation history on the listing page."""

    model = Message
    extra = 0
    can_delete = False
    readonly_fields = ["buyer_email", "seller_email", "message", "created_at"]


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    """Admin interface for Listing model."""

    list_display = [
        "id",
        "title",
        "price",
        "category",
        "seller_email",
        "status",
        "created_at",
    ]
    list_filter = ["status", "category", "created_at"]
    search_fields = ["title", "seller_email", "seller_stripe_account_id"]
    readonly_fields = ["id", "created_at", "updated_at", "sold_at"]
    raw_id_fields = ["seller"]
    inlines = [MessageInline]
    ordering = ["-created_at"]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model. Messages are append-only."""

    list_display = ["id", "listing", "buyer_email", "seller_email", "created_at"]
    search_fields = ["buyer_email", "seller_email", "message"]
    readonly_fields = [
        "id",
        "listing",
        "buyer_email",
        "seller_email",
        "message",
        "created_at",
        "updated_at",
    ]
    ordering = ["-created_at"]

    def has_change_permission(self, request, obj=None):
        return False
