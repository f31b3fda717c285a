"""
Payment admin configuration.

Registers connected accounts and direct charges with the Django admin.
Charge status changes go through the services, so status is read-only.
"""

from django.contrib import admin

from payments.models import ConnectedAccount, DirectCharge


@admin.register(ConnectedAccount)
class ConnectedAccountAdmin(admin.ModelAdmin):
    """
    Admin configuration for ConnectedAccount.

    Provides visibility into Stripe Connect account status.
    """

    list_display = [
        "id",
        "user",
        "stripe_account_id",
        "account_type",
        "details_submitted",
        "charges_enabled",
        "payouts_enabled",
        "created_at",
    ]
    list_filter = ["account_type", "details_submitted", "charges_enabled"]
    search_fields = ["id", "stripe_account_id", "user__email"]
    readonly_fields = ["id", "created_at", "updated_at"]
    raw_id_fields = ["user"]
    ordering = ["-created_at"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "user", "stripe_account_id", "account_type"),
            },
        ),
        (
            "Status",
            {
                "fields": ("details_submitted", "charges_enabled", "payouts_enabled"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )


@admin.register(DirectCharge)
class DirectChargeAdmin(admin.ModelAdmin):
    """
    Admin configuration for DirectCharge.

    State changes should be made through the service layer, not admin.
    """

    list_display = [
        "id",
        "connected_account_id",
        "amount_display",
        "application_fee_amount",
        "status",
        "listing",
        "created_at",
    ]
    list_filter = ["status", "currency", "created_at"]
    search_fields = [
        "id",
        "checkout_session_id",
        "payment_intent_id",
        "connected_account_id",
    ]
    readonly_fields = ["id", "status", "paid_at", "created_at", "updated_at"]
    raw_id_fields = ["listing"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "status", "connected_account_id", "listing"),
            },
        ),
        (
            "Amount",
            {
                "fields": (
                    "amount",
                    "application_fee_amount",
                    "currency",
                    "description",
                ),
            },
        ),
        (
            "Stripe",
            {
                "fields": ("checkout_session_id", "payment_intent_id"),
            },
        ),
        (
            "Metadata",
            {
                "fields": ("metadata",),
                "classes": ("collapse",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("paid_at", "created_at", "updated_at"),
            },
        ),
    )

    @admin.display(description="Amount")
    def amount_display(self, obj):
        return f"{obj.amount / 100:.2f} {obj.currency.upper()}"
