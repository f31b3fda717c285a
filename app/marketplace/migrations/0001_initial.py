import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import marketplace.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Listing",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier (UUID v4)",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("title", models.CharField(help_text="Listing title", max_length=200)),
                (
                    "description",
                    models.TextField(blank=True, help_text="Listing description"),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Asking price in dollars",
                        max_digits=10,
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        db_index=True,
                        help_text="Listing category (e.g. electronics, furniture)",
                        max_length=100,
                    ),
                ),
                (
                    "seller_email",
                    models.EmailField(
                        db_index=True, help_text="Seller contact email", max_length=254
                    ),
                ),
                (
                    "seller_stripe_account_id",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Stripe account that receives payment for this listing",
                        max_length=255,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("available", "Available"),
                            ("pending", "Pending"),
                            ("sold", "Sold"),
                        ],
                        db_index=True,
                        default="available",
                        help_text="Listing availability",
                        max_length=20,
                    ),
                ),
                (
                    "image_url",
                    models.CharField(
                        blank=True,
                        help_text="Public URL of the listing image",
                        max_length=500,
                    ),
                ),
                (
                    "location",
                    models.CharField(
                        default=marketplace.models.default_listing_location,
                        help_text="Pickup location",
                        max_length=200,
                    ),
                ),
                (
                    "sold_at",
                    models.DateTimeField(
                        blank=True, help_text="When the listing was sold", null=True
                    ),
                ),
                (
                    "seller",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who created the listing",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="listings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "listing",
                "verbose_name_plural": "listings",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Message",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier (UUID v4)",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "buyer_email",
                    models.EmailField(
                        db_index=True, help_text="Buyer participant", max_length=254
                    ),
                ),
                (
                    "seller_email",
                    models.EmailField(
                        db_index=True, help_text="Seller participant", max_length=254
                    ),
                ),
                ("message", models.TextField(help_text="Message body")),
                (
                    "listing",
                    models.ForeignKey(
                        help_text="Listing the conversation is about",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to="marketplace.listing",
                    ),
                ),
            ],
            options={
                "verbose_name": "message",
                "verbose_name_plural": "messages",
                "ordering": ["created_at"],
            },
        ),
    ]
