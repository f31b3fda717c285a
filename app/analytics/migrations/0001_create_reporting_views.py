"""
Create the reporting views.

The views read marketplace listings, payment charges and connected
accounts, so this migration runs after both apps' initial migrations.
Later schema changes to those tables can be picked up by the admin
refresh endpoint (POST /api/v1/analytics/refresh-views/).
"""

from django.conf import settings
from django.db import migrations

from analytics.reporting_views import ReportingTables, drop_statements, view_statements


def create_reporting_views(apps, schema_editor):
    tables = ReportingTables.from_models(
        apps.get_model("marketplace", "Listing"),
        apps.get_model("payments", "DirectCharge"),
        apps.get_model("payments", "ConnectedAccount"),
        apps.get_model(settings.AUTH_USER_MODEL),
    )
    vendor = schema_editor.connection.vendor
    for statements in view_statements(vendor, tables).values():
        for sql in statements:
            schema_editor.execute(sql)


def drop_reporting_views(apps, schema_editor):
    for sql in drop_statements():
        schema_editor.execute(sql)


class Migration(migrations.Migration):
    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("marketplace", "0001_initial"),
        ("payments", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(create_reporting_views, drop_reporting_views),
    ]
