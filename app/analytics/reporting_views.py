"""
SQL definitions for the reporting views.

Three read-only views aggregate charges and listings:

- marketplace_analytics: one row per day of charges
- seller_performance: one row per connected account
- category_performance: one row per listing category

Table names are passed in rather than hard-coded so the same definitions
serve the migration (historical models) and the admin refresh endpoint
(current models).

PostgreSQL replaces views in place with CREATE OR REPLACE VIEW. Other
backends (SQLite in tests) drop and recreate them.
"""

from __future__ import annotations

from dataclasses import dataclass

MARKETPLACE_ANALYTICS = "marketplace_analytics"
SELLER_PERFORMANCE = "seller_performance"
CATEGORY_PERFORMANCE = "category_performance"

VIEW_NAMES = (MARKETPLACE_ANALYTICS, SELLER_PERFORMANCE, CATEGORY_PERFORMANCE)


@dataclass(frozen=True)
class ReportingTables:
    """Database table names the views read from."""

    listing: str
    charge: str
    account: str
    user: str

    @classmethod
    def from_models(cls, listing_model, charge_model, account_model, user_model):
        return cls(
            listing=listing_model._meta.db_table,
            charge=charge_model._meta.db_table,
            account=account_model._meta.db_table,
            user=user_model._meta.db_table,
        )


def _day_expression(vendor: str, column: str) -> str:
    if vendor == "postgresql":
        return f"DATE_TRUNC('day', {column})"
    return f"DATE({column})"


def view_queries(vendor: str, tables: ReportingTables) -> dict[str, str]:
    """SELECT statement behind each view, keyed by view name."""
    day = _day_expression(vendor, "dc.created_at")

    marketplace_analytics = f"""
        SELECT
            {day} AS transaction_date,
            COUNT(*) AS total_transactions,
            SUM(CASE WHEN dc.status = 'succeeded' THEN dc.amount ELSE 0 END)
                AS total_volume,
            SUM(CASE WHEN dc.status = 'succeeded' THEN dc.application_fee_amount ELSE 0 END)
                AS total_fees,
            AVG(CASE WHEN dc.status = 'succeeded' THEN dc.amount END)
                AS avg_transaction_amount,
            SUM(CASE WHEN dc.status = 'succeeded' THEN 1 ELSE 0 END)
                AS successful_transactions,
            SUM(CASE WHEN dc.status = 'pending' THEN 1 ELSE 0 END)
                AS pending_transactions,
            COUNT(DISTINCT CASE WHEN dc.status = 'succeeded' THEN dc.listing_id END)
                AS unique_items_sold,
            COUNT(DISTINCT CASE WHEN dc.status = 'succeeded' THEN l.category END)
                AS categories_with_sales
        FROM {tables.charge} dc
        LEFT JOIN {tables.listing} l ON l.id = dc.listing_id
        GROUP BY {day}
    """

    seller_performance = f"""
        SELECT
            ca.stripe_account_id AS stripe_account_id,
            u.email AS seller_email,
            COALESCE(ls.total_listings, 0) AS total_listings,
            COALESCE(ls.sold_listings, 0) AS sold_listings,
            COALESCE(ls.sold_value, 0) AS total_listing_value,
            COALESCE(cs.charge_count, 0) AS completed_transactions,
            COALESCE(cs.revenue, 0) / 100.0 AS actual_revenue,
            COALESCE(cs.fees, 0) / 100.0 AS platform_fees_paid,
            ROUND(ls.sold_listings * 100.0 / NULLIF(ls.total_listings, 0), 2)
                AS conversion_rate,
            ROUND(cs.succeeded_count * 100.0 / NULLIF(cs.charge_count, 0), 2)
                AS payment_success_rate
        FROM {tables.account} ca
        JOIN {tables.user} u ON u.id = ca.user_id
        LEFT JOIN (
            SELECT
                seller_stripe_account_id AS account_id,
                COUNT(*) AS total_listings,
                SUM(CASE WHEN status = 'sold' THEN 1 ELSE 0 END) AS sold_listings,
                SUM(CASE WHEN status = 'sold' THEN price ELSE 0 END) AS sold_value
            FROM {tables.listing}
            GROUP BY seller_stripe_account_id
        ) ls ON ls.account_id = ca.stripe_account_id
        LEFT JOIN (
            SELECT
                connected_account_id AS account_id,
                COUNT(*) AS charge_count,
                SUM(CASE WHEN status = 'succeeded' THEN 1 ELSE 0 END) AS succeeded_count,
                SUM(CASE WHEN status = 'succeeded' THEN amount ELSE 0 END) AS revenue,
                SUM(CASE WHEN status = 'succeeded' THEN application_fee_amount ELSE 0 END)
                    AS fees
            FROM {tables.charge}
            GROUP BY connected_account_id
        ) cs ON cs.account_id = ca.stripe_account_id
    """

    category_performance = f"""
        SELECT
            l.category AS category,
            COUNT(l.id) AS total_listings,
            SUM(CASE WHEN l.status = 'sold' THEN 1 ELSE 0 END) AS sold_count,
            AVG(l.price) AS avg_listing_price,
            SUM(CASE WHEN l.status = 'sold' THEN l.price ELSE 0 END) AS total_listing_value,
            COALESCE(SUM(cs.charge_count), 0) AS completed_transactions,
            COALESCE(SUM(cs.revenue), 0) / 100.0 AS actual_revenue,
            COALESCE(SUM(cs.fees), 0) / 100.0 AS platform_fees,
            ROUND(
                SUM(CASE WHEN l.status = 'sold' THEN 1 ELSE 0 END) * 100.0
                / NULLIF(COUNT(l.id), 0),
                2
            ) AS category_conversion_rate,
            ROUND(SUM(cs.revenue) / 100.0 / NULLIF(SUM(cs.succeeded_count), 0), 2)
                AS avg_transaction_amount
        FROM {tables.listing} l
        LEFT JOIN (
            SELECT
                listing_id,
                COUNT(*) AS charge_count,
                SUM(CASE WHEN status = 'succeeded' THEN 1 ELSE 0 END) AS succeeded_count,
                SUM(CASE WHEN status = 'succeeded' THEN amount ELSE 0 END) AS revenue,
                SUM(CASE WHEN status = 'succeeded' THEN application_fee_amount ELSE 0 END)
                    AS fees
            FROM {tables.charge}
            WHERE listing_id IS NOT NULL
            GROUP BY listing_id
        ) cs ON cs.listing_id = l.id
        GROUP BY l.category
    """

    return {
        MARKETPLACE_ANALYTICS: marketplace_analytics,
        SELLER_PERFORMANCE: seller_performance,
        CATEGORY_PERFORMANCE: category_performance,
    }


def view_statements(vendor: str, tables: ReportingTables) -> dict[str, list[str]]:
    """DDL that (re)creates each view, keyed by view name."""
    statements = {}
    for name, query in view_queries(vendor, tables).items():
        if vendor == "postgresql":
            statements[name] = [f"CREATE OR REPLACE VIEW {name} AS {query}"]
        else:
            statements[name] = [
                f"DROP VIEW IF EXISTS {name}",
                f"CREATE VIEW {name} AS {query}",
            ]
    return statements


def drop_statements() -> list[str]:
    return [f"DROP VIEW IF EXISTS {name}" for name in VIEW_NAMES]
