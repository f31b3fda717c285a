"""
Analytics application.

Marketplace reporting over direct charges and listings.

Key components:
    - reporting_views: SQL definitions of the three reporting views
    - AnalyticsService: transaction summary, view reads and view refresh

Usage:
    from analytics.services import AnalyticsService

    summary = AnalyticsService.transaction_summary().data
"""
