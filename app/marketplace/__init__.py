"""
Marketplace application.

Listings, buyer/seller messages and listing image uploads.

Key components:
    - Listing model: An item for sale and its availability
    - Message model: Append-only buyer/seller conversation about a listing
    - ListingService / MessageService / ListingImageService

Usage:
    from marketplace.models import Listing, ListingStatus
    from marketplace.services import ListingService
"""
