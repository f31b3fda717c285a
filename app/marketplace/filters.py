import django_filters as filters
from django.db.models import Q

from marketplace.models import Listing


class ListingFilter(filters.FilterSet):
    """Query-string filters for GET /api/v1/listings/."""

    category = filters.CharFilter(field_name="category", lookup_expr="iexact")
    seller_email = filters.CharFilter(field_name="seller_email", lookup_expr="iexact")
    search = filters.CharFilter(method="filter_search")

    class Meta:
        model = Listing
        fields = ["category", "seller_email", "status", "search"]

    def filter_search(self, queryset, name, value):
        """Case-insensitive match on title or description."""
        return queryset.filter(
            Q(title__icontains=value) | Q(description__icontains=value)
        )
