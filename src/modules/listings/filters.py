import django_filters

from modules.listings.models import Listing


class ListingFilter(django_filters.FilterSet):
    category = django_filters.CharFilter(field_name="category", lookup_expr="iexact")
    seller = django_filters.UUIDFilter(field_name="seller_id")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    is_pre_order = django_filters.BooleanFilter(field_name="is_pre_order")

    class Meta:
        model = Listing
        fields = ["category", "seller", "min_price", "max_price", "is_pre_order"]
