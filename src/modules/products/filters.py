import django_filters

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    category = django_filters.CharFilter(field_name="category", lookup_expr="exact")
    owner = django_filters.NumberFilter(field_name="owner_id")
    title = django_filters.CharFilter(field_name="title", lookup_expr="icontains")
    condition = django_filters.CharFilter(field_name="condition", lookup_expr="iexact")

    class Meta:
        model = Product
        fields = ["category", "owner", "title", "condition"]
