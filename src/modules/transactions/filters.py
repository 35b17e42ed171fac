import django_filters

from modules.transactions.constants import TransactionStatus
from modules.transactions.models import Transaction


class TransactionFilter(django_filters.FilterSet):
    status = django_filters.MultipleChoiceFilter(choices=TransactionStatus.choices)
    seller = django_filters.UUIDFilter(field_name="seller_id")
    buyer = django_filters.UUIDFilter(field_name="buyer_id")
    agent = django_filters.UUIDFilter(field_name="assigned_agent_id")
    is_pre_order = django_filters.BooleanFilter(field_name="is_pre_order")
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = Transaction
        fields = [
            "status",
            "seller",
            "buyer",
            "agent",
            "is_pre_order",
            "start_date",
            "end_date",
        ]
