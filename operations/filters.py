# operations/filters.py
import django_filters
from .models import Operation


class OperationFilter(django_filters.FilterSet):
    """?date=YYYY-MM-DD (local calendar day of creation) & ?status="""
    date = django_filters.DateFilter(field_name='created_at', lookup_expr='date')
    status = django_filters.ChoiceFilter(choices=Operation.STATUS_CHOICES)

    class Meta:
        model = Operation
        fields = ['date', 'status']


class WorkerOperationFilter(django_filters.FilterSet):
    """?branch=<id> & ?userId=<id> for the flattened worker list"""
    branch = django_filters.NumberFilter(field_name='user__branch_id')
    userId = django_filters.NumberFilter(field_name='user_id')
    status = django_filters.ChoiceFilter(choices=Operation.STATUS_CHOICES)

    class Meta:
        model = Operation
        fields = ['branch', 'userId', 'status']
