# users/filters.py
import django_filters
from .models import User


class StaffFilter(django_filters.FilterSet):
    """?branch=<id>&role=barber|washer|admin"""
    branch = django_filters.NumberFilter(field_name='branch_id')
    role = django_filters.ChoiceFilter(choices=User.ROLE_CHOICES)

    class Meta:
        model = User
        fields = ['branch', 'role']
