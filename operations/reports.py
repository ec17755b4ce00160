# operations/reports.py
from decimal import Decimal
from django.db.models import Count, Q, Sum

from .models import Operation


def _totals(queryset):
    """count/total per status plus overall, from one aggregate query"""
    aggregates = {}
    for status, _label in Operation.STATUS_CHOICES:
        aggregates[f'{status}_count'] = Count('id', filter=Q(status=status))
        aggregates[f'{status}_total'] = Sum('price', filter=Q(status=status))
    aggregates['count'] = Count('id')
    aggregates['total'] = Sum('price')

    row = queryset.aggregate(**aggregates)
    totals = {
        status: {
            "count": row[f'{status}_count'],
            "total": row[f'{status}_total'] or Decimal('0'),
        }
        for status, _label in Operation.STATUS_CHOICES
    }
    totals["count"] = row['count']
    totals["total"] = row['total'] or Decimal('0')
    return totals


def worker_report(user):
    """Totals of one user's own list"""
    return {
        "userId": user.id,
        "name": user.name,
        "role": user.role,
        **_totals(Operation.objects.for_user(user)),
    }


def branch_report(branch):
    """
    Totals of every operation recorded in a branch, overall and per user
    (workers and admins).
    """
    operations = Operation.objects.filter(branch=branch)

    per_user = []
    users = (
        operations.values('user_id', 'user__name', 'user__role', 'kind')
        .order_by('user__name', 'user_id')
        .distinct()
    )
    for row in users:
        per_user.append({
            "userId": row['user_id'],
            "name": row['user__name'],
            "role": row['user__role'],
            "kind": row['kind'],
            **_totals(operations.filter(user_id=row['user_id'], kind=row['kind'])),
        })

    return {
        "branchId": branch.id,
        "branchName": branch.name,
        **_totals(operations),
        "users": per_user,
    }
