# operations/grouping.py
"""
Read-only shaping of operation lists for the dashboards.
"""
from collections import OrderedDict
from decimal import Decimal

from django.utils import timezone

from .models import Operation


def with_indices(operations):
    """Attach each operation's list position as ``list_index``"""
    operations = list(operations)
    for index, operation in enumerate(operations):
        operation.list_index = index
    return operations


def group_by_date(operations, serializer_class):
    """
    Group by local calendar day of creation, newest day first. Each group:
    {date, operations, count, total}; operations inside a group are newest first.
    """
    groups = OrderedDict()
    ordered = sorted(operations, key=lambda op: op.created_at, reverse=True)

    for operation in ordered:
        day = timezone.localdate(operation.created_at)
        groups.setdefault(day, []).append(operation)

    return [
        {
            "date": day.isoformat(),
            "operations": serializer_class(items, many=True).data,
            "count": len(items),
            "total": sum((op.price for op in items), Decimal('0')),
        }
        for day, items in groups.items()
    ]


def status_summary(operations, serializer_class):
    """{status: {groups, total, count}} for each of the three statuses"""
    summary = {}
    for status, _label in Operation.STATUS_CHOICES:
        items = [op for op in operations if op.status == status]
        summary[status] = {
            "groups": group_by_date(items, serializer_class),
            "total": sum((op.price for op in items), Decimal('0')),
            "count": len(items),
        }
    return summary
