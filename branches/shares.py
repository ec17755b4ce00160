# branches/shares.py
"""
Revenue share resolution.

A worker's cut of a service is a percentage of its price. The percentage is
looked up per service first, then on the legacy branch-wide settings, then in
settings.DEFAULT_BARBER_SHARE / DEFAULT_WASHER_SHARE.
"""
from decimal import Decimal, ROUND_HALF_UP
from django.conf import settings


def default_shares():
    return {
        'barberShare': settings.DEFAULT_BARBER_SHARE,
        'washerShare': settings.DEFAULT_WASHER_SHARE,
    }


def branch_shares(branch):
    """Legacy branch-level shares with defaults filled in"""
    defaults = default_shares()
    return {
        'barberShare': branch.barber_share if branch.barber_share is not None else defaults['barberShare'],
        'washerShare': branch.washer_share if branch.washer_share is not None else defaults['washerShare'],
    }


def resolve_share_percent(role, service=None, branch=None):
    """Percent of the price that goes to a worker of ``role`` (barber/washer)"""
    field = 'barber_share' if role == 'barber' else 'washer_share'

    if service is not None and getattr(service, field) is not None:
        return getattr(service, field)
    if branch is not None and getattr(branch, field) is not None:
        return getattr(branch, field)
    return default_shares()['barberShare' if role == 'barber' else 'washerShare']


def share_amount(price, percent):
    """round(price * percent / 100), halves rounded up"""
    value = Decimal(str(price)) * Decimal(percent) / Decimal(100)
    return value.quantize(Decimal('1'), rounding=ROUND_HALF_UP)

