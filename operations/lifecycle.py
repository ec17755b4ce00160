# operations/lifecycle.py
"""
Operation lifecycle: pending -> pending_to_confirm -> finished.

The dashboards address operations either by their position in the owning
user's list (``ByIndex``), by a ``{name, price}`` descriptor (``ByIdentity``)
or by the operation's uid (``ById``). Everything here works on a plain,
already ordered sequence of operations so the rules can be exercised without
the database; ``operations.services`` does the loading, locking and saving.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import NamedTuple, Optional

from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from .models import Operation

logger = logging.getLogger('operations')


STATUS_RANK = {
    Operation.STATUS_PENDING: 0,
    Operation.STATUS_PENDING_TO_CONFIRM: 1,
    Operation.STATUS_FINISHED: 2,
}


# ==============================
# Errors
# ==============================

class OperationNotFound(NotFound):
    default_detail = 'Operation not found'
    default_code = 'operation_not_found'


class InvalidTransition(ValidationError):
    default_detail = 'Invalid status transition'
    default_code = 'invalid_transition'


class NoOperationsUpdated(ValidationError):
    default_detail = 'No operations were updated'
    default_code = 'no_operations_updated'


# ==============================
# References
# ==============================

class ByIndex(NamedTuple):
    index: int


class ByIdentity(NamedTuple):
    name: str
    price: Decimal


class ById(NamedTuple):
    uid: str


def _as_decimal(value):
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None


def ref_from_index(value):
    """Index sent by a client; anything that is not a whole number never resolves"""
    if isinstance(value, bool):
        return ByIndex(-1)
    if isinstance(value, int):
        return ByIndex(value)
    if isinstance(value, str) and value.lstrip('-').isdigit():
        return ByIndex(int(value))
    return ByIndex(-1)


def ref_from_data(data):
    """``{id}`` / ``{uid}`` or ``{name, price}`` descriptor -> reference"""
    uid = data.get('uid') or data.get('id')
    if uid:
        return ById(str(uid))
    return ByIdentity(data.get('name'), _as_decimal(data.get('price')))


def resolve(operations, ref) -> Optional[int]:
    """Position of the operation ``ref`` points at, or None"""
    if isinstance(ref, ByIndex):
        if 0 <= ref.index < len(operations):
            return ref.index
        return None

    if isinstance(ref, ByIdentity):
        if ref.name is None or ref.price is None:
            return None
        # First match wins; status and dates are not part of the identity
        for index, operation in enumerate(operations):
            if operation.name == ref.name and _as_decimal(operation.price) == ref.price:
                return index
        return None

    if isinstance(ref, ById):
        for index, operation in enumerate(operations):
            if str(operation.uid) == ref.uid:
                return index
        return None

    raise TypeError(f"Unknown operation reference: {ref!r}")


def locate(operations, *refs) -> int:
    """First reference that resolves wins (identity, then index fallback)"""
    for ref in refs:
        if ref is None:
            continue
        index = resolve(operations, ref)
        if index is not None:
            return index
    raise OperationNotFound()


# ==============================
# Transitions
# ==============================

def is_forward(current, target):
    """True for forward moves and for re-applying the same status"""
    return STATUS_RANK[target] >= STATUS_RANK.get(current, 0)


def apply_transition(operation, target, finished_date=None,
                     worker_confirmed_date=None, payment_confirmed_date=None, now=None):
    """
    Move one operation to ``target`` in memory.
    Returns the names of the fields that were written.
    """
    if target not in STATUS_RANK:
        raise ValidationError("Invalid status")

    if not is_forward(operation.status, target):
        raise InvalidTransition(
            f"Cannot move operation from {operation.status} back to {target}"
        )

    operation.status = target
    fields = ['status']

    if target == Operation.STATUS_FINISHED:
        operation.finished_date = finished_date or now or timezone.now()
        fields.append('finished_date')

    if worker_confirmed_date:
        operation.worker_confirmed_date = worker_confirmed_date
        fields.append('worker_confirmed_date')

    if payment_confirmed_date:
        operation.payment_confirmed_date = payment_confirmed_date
        fields.append('payment_confirmed_date')

    return fields


def bulk_transition(operations, refs, target, **dates):
    """
    Apply ``target`` to every operation the references resolve to.

    Unresolved references and backward moves are skipped, as are identity
    and id references that land on an operation already handled in this
    call. A repeated index is applied again and counted each time.

    Returns a list of ``(index, fields)``, one per applied reference.
    """
    if target not in STATUS_RANK:
        raise ValidationError("Invalid status")

    now = dates.pop('now', None) or timezone.now()
    updated = []
    seen = set()

    for ref in refs:
        index = resolve(operations, ref)
        if index is None:
            logger.info(f"Bulk {target}: skipped unresolved {ref!r}")
            continue
        if index in seen and not isinstance(ref, ByIndex):
            logger.info(f"Bulk {target}: skipped duplicate {ref!r} (index {index})")
            continue
        seen.add(index)

        operation = operations[index]
        if not is_forward(operation.status, target):
            logger.warning(
                f"Bulk {target}: skipped backward move of index {index} from {operation.status}"
            )
            continue

        updated.append((index, apply_transition(operation, target, now=now, **dates)))

    return updated
