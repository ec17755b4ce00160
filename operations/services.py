# operations/services.py
import logging
from django.db import transaction
from rest_framework.exceptions import NotFound, ValidationError

from branches.models import BranchService
from branches.shares import resolve_share_percent, share_amount
from users.models import User
from .lifecycle import (
    apply_transition, bulk_transition, locate, resolve,
    ById, NoOperationsUpdated, OperationNotFound, ref_from_data,
)
from .models import Operation

logger = logging.getLogger('operations')


# ==============================
# Lifecycle (locked writes)
# ==============================

def locked_operations(user):
    """
    The user's operation list with its rows locked until the surrounding
    transaction ends. Must be called inside transaction.atomic().
    """
    return list(Operation.objects.for_user(user).select_for_update())


def transition_one(user, refs, target, **dates):
    """
    Locate one operation (first resolving reference wins) and move it to
    ``target``. Returns (index, operation).
    """
    with transaction.atomic():
        operations = locked_operations(user)
        index = locate(operations, *refs)
        operation = operations[index]
        previous = operation.status

        fields = apply_transition(operation, target, **dates)
        operation.save(update_fields=fields + ['updated_at'])

    logger.info(f"User {user.id} operation #{index} ({operation.uid}): {previous} -> {target}")
    return index, operation


def transition_many(user, refs, target, **dates):
    """Bulk move; returns the number of operations updated"""
    with transaction.atomic():
        operations = locked_operations(user)
        updated = bulk_transition(operations, refs, target, **dates)

        if not updated:
            raise NoOperationsUpdated()

        for index, fields in updated:
            operations[index].save(update_fields=fields + ['updated_at'])

    logger.info(
        f"User {user.id}: {len(updated)}/{len(refs)} operations -> {target} "
        f"(indices {[index for index, _ in updated]})"
    )
    return len(updated)


# ==============================
# Recording worker operations (admin)
# ==============================

WORKER_SLOTS = (
    # (role, worker id key, price key, branch service price field)
    (User.ROLE_BARBER, 'workerId', 'barberPrice', 'barber_price'),
    (User.ROLE_WASHER, 'washerId', 'washerPrice', 'washer_price'),
)


def _find_worker(worker_id, role_label, roles=User.WORKER_ROLES):
    worker = User.objects.select_related('branch').filter(
        pk=worker_id, role__in=roles
    ).first()
    if worker is None:
        raise NotFound(f"{role_label} user not found: {worker_id}")
    return worker


def _branch_service(branch, name):
    if branch is None:
        return None
    return BranchService.objects.filter(branch=branch, name=name).order_by('position', 'id').first()


def record_worker_operations(admin, entries):
    """
    For every entry, append a pending operation to the list of each assigned
    worker. The worker's price is their share of the service price; the full
    price is kept in original_price. Nothing is written unless every entry
    goes through.
    """
    branch = admin.branch
    results = []

    with transaction.atomic():
        for entry in entries:
            service = _branch_service(branch, entry['name'])

            for role, id_key, price_key, service_field in WORKER_SLOTS:
                worker_id = entry.get(id_key)
                if not worker_id:
                    continue

                price = entry.get(price_key)
                if price is None and service is not None:
                    price = getattr(service, service_field)
                if price is None:
                    raise ValidationError(f"{role.capitalize()} price is required")

                worker = _find_worker(worker_id, role.capitalize(), roles=(role,))
                percent = resolve_share_percent(role, service=service, branch=branch)
                amount = share_amount(price, percent)

                operation = Operation.objects.create(
                    user=worker,
                    kind=Operation.KIND_WORKER,
                    branch=worker.branch or branch,
                    name=entry['name'],
                    price=amount,
                    original_price=price,
                    by=entry.get('by'),
                    payment_image_url=entry.get('paymentImageUrl'),
                )
                results.append({
                    "uid": str(operation.uid),
                    "workerId": worker.id,
                    "workerName": worker.name,
                    "workerRole": worker.role,
                    "price": amount,
                    "originalPrice": price,
                    "sharePercent": percent,
                })

    logger.info(f"Admin {admin.id} recorded {len(results)} worker operations")
    return results


# ==============================
# Admin operations
# ==============================

def _worker_entries(entry):
    """
    Normalise both shapes to [{worker_id, name, role, price}]:
    ``workers: [{workerId, price?}]`` and the single-worker
    ``workerId/workerName/workerRole`` form.
    """
    raw = entry.get('workers') or []
    if not raw and entry.get('workerId'):
        raw = [{'workerId': entry['workerId'], 'price': entry.get('price')}]
    if not raw:
        raise ValidationError("At least one worker must be assigned")

    workers = []
    for item in raw:
        worker = _find_worker(item['workerId'], 'Worker')
        price = item.get('price')
        workers.append({
            'worker_id': worker.id,
            'name': worker.name,
            'role': worker.role,
            'price': str(price) if price is not None else None,
        })
    return workers


def record_admin_operations(admin, entries):
    """Append admin operations (full price + workers) to the admin's own list"""
    created = []
    with transaction.atomic():
        for entry in entries:
            created.append(Operation.objects.create(
                user=admin,
                kind=Operation.KIND_ADMIN,
                branch=admin.branch,
                name=entry['name'],
                price=entry['price'],
                workers=_worker_entries(entry),
                by=entry.get('by'),
                payment_image_url=entry.get('paymentImageUrl'),
            ))

    logger.info(f"Admin {admin.id} recorded {len(created)} admin operations")
    return created


def _locate_admin_operation(operations, uid, original):
    refs = [ById(str(uid))]
    if original:
        refs.append(ref_from_data({'name': original.get('name'), 'price': original.get('price')}))
    for ref in refs:
        index = resolve(operations, ref)
        if index is not None:
            return index
    raise OperationNotFound("Service operation not found")


EDITABLE_FIELDS = {
    'name': 'name',
    'price': 'price',
    'by': 'by',
    'paymentImageUrl': 'payment_image_url',
}


def update_admin_operation(admin, uid, changes, original=None):
    """
    Edit one of the admin's own operations, found by uid and, failing that,
    by the ``{name, price}`` of ``original``.
    """
    with transaction.atomic():
        operations = locked_operations(admin)
        index = _locate_admin_operation(operations, uid, original)
        operation = operations[index]
        fields = []

        for key, field in EDITABLE_FIELDS.items():
            if key in changes:
                setattr(operation, field, changes[key])
                fields.append(field)

        if 'workers' in changes:
            operation.workers = _worker_entries({'workers': changes['workers']})
            fields.append('workers')

        if 'status' in changes:
            fields += apply_transition(operation, changes['status'])

        operation.save(update_fields=sorted(set(fields)) + ['updated_at'])

    logger.info(f"Admin {admin.id} edited operation {operation.uid}: {sorted(set(fields))}")
    return operation


def delete_admin_operation(admin, uid, original=None):
    with transaction.atomic():
        operations = locked_operations(admin)
        index = _locate_admin_operation(operations, uid, original)
        operation = operations[index]
        operation.delete()

    logger.info(f"Admin {admin.id} deleted operation #{index} ({operation.name})")
