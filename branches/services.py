# branches/services.py
import logging
from django.db import transaction
from .models import Branch
from .shares import branch_shares

logger = logging.getLogger(__name__)


def migrate_share_settings(dry_run=False, owner_id=None):
    """
    Copy the legacy branch-level shares onto every service that has no share
    settings of its own, then clear the legacy fields.

    Limited to the branches of ``owner_id`` when given.

    Returns the number of branches that were (or, with dry_run, would be) updated.
    """
    updated = 0
    branches = Branch.objects.prefetch_related('services')
    if owner_id is not None:
        branches = branches.filter(owner_id=owner_id)

    for branch in branches:
        shares = branch_shares(branch)
        pending = [s for s in branch.services.all() if not s.has_share_settings]

        if not pending and not branch.has_legacy_shares:
            continue

        updated += 1
        if dry_run:
            continue

        with transaction.atomic():
            for service in pending:
                if service.barber_share is None:
                    service.barber_share = shares['barberShare']
                if service.washer_share is None:
                    service.washer_share = shares['washerShare']
                service.save(update_fields=['barber_share', 'washer_share'])

            branch.barber_share = None
            branch.washer_share = None
            branch.save(update_fields=['barber_share', 'washer_share', 'updated_at'])

        logger.info(f"Moved share settings of branch {branch.id} onto {len(pending)} services")

    return updated
