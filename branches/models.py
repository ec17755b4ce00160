# branches/models.py
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


class Branch(models.Model):
    """
    A barbershop branch owned by an owner.
    barber_share / washer_share are the legacy branch-wide share settings;
    they are being moved onto each BranchService (see migrate_share_settings).
    """
    name = models.CharField(max_length=150)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='branches',
        limit_choices_to={'role': 'owner'}
    )

    # Legacy branch-level shares (percent)
    barber_share = models.PositiveSmallIntegerField(
        null=True, blank=True,
        validators=[MaxValueValidator(100)],
    )
    washer_share = models.PositiveSmallIntegerField(
        null=True, blank=True,
        validators=[MaxValueValidator(100)],
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = "Branch"
        verbose_name_plural = "Branches"

    def __str__(self):
        return self.name

    @property
    def has_legacy_shares(self):
        return self.barber_share is not None or self.washer_share is not None

    def ordered_services(self):
        return list(self.services.order_by('position', 'id'))


class BranchService(models.Model):
    """
    A service offered by a branch, with its price for the barber and the
    washer and (optionally) its own revenue share percentages.
    """
    branch = models.ForeignKey(
        Branch,
        on_delete=models.CASCADE,
        related_name='services'
    )
    position = models.PositiveIntegerField(default=0)

    name = models.CharField(max_length=150)
    barber_price = models.DecimalField(
        max_digits=10, decimal_places=2,
        null=True, blank=True,
        validators=[MinValueValidator(0)]
    )
    washer_price = models.DecimalField(
        max_digits=10, decimal_places=2,
        null=True, blank=True,
        validators=[MinValueValidator(0)]
    )

    barber_share = models.PositiveSmallIntegerField(
        null=True, blank=True,
        validators=[MaxValueValidator(100)],
    )
    washer_share = models.PositiveSmallIntegerField(
        null=True, blank=True,
        validators=[MaxValueValidator(100)],
    )

    class Meta:
        ordering = ['position', 'id']
        verbose_name = "Branch Service"
        verbose_name_plural = "Branch Services"

    def __str__(self):
        return f"{self.name} @ {self.branch.name}"

    @property
    def has_share_settings(self):
        return self.barber_share is not None and self.washer_share is not None
