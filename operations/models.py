# operations/models.py
import uuid
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class OperationQuerySet(models.QuerySet):

    def for_user(self, user):
        """The operation list a user owns, in list order"""
        return self.filter(user=user, kind=user.operation_kind).order_by('id')

    def pending(self):
        return self.filter(status=Operation.STATUS_PENDING)

    def awaiting_confirmation(self):
        return self.filter(status=Operation.STATUS_PENDING_TO_CONFIRM)

    def finished(self):
        return self.filter(status=Operation.STATUS_FINISHED)


class Operation(models.Model):
    """
    A recorded service operation.

    Barbers and washers own ``worker`` operations (their share of a service);
    admins own ``admin`` operations (the full price, with the workers who did
    the job listed in ``workers``). A user's list is ordered by id and list
    indices sent by the dashboards address that order.
    """
    KIND_WORKER = 'worker'
    KIND_ADMIN = 'admin'
    KIND_CHOICES = [
        (KIND_WORKER, 'Worker operation'),
        (KIND_ADMIN, 'Admin operation'),
    ]

    STATUS_PENDING = 'pending'
    STATUS_PENDING_TO_CONFIRM = 'pending_to_confirm'
    STATUS_FINISHED = 'finished'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_PENDING_TO_CONFIRM, 'Pending to confirm'),
        (STATUS_FINISHED, 'Finished'),
    ]

    PAYMENT_CASH = 'cash'
    PAYMENT_TELEBIRR = 'telebirr'
    PAYMENT_CHOICES = [
        (PAYMENT_CASH, 'Cash'),
        (PAYMENT_TELEBIRR, 'Telebirr'),
    ]

    uid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='operations'
    )
    kind = models.CharField(max_length=10, choices=KIND_CHOICES, default=KIND_WORKER)
    branch = models.ForeignKey(
        'branches.Branch',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='operations'
    )

    name = models.CharField(max_length=150)
    price = models.DecimalField(
        max_digits=10, decimal_places=2,
        validators=[MinValueValidator(0)]
    )
    original_price = models.DecimalField(
        max_digits=10, decimal_places=2,
        null=True, blank=True,
        help_text="Full service price when ``price`` is the worker's share"
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING
    )

    by = models.CharField(max_length=10, choices=PAYMENT_CHOICES, null=True, blank=True)
    payment_image_url = models.URLField(max_length=500, null=True, blank=True)

    # [{worker_id, name, role, price}]
    workers = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    finished_date = models.DateTimeField(null=True, blank=True)
    worker_confirmed_date = models.DateTimeField(null=True, blank=True)
    payment_confirmed_date = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OperationQuerySet.as_manager()

    class Meta:
        ordering = ['id']
        verbose_name = "Operation"
        verbose_name_plural = "Operations"
        indexes = [
            models.Index(fields=['user', 'kind', 'status'], name='operations__user_id_6c1e2f_idx'),
            models.Index(fields=['branch', 'status'], name='operations__branch__a3d9b4_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.price}) - {self.status}"

    @property
    def is_finished(self):
        return self.status == self.STATUS_FINISHED
