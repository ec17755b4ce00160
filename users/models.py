# users/models.py
from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.db import models
from .managers import UserManager


class User(AbstractUser):
    """
    Custom User Model
    Everybody logs in with phone + password; the role decides which
    dashboard they get and which operation list they own.
    """
    username = None
    first_name = None
    last_name = None

    name = models.CharField(max_length=150)

    phone = models.CharField(
        max_length=20,
        unique=True,
        help_text="Login phone number (E.164)"
    )

    ROLE_OWNER = 'owner'
    ROLE_ADMIN = 'admin'
    ROLE_BARBER = 'barber'
    ROLE_WASHER = 'washer'
    ROLE_CUSTOMER = 'customer'

    ROLE_CHOICES = [
        (ROLE_OWNER, 'Owner'),
        (ROLE_ADMIN, 'Admin'),
        (ROLE_BARBER, 'Barber'),
        (ROLE_WASHER, 'Washer'),
        (ROLE_CUSTOMER, 'Customer'),
    ]
    STAFF_ROLES = (ROLE_ADMIN, ROLE_BARBER, ROLE_WASHER)
    WORKER_ROLES = (ROLE_BARBER, ROLE_WASHER)

    role = models.CharField(
        max_length=10,
        choices=ROLE_CHOICES,
        default=ROLE_CUSTOMER
    )

    # Only required for admin/barber/washer
    branch = models.ForeignKey(
        'branches.Branch',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='staff'
    )

    is_suspended = models.BooleanField(
        default=False,
        help_text="Suspended accounts cannot log in"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'phone'
    REQUIRED_FIELDS = ['name']

    objects = UserManager()

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        ordering = ['-created_at']

    def clean(self):
        super().clean()
        if self.role in self.STAFF_ROLES and not self.branch_id:
            raise ValidationError({'branch': "Branch is required for admin, barber and washer"})

    def __str__(self):
        return f"{self.name or self.phone} ({self.role})"

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name

    @property
    def is_owner(self):
        return self.role == self.ROLE_OWNER

    @property
    def is_staff_member(self):
        return self.role in self.STAFF_ROLES

    @property
    def is_worker(self):
        return self.role in self.WORKER_ROLES

    @property
    def can_login(self):
        return self.is_active and not self.is_suspended

    @property
    def operation_kind(self):
        """Which operation list this user owns ('admin', 'worker' or None)"""
        if self.role == self.ROLE_ADMIN:
            return 'admin'
        if self.role in self.WORKER_ROLES:
            return 'worker'
        return None
