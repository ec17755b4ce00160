# users/managers.py
from django.contrib.auth.models import BaseUserManager

from .utils import to_e164


class UserManager(BaseUserManager):
    """
    Users are identified by phone for every role, stored in E.164 form.
    """

    def _create_user(self, phone, password, role='customer', **extra_fields):
        if not phone:
            raise ValueError('The phone must be set')
        phone = to_e164(phone)

        user = self.model(phone=phone, role=role, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, phone, password=None, role='customer', **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(phone, password, role, **extra_fields)

    def create_superuser(self, phone=None, password=None, **extra_fields):
        # Superusers manage the Django admin; they act as owners in the API
        extra_fields.pop('role', None)

        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self._create_user(phone, password, 'owner', **extra_fields)

    def create_owner(self, phone, password, **extra_fields):
        return self.create_user(phone, password, 'owner', **extra_fields)

    def create_staff(self, phone, password, role, branch, **extra_fields):
        """Create an admin, barber or washer attached to a branch"""
        if role not in ('admin', 'barber', 'washer'):
            raise ValueError(f'Invalid staff role: {role}')
        if branch is None:
            raise ValueError('Staff users need a branch')
        return self.create_user(phone, password, role, branch=branch, **extra_fields)
