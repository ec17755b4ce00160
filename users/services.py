# users/services.py
import logging
from django.db import transaction
from rest_framework_simplejwt.tokens import RefreshToken
from .models import User
from .utils import to_e164

logger = logging.getLogger(__name__)


# ==============================
# Tokens
# ==============================

def issue_tokens(user: User) -> dict:
    """
    Access/refresh pair carrying the claims the dashboards and the role
    gates rely on: user_id, name, phone, role, branch_id.
    """
    refresh = RefreshToken.for_user(user)
    refresh['name'] = user.name
    refresh['phone'] = user.phone
    refresh['role'] = user.role
    refresh['branch_id'] = user.branch_id
    return {
        "token": str(refresh.access_token),
        "refresh": str(refresh),
    }


def user_payload(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "phone": user.phone,
        "role": user.role,
        "branchId": user.branch_id,
    }


# ==============================
# Registration / login
# ==============================

def register_user(name: str, phone: str, password: str, role: str = 'customer', branch=None):
    """
    Create a user.
    Returns {"ok": {...}} or {"error": (code, detail)}
    """
    if User.objects.filter(phone=phone).exists():
        return {"error": ("phone_taken", "User with this phone already exists")}

    if role in User.STAFF_ROLES and branch is None:
        return {"error": ("branch_required", "Branch is required for admin, barber and washer")}

    with transaction.atomic():
        user = User.objects.create_user(
            phone,
            password,
            role=role,
            name=name,
            branch=branch if role in User.STAFF_ROLES else None,
        )

    logger.info(f"Registered {user.role} {user.phone}")
    return {"ok": {"user": user_payload(user)}}


def login_with_phone(phone: str, password: str):
    """
    Returns {"ok": {token, refresh, user}} or {"error": (code, detail, http_status)}
    """
    try:
        phone = to_e164(phone)
    except ValueError:
        pass

    try:
        user = User.objects.get(phone=phone)
    except User.DoesNotExist:
        return {"error": ("user_not_found", "User not found", 404)}

    if not user.check_password(password):
        return {"error": ("invalid_credentials", "Invalid credentials", 401)}

    if user.is_suspended:
        return {"error": ("account_suspended", "Account is suspended", 403)}

    if not user.is_active:
        return {"error": ("account_disabled", "Account is disabled", 403)}

    return {"ok": {**issue_tokens(user), "user": user_payload(user)}}


# ==============================
# Account state (owner actions)
# ==============================

def reactivate_user(user: User) -> User:
    user.is_active = True
    user.is_suspended = False
    user.save(update_fields=['is_active', 'is_suspended', 'updated_at'])
    logger.info(f"Reactivated {user.phone}")
    return user


def suspend_user(user: User) -> User:
    user.is_suspended = True
    user.save(update_fields=['is_suspended', 'updated_at'])
    logger.info(f"Suspended {user.phone}")
    return user
