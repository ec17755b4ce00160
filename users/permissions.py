# users/permissions.py
"""
Role gates evaluated on the bearer-token claims.

The claims are trusted as-is: no permission here reads the user table, so a
request with the wrong role is turned away before the view touches the store.
"""
from rest_framework import permissions
from rest_framework.exceptions import NotAuthenticated


class RoleNotAllowed(NotAuthenticated):
    """Token is valid but its role is not allowed on this endpoint (401)"""
    default_detail = 'Unauthorized'
    default_code = 'role_not_allowed'


def caller_claim(user, claim):
    """Read a claim of the current token (TokenUser) or a real user attribute"""
    token = getattr(user, 'token', None)
    if token is not None:
        return token.get(claim)
    return getattr(user, claim, None)


def caller_role(user):
    return caller_claim(user, 'role')


def caller_id(user):
    """Caller id as a string (token claims carry it as int or str)"""
    value = getattr(user, 'id', None)
    return str(value) if value is not None else None


class HasRole(permissions.BasePermission):
    """
    Base class: subclasses list the roles allowed through.
    """
    allowed_roles = ()
    message = 'Unauthorized'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            raise NotAuthenticated('Unauthorized')
        if caller_role(user) not in self.allowed_roles:
            raise RoleNotAllowed(self.message)
        return True


class IsOwner(HasRole):
    allowed_roles = ('owner',)


class IsAdminRole(HasRole):
    allowed_roles = ('admin',)


class IsOwnerOrAdmin(HasRole):
    allowed_roles = ('owner', 'admin')


class IsOperationActor(HasRole):
    """Roles that may move operations through the lifecycle"""
    allowed_roles = ('owner', 'admin', 'barber', 'washer')
    message = 'Unauthorized - only workers and owners can confirm operations'
