# configmgr/permissions.py
#
# DRF permissions backed by the admin allow-list. Every admin-only request is
# re-checked here against the stored list, and only a verified identity
# (confirmed email or Google account) can hold admin rights.
#
from rest_framework.permissions import BasePermission, SAFE_METHODS

from accounts.identity import is_verified
from .access_control import AccessControl


def request_is_admin(request) -> bool:
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return False
    return is_verified(user) and AccessControl().is_admin(user.email)


class IsAllowListedAdmin(BasePermission):
    """
    Only logged-in users whose email is on the admin allow-list.
    """
    message = "Administrator access required."

    def has_permission(self, request, view):
        return request_is_admin(request)


class IsAdminOrReadOnly(BasePermission):
    """
    Read: anyone
    Write: allow-listed admins only
    """
    message = "Administrator access required."

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return request_is_admin(request)
