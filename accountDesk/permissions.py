"""
Role policy for the admin surface.

Every role check in the project goes through ``has_permission``; the DRF
permission classes at the bottom of this module are thin wrappers over it.
"""
from rest_framework.permissions import BasePermission

from nikahFirst.exceptions import Forbidden, Unauthorized
from .models import CustomUser


ROLE_HIERARCHY = {
    CustomUser.USER: 0,
    CustomUser.SUPPORT_AGENT: 1,
    CustomUser.CONTENT_EDITOR: 2,
    CustomUser.CONSULTANT: 2,
    CustomUser.SUPERVISOR: 3,
    CustomUser.SUPER_ADMIN: 4,
}

ADMIN_ROLES = (
    CustomUser.SUPPORT_AGENT,
    CustomUser.CONTENT_EDITOR,
    CustomUser.CONSULTANT,
    CustomUser.SUPERVISOR,
    CustomUser.SUPER_ADMIN,
)

_SUPERS = (CustomUser.SUPER_ADMIN, CustomUser.SUPERVISOR)

PERMISSIONS = {
    # users
    'view_users': (
        CustomUser.SUPER_ADMIN, CustomUser.SUPERVISOR,
        CustomUser.CONTENT_EDITOR, CustomUser.SUPPORT_AGENT,
    ),
    'view_user_details': _SUPERS,
    'ban_users': _SUPERS,
    'suspend_users': _SUPERS,
    'reactivate_users': _SUPERS,

    # role changes (nobody may promote to super admin)
    'change_role_to_super_admin': (),
    'change_role_to_supervisor': (CustomUser.SUPER_ADMIN,),
    'change_role_to_content_editor': _SUPERS,
    'change_role_to_consultant': _SUPERS,
    'change_role_to_support_agent': _SUPERS,
    'change_role_to_user': _SUPERS,

    # subscriptions
    'manage_subscriptions': _SUPERS,

    # system
    'manage_global_settings': (CustomUser.SUPER_ADMIN,),

    # credits & wallets
    'adjust_credits': _SUPERS,
    'view_wallet_details': _SUPERS,
    'review_topups': _SUPERS,
    'view_transactions': (
        CustomUser.SUPER_ADMIN, CustomUser.SUPERVISOR,
        CustomUser.CONTENT_EDITOR, CustomUser.SUPPORT_AGENT,
    ),
    'delete_transactions': (CustomUser.SUPER_ADMIN,),
}


def has_permission(role, permission):
    if not role:
        return False
    return role in PERMISSIONS.get(permission, ())


def is_admin(role):
    return role in ADMIN_ROLES


def is_supervisor(role):
    return role in _SUPERS


def role_level(role):
    return ROLE_HIERARCHY.get(role, -1)


def can_change_role(actor_role, target_role):
    if target_role not in ROLE_HIERARCHY:
        return False
    return has_permission(actor_role, f'change_role_to_{target_role.lower()}')


# -----------------------------
# DRF permission classes
# -----------------------------
class RolePermission(BasePermission):
    """
    Anonymous callers fall through to DRF's NotAuthenticated (401).
    Authenticated callers without the role get ``denied_exception``.
    """
    permission = None
    denied_exception = Unauthorized
    denied_message = None

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if has_permission(getattr(user, 'role', None), self.permission):
            return True
        raise self.denied_exception(self.denied_message)


class CanAdjustCredits(RolePermission):
    permission = 'adjust_credits'


class CanViewWalletDetails(RolePermission):
    permission = 'view_wallet_details'


class CanReviewTopUps(RolePermission):
    permission = 'review_topups'


class CanViewUserDetails(RolePermission):
    permission = 'view_user_details'


class CanManageGlobalSettings(RolePermission):
    permission = 'manage_global_settings'


class CanViewTransactions(RolePermission):
    permission = 'view_transactions'
    denied_exception = Forbidden


class CanDeleteTransactions(RolePermission):
    permission = 'delete_transactions'
    denied_exception = Forbidden
    denied_message = 'Only Super Admin can delete transactions'
