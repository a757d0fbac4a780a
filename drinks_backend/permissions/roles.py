# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS
# =========================================================
# Job roles in the store. Customers share the same user table.
ROLE_ADMIN = "admin"
ROLE_KITCHEN = "kitchen"
ROLE_PDV = "pdv"  # point of sale (counter)
ROLE_MOTOBOY = "motoboy"
ROLE_CUSTOMER = "customer"

ROLE_CHOICES = [
    (ROLE_ADMIN, "Admin"),
    (ROLE_KITCHEN, "Kitchen"),
    (ROLE_PDV, "Point of sale"),
    (ROLE_MOTOBOY, "Motoboy"),
    (ROLE_CUSTOMER, "Customer"),
]

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_KITCHEN,
    ROLE_PDV,
    ROLE_MOTOBOY,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_ORDERS_VIEW = "orders.view"
CAP_ORDERS_CREATE = "orders.create"
CAP_ORDERS_TRANSITION = "orders.transition"
CAP_ORDERS_ASSIGN = "orders.assign"
CAP_ORDERS_ADJUST_FEE = "orders.adjust_fee"

CAP_COURIERS_MANAGE = "couriers.manage"

CAP_STOCK_VIEW = "stock.view"
CAP_STOCK_EDIT = "stock.edit"

CAP_SETTINGS_MANAGE = "settings.manage"

ALL_CAPABILITIES = {
    CAP_ORDERS_VIEW,
    CAP_ORDERS_CREATE,
    CAP_ORDERS_TRANSITION,
    CAP_ORDERS_ASSIGN,
    CAP_ORDERS_ADJUST_FEE,
    CAP_COURIERS_MANAGE,
    CAP_STOCK_VIEW,
    CAP_STOCK_EDIT,
    CAP_SETTINGS_MANAGE,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_KITCHEN: {
        CAP_ORDERS_VIEW,
        CAP_ORDERS_TRANSITION,
    },
    ROLE_PDV: {
        CAP_ORDERS_VIEW,
        CAP_ORDERS_CREATE,
        CAP_ORDERS_TRANSITION,
        CAP_ORDERS_ADJUST_FEE,
    },
    ROLE_MOTOBOY: {
        CAP_ORDERS_VIEW,
        CAP_ORDERS_TRANSITION,
        CAP_ORDERS_ASSIGN,
    },
    ROLE_CUSTOMER: {
        CAP_ORDERS_CREATE,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def capabilities_for(user) -> set[str]:
    """
    Capabilities granted to a user by role.
    Superusers get everything regardless of role.
    """
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


def user_has_capability(user, capability: str) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return capability in capabilities_for(user)


# =========================================================
# Base Role Permission (Internal Use)
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Base permission for role-based access control.

    Subclasses must define:
    - allowed_roles (set)
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated:
            return False

        user_role = get_user_role(user)
        if not user_role:
            return False

        return user_role in self.allowed_roles


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_ORDERS_TRANSITION
    """

    def has_permission(self, request, view):
        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default when the view forgot to declare one
            return False

        return user_has_capability(request.user, required)


class HasAnyCapability(BasePermission):
    """
    Require ANY capability from a set.

    Usage:
        view.required_any_capabilities = {CAP_ORDERS_VIEW, CAP_COURIERS_MANAGE}
    """

    def has_permission(self, request, view):
        required = getattr(view, "required_any_capabilities", None)
        if not required:
            return False

        return any(user_has_capability(request.user, cap) for cap in set(required))


# =========================================================
# Role Permissions
# =========================================================
class IsAdmin(BaseRolePermission):
    allowed_roles = {ROLE_ADMIN}


class IsKitchen(BaseRolePermission):
    allowed_roles = {ROLE_KITCHEN}


class IsPdv(BaseRolePermission):
    allowed_roles = {ROLE_PDV}


class IsMotoboy(BaseRolePermission):
    allowed_roles = {ROLE_MOTOBOY}


class IsStaff(BaseRolePermission):
    allowed_roles = STAFF_ROLES
