"""RBAC (Role-Based Access Control) module for the back office.

This module defines the permission matrix, the resolution of a principal's
effective permissions, and the access gate every protected operation uses.
"""

from .permissions import Module, Action, Permission, PermissionMatrix, MODULE_ACTIONS, ALL_MODULES
from .resolver import effective_permissions, has_permission, accessible_modules, is_super_admin, is_admin
from .gate import Decision, AccessGate, check, require_access

__all__ = [
    "Module",
    "Action",
    "Permission",
    "PermissionMatrix",
    "MODULE_ACTIONS",
    "ALL_MODULES",
    "effective_permissions",
    "has_permission",
    "accessible_modules",
    "is_super_admin",
    "is_admin",
    "Decision",
    "AccessGate",
    "check",
    "require_access",
]
