"""Permission model for the back office RBAC.

Defines the closed set of modules and actions, and the permission matrix
built from them.

A permission matrix maps module -> action -> bool:

    {
        "pages": {"view": True, "create": True},
        "media_library": {"view": True, "upload": True},
    }

Absent entries are treated as False. No action implies another: a matrix
granting ``pages.create`` does not grant ``pages.view``.

Permission string format: "module.action"
Examples:
  - pages.view
  - media_library.manage_folders
  - users.manage_roles
"""

import copy
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, NamedTuple, Optional, Set


class Module(str, Enum):
    """Back office modules that can be protected by permissions."""

    DASHBOARD = "dashboard"
    USERS = "users"

    # Site content
    PAGES = "pages"
    HERO_SECTIONS = "hero_sections"
    NAVIGATION = "navigation"
    HOME_SECTIONS = "home_sections"
    ANNOUNCEMENTS = "announcements"
    CONTENT_SECTIONS = "content_sections"
    STATISTICS = "statistics"
    BENEFITS = "benefits"
    CAMPUS_VIDEOS = "campus_videos"
    ACTIVITIES = "activities"
    ACTIVITY_CATEGORIES = "activity_categories"

    # Media and inquiries
    MEDIA_LIBRARY = "media_library"
    CONTACT_SUBMISSIONS = "contact_submissions"

    # Administration
    ACTIVITY_LOGS = "activity_logs"
    ROLES = "roles"
    SETTINGS = "settings"


class Action(str, Enum):
    """Actions that can be performed on modules."""

    # Standard CRUD actions
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    # Specialized actions
    MANAGE = "manage"
    UPLOAD = "upload"                  # Upload media files
    RESPOND = "respond"                # Respond to contact inquiries
    ASSIGN = "assign"                  # Assign inquiries to team members
    MANAGE_FOLDERS = "manage_folders"  # Create/edit/delete media folders
    MANAGE_ROLES = "manage_roles"      # Assign roles to users


PermissionMatrix = Dict[str, Dict[str, bool]]


class Permission(NamedTuple):
    """A permission is a combination of module and action."""
    module: Module
    action: Action

    def __str__(self) -> str:
        return f"{self.module.value}.{self.action.value}"

    @classmethod
    def from_string(cls, perm_str: str) -> "Permission":
        """Parse a permission string like 'pages.view'."""
        parts = perm_str.split(".")
        if len(parts) != 2:
            raise ValueError(f"Invalid permission format: {perm_str}")
        return cls(Module(parts[0]), Action(parts[1]))


CRUD_ACTIONS = frozenset([Action.VIEW, Action.CREATE, Action.UPDATE, Action.DELETE])

# Actions each module exposes in the role editor
MODULE_ACTIONS: Dict[Module, FrozenSet[Action]] = {
    Module.DASHBOARD: frozenset([Action.VIEW]),
    Module.USERS: CRUD_ACTIONS | {Action.MANAGE_ROLES},
    Module.PAGES: CRUD_ACTIONS,
    Module.HERO_SECTIONS: CRUD_ACTIONS,
    Module.NAVIGATION: CRUD_ACTIONS,
    Module.HOME_SECTIONS: CRUD_ACTIONS,
    Module.ANNOUNCEMENTS: CRUD_ACTIONS,
    Module.CONTENT_SECTIONS: CRUD_ACTIONS,
    Module.STATISTICS: CRUD_ACTIONS,
    Module.BENEFITS: CRUD_ACTIONS,
    Module.CAMPUS_VIDEOS: CRUD_ACTIONS,
    Module.ACTIVITIES: CRUD_ACTIONS,
    Module.ACTIVITY_CATEGORIES: CRUD_ACTIONS,
    Module.MEDIA_LIBRARY: frozenset([
        Action.VIEW, Action.UPLOAD, Action.DELETE, Action.MANAGE_FOLDERS,
    ]),
    Module.CONTACT_SUBMISSIONS: frozenset([
        Action.VIEW, Action.RESPOND, Action.ASSIGN, Action.DELETE,
    ]),
    Module.ACTIVITY_LOGS: frozenset([Action.VIEW]),
    Module.ROLES: CRUD_ACTIONS,
    Module.SETTINGS: frozenset([Action.VIEW, Action.UPDATE]),
}

ALL_MODULES: tuple[Module, ...] = tuple(Module)

_MODULE_KEYS = {m.value for m in Module}
_ACTION_KEYS = {a.value for a in Action}


def _key(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def get(matrix: Optional[Mapping], module: Any, action: Any) -> bool:
    """Look up a single grant. Anything missing or malformed is False."""
    if not isinstance(matrix, Mapping):
        return False
    actions = matrix.get(_key(module))
    if not isinstance(actions, Mapping):
        return False
    return actions.get(_key(action)) is True


def list_viewable_modules(matrix: Optional[Mapping]) -> Set[Module]:
    """Modules whose ``view`` action is granted. Unknown keys are ignored."""
    if not isinstance(matrix, Mapping):
        return set()
    names = (_key(name) for name in matrix)
    return {
        Module(name)
        for name in names
        if name in _MODULE_KEYS and get(matrix, name, Action.VIEW)
    }


def normalize_matrix(raw: Any) -> PermissionMatrix:
    """
    Validate and clean a matrix coming from user input.

    Unknown module or action names are rejected so that typos cannot
    create grants nobody checks. Modules with no actions are dropped.

    Raises:
        ValueError: If the shape is not module -> action -> bool
    """
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValueError("Permissions must be a mapping of modules to actions")

    cleaned: PermissionMatrix = {}
    for module, actions in raw.items():
        module = _key(module)
        if module not in _MODULE_KEYS:
            raise ValueError(f"Unknown permission module: {module}")
        if actions is None:
            continue
        if not isinstance(actions, Mapping):
            raise ValueError(f"Permissions for '{module}' must be a mapping of actions")
        entry: Dict[str, bool] = {}
        for action, granted in actions.items():
            action = _key(action)
            if action not in _ACTION_KEYS:
                raise ValueError(f"Unknown permission action: {module}.{action}")
            if not isinstance(granted, bool):
                raise ValueError(f"Permission {module}.{action} must be true or false")
            entry[action] = granted
        if entry:
            cleaned[module] = entry
    return cleaned


def copy_matrix(matrix: Optional[Mapping]) -> PermissionMatrix:
    """Return an independent copy of a matrix."""
    return copy.deepcopy(dict(matrix)) if matrix else {}


def full_matrix() -> PermissionMatrix:
    """Every action each module exposes, granted."""
    return {
        module.value: {action.value: True for action in sorted(actions, key=lambda a: a.value)}
        for module, actions in MODULE_ACTIONS.items()
    }


def build_matrix(*perms: tuple) -> PermissionMatrix:
    """Build a matrix from (Module, Action) tuples."""
    matrix: PermissionMatrix = {}
    for module, action in perms:
        matrix.setdefault(module.value, {})[action.value] = True
    return matrix


def granted_permissions(matrix: Optional[Mapping]) -> list[str]:
    """Flatten a matrix into sorted "module.action" strings for granted entries."""
    if not isinstance(matrix, Mapping):
        return []
    return sorted(
        f"{module}.{action}"
        for module, actions in matrix.items()
        if isinstance(actions, Mapping)
        for action, granted in actions.items()
        if granted is True
    )


def get_permissions_for_module(module: Module) -> list[str]:
    """Get all valid permission strings for a module."""
    return sorted(
        str(Permission(module, action))
        for action in MODULE_ACTIONS.get(module, frozenset())
    )


def get_all_permissions() -> list[str]:
    """Get all valid permission strings."""
    return [p for module in MODULE_ACTIONS for p in get_permissions_for_module(module)]
