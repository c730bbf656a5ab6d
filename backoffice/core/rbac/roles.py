"""System role and preset definitions for the back office.

System roles are seeded once and can never be edited or deleted:
1. Content Manager - Site content, media and activity logs
2. Support Staff - Contact inquiries
3. Media Manager - Media library and campus videos
4. Analytics Viewer - Read-only dashboards and statistics
5. Viewer - Dashboard only

Super admin is not a role; it is a principal role type that bypasses the
permission matrix entirely.
"""

from typing import Dict

from .permissions import Action, Module, PermissionMatrix, build_matrix, copy_matrix


def _crud(module: Module) -> tuple:
    return (
        (module, Action.VIEW),
        (module, Action.CREATE),
        (module, Action.UPDATE),
        (module, Action.DELETE),
    )


VIEWER_PERMISSIONS = build_matrix(
    (Module.DASHBOARD, Action.VIEW),
)

CONTENT_MANAGER_PERMISSIONS = build_matrix(
    (Module.DASHBOARD, Action.VIEW),
    *_crud(Module.PAGES),
    *_crud(Module.HERO_SECTIONS),
    *_crud(Module.NAVIGATION),
    *_crud(Module.HOME_SECTIONS),
    *_crud(Module.ANNOUNCEMENTS),
    *_crud(Module.CONTENT_SECTIONS),
    *_crud(Module.STATISTICS),
    *_crud(Module.BENEFITS),
    *_crud(Module.CAMPUS_VIDEOS),

    # Media library
    (Module.MEDIA_LIBRARY, Action.VIEW),
    (Module.MEDIA_LIBRARY, Action.UPLOAD),
    (Module.MEDIA_LIBRARY, Action.DELETE),
    (Module.MEDIA_LIBRARY, Action.MANAGE_FOLDERS),

    (Module.ACTIVITY_LOGS, Action.VIEW),
)

SUPPORT_STAFF_PERMISSIONS = build_matrix(
    (Module.DASHBOARD, Action.VIEW),
    (Module.CONTACT_SUBMISSIONS, Action.VIEW),
    (Module.CONTACT_SUBMISSIONS, Action.RESPOND),
    (Module.CONTACT_SUBMISSIONS, Action.ASSIGN),
    (Module.ACTIVITY_LOGS, Action.VIEW),
)

MEDIA_MANAGER_PERMISSIONS = build_matrix(
    (Module.DASHBOARD, Action.VIEW),
    (Module.MEDIA_LIBRARY, Action.VIEW),
    (Module.MEDIA_LIBRARY, Action.UPLOAD),
    (Module.MEDIA_LIBRARY, Action.DELETE),
    (Module.MEDIA_LIBRARY, Action.MANAGE_FOLDERS),
    *_crud(Module.CAMPUS_VIDEOS),
)

ANALYTICS_VIEWER_PERMISSIONS = build_matrix(
    (Module.DASHBOARD, Action.VIEW),
    (Module.ACTIVITY_LOGS, Action.VIEW),
    (Module.STATISTICS, Action.VIEW),
    (Module.CONTACT_SUBMISSIONS, Action.VIEW),
)


# System roles configuration
SYSTEM_ROLES: Dict[str, dict] = {
    "content_manager": {
        "name": "Content Manager",
        "description": "Manages site content, media and navigation",
        "permissions": CONTENT_MANAGER_PERMISSIONS,
    },
    "support_staff": {
        "name": "Support Staff",
        "description": "Responds to and assigns contact inquiries",
        "permissions": SUPPORT_STAFF_PERMISSIONS,
    },
    "media_manager": {
        "name": "Media Manager",
        "description": "Manages the media library and campus videos",
        "permissions": MEDIA_MANAGER_PERMISSIONS,
    },
    "analytics_viewer": {
        "name": "Analytics Viewer",
        "description": "Read-only access to dashboards, statistics and activity logs",
        "permissions": ANALYTICS_VIEWER_PERMISSIONS,
    },
    "viewer": {
        "name": "Viewer",
        "description": "Dashboard overview only",
        "permissions": VIEWER_PERMISSIONS,
    },
}


# Starting points offered by the role editor
PERMISSION_PRESETS: Dict[str, PermissionMatrix] = {
    "view_only": VIEWER_PERMISSIONS,
    "content_manager": CONTENT_MANAGER_PERMISSIONS,
    "support_staff": SUPPORT_STAFF_PERMISSIONS,
    "media_manager": MEDIA_MANAGER_PERMISSIONS,
    "analytics_viewer": ANALYTICS_VIEWER_PERMISSIONS,
}


def get_system_role_permissions(role_key: str) -> PermissionMatrix:
    """Get an independent copy of a system role's matrix."""
    role = SYSTEM_ROLES.get(role_key)
    if not role:
        raise ValueError(f"Unknown system role: {role_key}")
    return copy_matrix(role["permissions"])


def get_preset(name: str) -> PermissionMatrix:
    """Get an independent copy of a preset matrix."""
    if name not in PERMISSION_PRESETS:
        raise ValueError(f"Unknown permission preset: {name}")
    return copy_matrix(PERMISSION_PRESETS[name])
