"""Request and response schemas for role and access endpoints."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel


class RoleCloneRequest(BaseModel):
    name: str
    description: Optional[str] = None


class RoleAssignmentRequest(BaseModel):
    role_type: str
    role_id: Optional[str] = None
    custom_permissions: Optional[Dict[str, Any]] = None


class StatusUpdateRequest(BaseModel):
    status: str


class ModuleActionInfo(BaseModel):
    permission: str
    module: str
    action: str


class PermissionCatalog(BaseModel):
    modules: List[str]
    actions: List[str]
    permissions: List[ModuleActionInfo]
    presets: Dict[str, Dict[str, Dict[str, bool]]]


class AccessDecisionResponse(BaseModel):
    module: str
    action: str
    allowed: bool
    reason: Optional[str] = None


class PermissionSummaryResponse(BaseModel):
    user_id: str
    status: str
    role_type: str
    is_super_admin: bool
    modules: List[str]
    permissions: List[str]
