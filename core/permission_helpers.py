from typing import Optional, Union

from fastapi import Depends, HTTPException

from core.permissions import FALLBACK_ROLE, ROLE_PERMISSIONS, VIEW_ACCESS
from dependencies.auth import get_current_session
from models.auth import Capabilities, Session
from models.enums import EntityKind, Role, View


# -----------------------------------------------------
# Role resolution: anything unknown is the least privileged role
# -----------------------------------------------------
def resolve_role(role: Optional[Union[str, Role]]) -> Role:
    value = role.value if isinstance(role, Role) else role
    if isinstance(value, str) and value in ROLE_PERMISSIONS:
        return Role(value)
    return Role(FALLBACK_ROLE)


def _value(item) -> str:
    return item.value if hasattr(item, "value") else str(item)


# -----------------------------------------------------
# Pure capability checks
# -----------------------------------------------------
def can_access_view(role, view) -> bool:
    """Unknown view names are denied."""
    allowed = VIEW_ACCESS.get(_value(view))
    if allowed is None:
        return False
    return resolve_role(role).value in allowed


def can_perform(role, action: str, entity) -> bool:
    permission = f"{_value(entity)}:{action}"
    return permission in ROLE_PERMISSIONS[resolve_role(role).value]


def capabilities_for(role) -> Capabilities:
    resolved = resolve_role(role)
    return Capabilities(
        role=resolved,
        views=[v.value for v in View if can_access_view(resolved, v)],
        permissions=sorted(ROLE_PERMISSIONS[resolved.value]),
        is_admin=resolved is Role.admin,
        is_manager=resolved is Role.manager,
        is_staff=resolved in (Role.admin, Role.manager),
    )


def is_admin(session: Session) -> bool:
    return resolve_role(session.role) is Role.admin


def is_staff(session: Session) -> bool:
    return resolve_role(session.role) in (Role.admin, Role.manager)


# -----------------------------------------------------
# FastAPI dependency wrappers
# -----------------------------------------------------
def requires_view(view: View):
    """
    Usage:
        @router.get("", dependencies=[Depends(requires_view(View.units))])
    """

    def dependency(session: Session = Depends(get_current_session)):
        if not can_access_view(session.role, view):
            raise HTTPException(
                status_code=403,
                detail=f"Role '{session.role}' cannot open the '{view.value}' view",
            )
        return session

    return dependency


def requires_permission(action: str, entity: EntityKind):
    """
    Usage:
        @router.post("", dependencies=[Depends(requires_permission("create", EntityKind.units))])
    """

    def dependency(session: Session = Depends(get_current_session)):
        if not can_perform(session.role, action, entity):
            raise HTTPException(
                status_code=403,
                detail=f"Insufficient permissions: '{entity.value}:{action}' required",
            )
        return session

    return dependency
