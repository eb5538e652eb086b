"""
Role policy: who may do what inside an organization.

Roles are totally ordered: member < admin < owner. Every function here is
pure; callers resolve the acting user's role first and treat "not a member"
as having no permissions at all.
"""

from __future__ import annotations

from org_membership_shared.schemas.common import ROLE_RANK, Role


def can_manage_organization(role: Role) -> bool:
    """Update organization metadata."""
    return role in (Role.OWNER, Role.ADMIN)


def can_delete_organization(role: Role) -> bool:
    return role == Role.OWNER


def can_manage_members(role: Role) -> bool:
    """Invite (add) new members."""
    return role in (Role.OWNER, Role.ADMIN)


def can_change_role_to(acting: Role, new_role: Role) -> bool:
    """Assign ``new_role`` to someone.

    Members change nothing. Nobody assigns above their own rank, and only
    owners hand out (or take away) ownership.
    """
    if acting == Role.MEMBER:
        return False
    if new_role == Role.OWNER:
        return acting == Role.OWNER
    return ROLE_RANK[new_role] <= ROLE_RANK[acting]


def can_remove_member(acting: Role, target: Role) -> bool:
    """Remove (or otherwise modify) a member holding ``target``.

    Self-removal is decided by the caller and never reaches this check.
    """
    if acting == Role.OWNER:
        return True
    if acting == Role.ADMIN:
        return target == Role.MEMBER
    return False
