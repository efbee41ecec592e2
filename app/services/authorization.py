"""Capability checks for board users.

Pure functions of (user, story); no state, no side effects, never raise. Callers turn a
False into an AuthorizationError. Roles form a flat two-tier model: manager and admin are
privileged, developer is not. An absent user is denied every capability.
"""

from typing import Protocol

from app.models.user import ROLE_ADMIN, ROLE_MANAGER

PRIVILEGED_ROLES: frozenset[str] = frozenset({ROLE_MANAGER, ROLE_ADMIN})


class Actor(Protocol):
    id: int
    role: str


class OwnedStory(Protocol):
    owner_id: int | None


def is_privileged(user: Actor | None) -> bool:
    """True if the user holds a manager or admin role."""
    if user is None:
        return False
    return (user.role or "").strip().lower() in PRIVILEGED_ROLES


def can_edit_story(user: Actor | None, story: OwnedStory) -> bool:
    """Privileged users edit any story; others only stories they own."""
    if user is None:
        return False
    if is_privileged(user):
        return True
    return story.owner_id is not None and story.owner_id == user.id


def can_delete_story(user: Actor | None) -> bool:
    return is_privileged(user)


def can_archive_story(user: Actor | None) -> bool:
    return is_privileged(user)


def can_view_analytics(user: Actor | None) -> bool:
    return is_privileged(user)
