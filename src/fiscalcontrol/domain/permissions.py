"""Static role capability table."""

from types import MappingProxyType
from typing import Mapping

from fiscalcontrol.domain.entities import Action, Actor, Role
from fiscalcontrol.domain.errors import ForbiddenError, action_forbidden

_GRANTS = {
    Role.ADMIN: {Action.REGISTER, Action.APPROVE, Action.REJECT, Action.READ},
    Role.PAYER: {Action.REGISTER, Action.READ},
    Role.VIEWER: {Action.APPROVE, Action.REJECT, Action.READ},
}

# (role, action) -> allowed, spelled out for every pair
CAPABILITIES: Mapping[tuple[Role, Action], bool] = MappingProxyType(
    {(role, action): action in _GRANTS[role] for role in Role for action in Action}
)


def is_allowed(role: Role, action: Action) -> bool:
    """Return True if the role may perform the action."""
    return CAPABILITIES.get((role, action), False)


def require_permission(actor: Actor, action: Action) -> None:
    """Ensure the actor's role may perform the action.

    Raises:
        ForbiddenError: If the role lacks the capability
    """
    if not is_allowed(actor.role, action):
        raise ForbiddenError(action_forbidden(actor.role.value, action.value))
