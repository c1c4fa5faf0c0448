"""
Role resolution for parsed SAML assertions.

This module decides which of the roles granted by a SAML assertion should be
assumed. It has no side effects beyond debug logging.
"""

import logging
from typing import Callable, Optional, Sequence

from .errors import AmbiguousRoleError, RoleNotFoundError
from .types import Role, RoleSet

logger = logging.getLogger(__name__)

RoleChooser = Callable[[Sequence[Role]], Role]
"""Caller-supplied callback picking one role out of several (e.g. an interactive prompt)."""


def resolve_roles(
    role_set: RoleSet,
    requested_role_arn: Optional[str] = None,
    log: Optional[logging.Logger] = None
) -> RoleSet:
    """
    Narrow a role set down to the requested role.

    Args:
        role_set: Roles and assertion parsed from a SAML response
        requested_role_arn: Role ARN to select (exact, case-sensitive match);
            None keeps every role so the caller can disambiguate
        log: Logger for diagnostic events (defaults to the module logger)

    Returns:
        The unchanged role set when no role was requested, otherwise a role
        set holding only the requested role and the same assertion

    Raises:
        RoleNotFoundError: If the requested role is not in the role set
    """
    log = log or logger

    if requested_role_arn is None:
        log.debug("A custom role ARN has not been set so returning all parsed roles")
        return role_set

    for role in role_set.roles:
        if role.role_arn == requested_role_arn:
            log.debug(
                "Found custom role ARN '%s' with principal ARN '%s'",
                role.role_arn,
                role.principal_arn,
            )
            return RoleSet(roles=(role,), saml_assertion=role_set.saml_assertion)

    log.debug("Role ARN '%s' not found among %d parsed roles", requested_role_arn, len(role_set.roles))
    raise RoleNotFoundError(requested_role_arn, role_set.roles)


def select_role(role_set: RoleSet, choose: Optional[RoleChooser] = None) -> Role:
    """
    Pick the single role to assume.

    Args:
        role_set: Resolved role set
        choose: Callback used when more than one role remains

    Returns:
        The only role, or the one picked by the callback

    Raises:
        RoleNotFoundError: If the set is empty or the callback returns a role outside the set
        AmbiguousRoleError: If several roles remain and no callback was given
    """
    roles = role_set.roles
    if not roles:
        raise RoleNotFoundError(None, roles)
    if len(roles) == 1:
        return roles[0]
    if choose is None:
        raise AmbiguousRoleError(roles)

    chosen = choose(roles)
    if chosen not in roles:
        raise RoleNotFoundError(chosen.role_arn, roles)
    return chosen
