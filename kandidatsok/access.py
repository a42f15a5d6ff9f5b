"""
Access policy for candidate lookup and search.

Every operation has a fixed allow-list of roles. A caller is allowed when
they hold at least one role on that list; an empty role set is always denied.
Decisions are computed per request and never cached, since role membership
can change between calls.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Tuple

from .logger import get_logger


class Role(str, Enum):
    ARBEIDSGIVERRETTET = "arbeidsgiverrettet"  # business-facing caseworker
    JOBBSOKERRETTET = "jobbsokerrettet"        # job-seeker-facing caseworker
    MODIA_GENERELL = "modia_generell"          # general caseworker
    UTVIKLER = "utvikler"                      # developer


class Operation(str, Enum):
    LOOKUP_CV = "lookup-cv"
    LOOKUP_SUMMARY = "lookup-summary"
    SEARCH = "search"


POLICY: Dict[Operation, FrozenSet[Role]] = {
    Operation.LOOKUP_CV: frozenset({Role.ARBEIDSGIVERRETTET, Role.UTVIKLER}),
    Operation.LOOKUP_SUMMARY: frozenset({Role.ARBEIDSGIVERRETTET, Role.UTVIKLER}),
    Operation.SEARCH: frozenset({Role.ARBEIDSGIVERRETTET, Role.UTVIKLER}),
}


@dataclass(frozen=True)
class Caller:
    """An already authenticated caller."""

    nav_ident: str
    roles: FrozenSet[Role] = frozenset()


@dataclass(frozen=True)
class AccessDecision:
    operation: Operation
    roles: FrozenSet[Role]
    allowed: bool

    def __bool__(self) -> bool:
        return self.allowed


def decide(operation: Operation, roles: Iterable[Role]) -> AccessDecision:
    """
    Decide whether a role set may perform an operation.

    Args:
        operation: The operation being requested
        roles: Roles held by the caller

    Returns:
        AccessDecision carrying the outcome and its inputs
    """
    held = frozenset(roles)
    allowed = bool(held & POLICY[operation])
    return AccessDecision(operation=operation, roles=held, allowed=allowed)


def parse_roles(labels: Iterable[str]) -> Tuple[FrozenSet[Role], Tuple[str, ...]]:
    """
    Map role labels to roles.

    Returns:
        Tuple of (known roles, unknown labels)
    """
    known = set()
    unknown = []
    for label in labels:
        key = label.strip().lower()
        try:
            known.add(Role(key))
        except ValueError:
            unknown.append(label)
    if unknown:
        get_logger().warning("Ignoring unknown role labels", labels=unknown)
    return frozenset(known), tuple(unknown)
