"""
Principals and Directories
==========================
The external collaborators the OTP challenge reads from: the
authenticating principal, the inbound request carrying the challenge
response, and the directory of group attributes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Protocol

ANONYMOUS_IDENTIFIER = ""


class InboundRequest(Protocol):
    """Raw request accessor used to read the challenge-response field."""

    def get_parameter(self, name: str) -> Optional[str]:
        ...


@dataclass(frozen=True)
class ParameterRequest:
    """Request backed by an already-parsed parameter mapping."""
    params: Mapping[str, str] = field(default_factory=dict)

    def get_parameter(self, name: str) -> Optional[str]:
        return self.params.get(name)


@dataclass(frozen=True)
class Principal:
    """An authenticated user awaiting the OTP step."""
    identifier: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    groups: FrozenSet[str] = frozenset()

    @property
    def is_anonymous(self) -> bool:
        return not self.identifier


@dataclass(frozen=True)
class ResolvedGroup:
    """A group membership together with its attributes."""
    identifier: str
    attributes: Mapping[str, str] = field(default_factory=dict)


def sort_groups(groups: Iterable[ResolvedGroup]) -> List[ResolvedGroup]:
    """Order groups by identifier, the precedence order for attribute lookups."""
    return sorted(groups, key=lambda group: group.identifier)


class GroupDirectory(ABC):
    """Source of per-group attribute maps."""

    @abstractmethod
    def get_attributes(self, group_id: str) -> Optional[Mapping[str, str]]:
        """Return the group's attributes, or None if the group is unknown."""

    def resolve_groups(self, principal: Principal) -> List[ResolvedGroup]:
        """Look up every group of the principal, skipping unknown groups."""
        resolved = []
        for group_id in principal.groups:
            attributes = self.get_attributes(group_id)
            if attributes is None:
                continue
            resolved.append(ResolvedGroup(group_id, attributes))
        return sort_groups(resolved)


class InMemoryGroupDirectory(GroupDirectory):
    """Dict-backed group directory."""

    def __init__(self, groups: Optional[Mapping[str, Mapping[str, str]]] = None):
        self._groups: Dict[str, Mapping[str, str]] = dict(groups or {})

    def get_attributes(self, group_id: str) -> Optional[Mapping[str, str]]:
        return self._groups.get(group_id)

    def set_attributes(self, group_id: str, attributes: Mapping[str, str]) -> None:
        self._groups[group_id] = attributes
