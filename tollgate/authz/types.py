"""
Authorization types for tollgate.
Implements requests, policies, conditions and decisions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple


class Effect(Enum):
    """Policy effect: allow or deny."""
    ALLOW = "allow"
    DENY = "deny"


# Constants for convenience
Allow = Effect.ALLOW
Deny = Effect.DENY


def parse_effect(value: Any, error: Callable[[Any], Exception]) -> Effect:
    """
    Parse an effect name ("allow"/"deny", any case) into an Effect.

    Args:
        value: An Effect or its name
        error: Builds the exception raised for an unknown value

    Returns:
        Effect
    """
    if isinstance(value, Effect):
        return value

    if isinstance(value, str):
        try:
            return Effect(value.strip().lower())
        except ValueError:
            pass

    raise error(value)


@dataclass(frozen=True)
class Request:
    """
    Access request evaluated by an enforcer.

    ``metadata`` carries contextual values (client address, MFA flag, ...)
    looked up by condition key name. It is exposed read-only.
    """
    role: str
    action: str
    resource: str
    scope: str
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'metadata', MappingProxyType(dict(self.metadata)))

    def lookup(self, key: str) -> Any:
        """Return the metadata value stored under key, or None."""
        return self.metadata.get(key)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'role': self.role,
            'action': self.action,
            'resource': self.resource,
            'scope': self.scope,
            'metadata': dict(self.metadata)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Request':
        """Create from dictionary representation."""
        return cls(
            role=data['role'],
            action=data['action'],
            resource=data['resource'],
            scope=data['scope'],
            metadata=data.get('metadata', {})
        )


class Condition(ABC):
    """
    Named predicate over one contextual metadata value.

    Implementations are configured once when built and must not change
    afterwards. ``meets`` must never raise: a value of the wrong type is
    simply not a match.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable identity of the condition variant, e.g. ``"bool"``."""
        pass

    @abstractmethod
    def meets(self, value: Any, request: Request) -> bool:
        """
        Evaluate the condition against a metadata value.

        Args:
            value: The metadata value looked up under the condition key
            request: The request being evaluated

        Returns:
            bool: True if condition is satisfied, False otherwise
        """
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Return the option bag this condition was configured with."""
        pass


@dataclass
class ConditionOptions:
    """Declarative configuration for one condition attached to a policy."""
    name: str
    type: str
    options: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'name': self.name,
            'type': self.type,
            'options': self.options
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConditionOptions':
        """Create from dictionary representation."""
        return cls(
            name=data['name'],
            type=data['type'],
            options=data.get('options') or {}
        )


@dataclass(frozen=True)
class Policy:
    """
    Declarative access rule.

    Pattern fields are normalised to tuples and ``conditions`` is wrapped
    read-only, so a policy cannot change once built.
    """
    id: str
    effect: Effect
    actions: Tuple[str, ...] = ()
    roles: Tuple[str, ...] = ()
    resources: Tuple[str, ...] = ()
    scopes: Tuple[str, ...] = ()
    conditions: Mapping[str, Condition] = field(default_factory=dict)
    name: str = ""
    description: str = ""

    def __post_init__(self):
        for attr in ('actions', 'roles', 'resources', 'scopes'):
            object.__setattr__(self, attr, _as_tuple(getattr(self, attr)))
        object.__setattr__(self, 'conditions', MappingProxyType(dict(self.conditions)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the policy document representation."""
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'effect': self.effect.value,
            'actions': list(self.actions),
            'roles': list(self.roles),
            'resources': list(self.resources),
            'scopes': list(self.scopes),
            'conditions': [
                ConditionOptions(name=key, type=cond.name, options=cond.to_dict()).to_dict()
                for key, cond in self.conditions.items()
            ]
        }


def _as_tuple(value: Any) -> Tuple[str, ...]:
    # a bare string is one pattern, not a sequence of characters
    if isinstance(value, str):
        return (value,)
    return tuple(value or ())


class DecisionKind(Enum):
    """How a decision was reached."""
    ALLOWED = "allowed"
    DEFAULT_ALLOW = "default_allow"
    EXPLICIT_DENY = "explicit_deny"
    IMPLICIT_DENY = "implicit_deny"


@dataclass(frozen=True)
class Decision:
    """
    Outcome of evaluating one request.

    ``matched`` lists the policies that matched every dimension, in
    evaluation order. For an explicit deny it ends with the denying policy,
    since evaluation stops there.
    """
    request: Request
    effect: Effect
    kind: DecisionKind
    reason: str
    matched: Tuple[Policy, ...] = ()
    policy_id: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def allowed(self) -> bool:
        return self.effect == Effect.ALLOW

    @property
    def matched_ids(self) -> Sequence[str]:
        return [p.id for p in self.matched]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'request': self.request.to_dict(),
            'effect': self.effect.value,
            'kind': self.kind.value,
            'reason': self.reason,
            'matched': list(self.matched_ids),
            'policy_id': self.policy_id,
            'timestamp': self.timestamp.isoformat()
        }
