"""
Building policies from declarative options.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..errors import InvalidPolicyError
from .conditions import ConditionRegistry, build_conditions
from .types import ConditionOptions, Effect, Policy, parse_effect


@dataclass
class PolicyOptions:
    """Declarative form of a policy, as stored in policy documents."""
    id: str
    effect: Union[str, Effect]
    actions: List[str] = field(default_factory=list)
    roles: List[str] = field(default_factory=list)
    resources: List[str] = field(default_factory=list)
    scopes: List[str] = field(default_factory=list)
    conditions: List[ConditionOptions] = field(default_factory=list)
    name: str = ""
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        effect = self.effect.value if isinstance(self.effect, Effect) else self.effect
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'effect': effect,
            'actions': list(self.actions),
            'roles': list(self.roles),
            'resources': list(self.resources),
            'scopes': list(self.scopes),
            'conditions': [c.to_dict() for c in self.conditions]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PolicyOptions':
        """Create from dictionary representation."""
        try:
            return cls(
                id=data['id'],
                effect=data['effect'],
                actions=data.get('actions') or [],
                roles=data.get('roles') or [],
                resources=data.get('resources') or [],
                scopes=data.get('scopes') or [],
                conditions=[ConditionOptions.from_dict(c) for c in data.get('conditions') or []],
                name=data.get('name', ''),
                description=data.get('description', '')
            )
        except KeyError as e:
            raise InvalidPolicyError(f"policy document missing field {e}", field=str(e.args[0])) from e


_PATTERN_FIELDS = ("actions", "roles", "resources", "scopes")


def _check_patterns(options: PolicyOptions) -> None:
    for name in _PATTERN_FIELDS:
        value = getattr(options, name)
        if isinstance(value, str):
            continue
        if not isinstance(value, (list, tuple)) or not all(isinstance(p, str) for p in value):
            raise InvalidPolicyError(
                f"policy {name} must be a list of strings",
                field=name,
                value=value
            )


def _invalid_effect(value: Any) -> InvalidPolicyError:
    return InvalidPolicyError(
        f"policy effect must be one of: {[e.value for e in Effect]}",
        field="effect",
        value=value
    )


def new_policy(
    options: Union[PolicyOptions, Dict[str, Any]],
    registry: Optional[ConditionRegistry] = None
) -> Policy:
    """
    Build an immutable Policy from declarative options.

    Args:
        options: Policy options, as PolicyOptions or a policy document dict
        registry: Condition registry; defaults to the built-in conditions

    Returns:
        Policy instance

    Raises:
        InvalidPolicyError: If the id is empty, the effect is unknown or a
            pattern field is not a list of strings
        ConditionBuildError: If a condition option bag cannot be decoded
    """
    if not isinstance(options, PolicyOptions):
        options = PolicyOptions.from_dict(options)

    if not options.id:
        raise InvalidPolicyError("policy id is required", field="id")
    _check_patterns(options)

    return Policy(
        id=options.id,
        effect=parse_effect(options.effect, _invalid_effect),
        actions=options.actions,
        roles=options.roles,
        resources=options.resources,
        scopes=options.scopes,
        conditions=build_conditions(options.conditions, registry),
        name=options.name,
        description=options.description
    )
