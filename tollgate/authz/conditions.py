"""
Policy conditions for tollgate.
Implements the built-in condition types and the registry used to build
conditions from declarative options.
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union
import ipaddress
import logging

from ..errors import ConditionBuildError
from .types import Condition, ConditionOptions, Request


logger = logging.getLogger(__name__)

ConditionFactory = Callable[[Mapping[str, Any]], Condition]

_MISSING = object()


def _option(options: Mapping[str, Any], key: str) -> Any:
    """Look up an option key case-insensitively."""
    if key in options:
        return options[key]
    for k, v in options.items():
        if isinstance(k, str) and k.lower() == key:
            return v
    return _MISSING


class BoolCondition(Condition):
    """
    Matches a boolean metadata value against the configured value.
    """

    def __init__(self, value: bool = False):
        self.value = value

    @property
    def name(self) -> str:
        return "bool"

    def meets(self, value: Any, request: Request) -> bool:
        return isinstance(value, bool) and value == self.value

    def to_dict(self) -> Dict[str, Any]:
        return {'value': self.value}

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> 'BoolCondition':
        value = _option(options, 'value')
        if value is _MISSING:
            return cls()
        if not isinstance(value, bool):
            raise ConditionBuildError(
                f"bool condition option 'value' must be a boolean, got {type(value).__name__}",
                condition_type="bool"
            )
        return cls(value=value)


class RoleEqualsCondition(Condition):
    """
    Matches when the metadata value equals the role of the request.
    """

    @property
    def name(self) -> str:
        return "role_equals"

    def meets(self, value: Any, request: Request) -> bool:
        return isinstance(value, str) and value == request.role

    def to_dict(self) -> Dict[str, Any]:
        return {}

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> 'RoleEqualsCondition':
        return cls()


class IPWhitelistCondition(Condition):
    """
    IP address based condition.
    Matches when the metadata value is an address inside one of the
    configured CIDR networks.
    """

    def __init__(self, networks: Optional[List[str]] = None):
        """
        Initialize IP whitelist condition.

        Args:
            networks: List of allowed IP addresses or CIDR networks. Entries
                      that do not parse are logged and never match.
        """
        self.networks: Tuple[str, ...] = tuple(networks or ())
        self._networks = []
        for network in self.networks:
            try:
                self._networks.append(ipaddress.ip_network(network, strict=False))
            except ValueError:
                logger.warning(f"Ignoring malformed network in ip_whitelist condition: {network!r}")

    @property
    def name(self) -> str:
        return "ip_whitelist"

    def meets(self, value: Any, request: Request) -> bool:
        if not isinstance(value, str):
            return False

        try:
            address = ipaddress.ip_address(value)
        except ValueError:
            return False

        # ::ffff:a.b.c.d is checked as the IPv4 address it carries
        if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
            address = address.ipv4_mapped

        # ip_network containment is False across address families
        return any(address in network for network in self._networks)

    def to_dict(self) -> Dict[str, Any]:
        return {'networks': list(self.networks)}

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> 'IPWhitelistCondition':
        networks = _option(options, 'networks')
        if networks is _MISSING or networks is None:
            return cls()
        if isinstance(networks, str) or not isinstance(networks, (list, tuple)):
            raise ConditionBuildError(
                "ip_whitelist condition option 'networks' must be a list of strings",
                condition_type="ip_whitelist"
            )
        if not all(isinstance(n, str) for n in networks):
            raise ConditionBuildError(
                "ip_whitelist condition option 'networks' must only contain strings",
                condition_type="ip_whitelist"
            )
        return cls(networks=list(networks))


class ConditionRegistry:
    """
    Mapping of condition type names to factories.

    A factory receives the option bag of a condition and returns a fresh,
    configured Condition. Registration happens while the application is
    being composed; evaluation never reads the registry.
    """

    def __init__(self, factories: Optional[Mapping[str, ConditionFactory]] = None):
        self._factories: Dict[str, ConditionFactory] = dict(factories or {})

    def register(self, name: str, factory: ConditionFactory) -> None:
        """Register a factory under a condition type name."""
        self._factories[name] = factory

    def get(self, name: str) -> Optional[ConditionFactory]:
        """Get the factory for a condition type, or None."""
        return self._factories.get(name)

    def names(self) -> List[str]:
        """List registered condition type names."""
        return list(self._factories.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def new_condition_registry(*extra: Mapping[str, ConditionFactory]) -> ConditionRegistry:
    """
    Create a registry holding the built-in conditions.

    Args:
        *extra: Mappings of additional factories; later entries override
                earlier ones and the built-ins.

    Returns:
        ConditionRegistry instance
    """
    registry = ConditionRegistry({
        "bool": BoolCondition.from_options,
        "role_equals": RoleEqualsCondition.from_options,
        "ip_whitelist": IPWhitelistCondition.from_options,
    })

    for factories in extra:
        for name, factory in factories.items():
            registry.register(name, factory)

    return registry


def build_conditions(
    options: Iterable[Union[ConditionOptions, Dict[str, Any]]],
    registry: Optional[ConditionRegistry] = None
) -> Dict[str, Condition]:
    """
    Build named conditions from declarative options.

    Options whose type is not registered are skipped, so the policy simply
    never checks that key. A factory failing to decode its option bag
    aborts the whole build.

    Args:
        options: Condition options, as ConditionOptions or plain dicts
        registry: Registry to resolve types with; defaults to the built-ins

    Returns:
        Dict mapping condition key names to Conditions

    Raises:
        ConditionBuildError: If an option bag cannot be decoded
    """
    if registry is None:
        registry = new_condition_registry()

    conditions: Dict[str, Condition] = {}

    for opts in options:
        if not isinstance(opts, ConditionOptions):
            try:
                opts = ConditionOptions.from_dict(opts)
            except KeyError as e:
                raise ConditionBuildError(f"condition options missing field {e}", cause=e) from e

        factory = registry.get(opts.type)
        if factory is None:
            logger.debug(f"Skipping condition {opts.name!r}: unknown type {opts.type!r}")
            continue

        try:
            condition = factory(opts.options or {})
        except ConditionBuildError as e:
            raise ConditionBuildError(
                f"failed to build condition {opts.name!r}: {e.message}",
                condition_name=opts.name,
                condition_type=opts.type,
                cause=e
            ) from e
        except (TypeError, ValueError, AttributeError) as e:
            raise ConditionBuildError(
                f"failed to build condition {opts.name!r}: {e}",
                condition_name=opts.name,
                condition_type=opts.type,
                cause=e
            ) from e

        conditions[opts.name] = condition

    return conditions
