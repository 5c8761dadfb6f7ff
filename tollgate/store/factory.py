"""
Factory for creating policy managers.
Provides a centralized way to create and configure policy storage backends.
"""

from typing import Any, Dict, List, Type

from ..errors import ConfigurationError
from .file import FilePolicyManager
from .memory import MemoryPolicyManager
from .types import PolicyManager


# Registry of available policy manager implementations
_MANAGER_IMPLEMENTATIONS: Dict[str, Type[PolicyManager]] = {
    'memory': MemoryPolicyManager,
    'file': FilePolicyManager,
}


def register_policy_manager(name: str, implementation: Type[PolicyManager]) -> None:
    """
    Register a new policy manager implementation.

    Args:
        name: Name to register the implementation under
        implementation: PolicyManager implementation class
    """
    _MANAGER_IMPLEMENTATIONS[name.lower()] = implementation


def available_policy_managers() -> List[str]:
    """Get list of available policy manager types."""
    return list(_MANAGER_IMPLEMENTATIONS.keys())


def create_policy_manager(manager_type: str = "memory", **kwargs: Any) -> PolicyManager:
    """
    Create a policy manager.

    Args:
        manager_type: Type of manager ("memory", "file" or a registered name)
        **kwargs: Arguments for the manager

    Returns:
        PolicyManager instance

    Raises:
        ConfigurationError: If manager_type is not supported
    """
    implementation = _MANAGER_IMPLEMENTATIONS.get(manager_type.lower())
    if implementation is None:
        raise ConfigurationError(
            f"Unsupported policy manager type: {manager_type}",
            config_key="manager_type",
            config_value=manager_type
        )

    return implementation(**kwargs)
