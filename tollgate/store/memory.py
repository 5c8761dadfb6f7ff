"""
In-memory policy manager for tollgate.
"""

from typing import Dict, Iterable, List, Optional
import asyncio

from ..authz.types import Policy, Request
from ..errors import PolicyExistsError, PolicyNotFoundError
from .types import PolicyManager


class MemoryPolicyManager(PolicyManager):
    """
    In-memory policy manager.

    Policies are kept in insertion order and ``find_by_request`` returns all
    of them, leaving the matching to the enforcer. Suitable for tests,
    single-instance deployments and policies loaded at startup.
    """

    def __init__(self, policies: Optional[Iterable[Policy]] = None):
        self._policies: Dict[str, Policy] = {}
        self._lock = asyncio.Lock()

        for policy in policies or ():
            if policy.id in self._policies:
                raise PolicyExistsError("create", policy.id)
            self._policies[policy.id] = policy

    async def create(self, policy: Policy) -> None:
        async with self._lock:
            if policy.id in self._policies:
                raise PolicyExistsError("create", policy.id)
            self._policies[policy.id] = policy

    async def update(self, policy: Policy) -> None:
        async with self._lock:
            if policy.id not in self._policies:
                raise PolicyNotFoundError("update", policy.id)
            self._policies[policy.id] = policy

    async def get(self, policy_id: str) -> Policy:
        async with self._lock:
            if policy_id not in self._policies:
                raise PolicyNotFoundError("get", policy_id)
            return self._policies[policy_id]

    async def delete(self, policy_id: str) -> None:
        async with self._lock:
            if policy_id not in self._policies:
                raise PolicyNotFoundError("delete", policy_id)
            del self._policies[policy_id]

    async def all(self) -> List[Policy]:
        async with self._lock:
            return list(self._policies.values())

    async def find_by_request(self, request: Request) -> List[Policy]:
        async with self._lock:
            return list(self._policies.values())

    def __len__(self) -> int:
        return len(self._policies)
