"""
Policy manager interface for tollgate.
"""

from abc import ABC, abstractmethod
from typing import List

from ..authz.types import Policy, Request


class PolicyManager(ABC):
    """
    Abstract base class for policy storage backends.

    ``find_by_request`` may return more candidates than strictly apply, since
    the enforcer re-checks every dimension. It must never leave out a policy
    that applies, or that policy is silently ignored.
    """

    @abstractmethod
    async def create(self, policy: Policy) -> None:
        """
        Store a new policy.

        Raises:
            PolicyExistsError: If a policy with the same id is stored
        """
        pass

    @abstractmethod
    async def update(self, policy: Policy) -> None:
        """
        Replace a stored policy.

        Raises:
            PolicyNotFoundError: If the policy id is unknown
        """
        pass

    @abstractmethod
    async def get(self, policy_id: str) -> Policy:
        """
        Get a policy by id.

        Raises:
            PolicyNotFoundError: If the policy id is unknown
        """
        pass

    @abstractmethod
    async def delete(self, policy_id: str) -> None:
        """
        Delete a policy by id.

        Raises:
            PolicyNotFoundError: If the policy id is unknown
        """
        pass

    @abstractmethod
    async def all(self) -> List[Policy]:
        """List all policies."""
        pass

    @abstractmethod
    async def find_by_request(self, request: Request) -> List[Policy]:
        """Find the candidate policies for a request."""
        pass

    async def close(self) -> None:
        """Release resources held by the manager"""
        pass
