"""
File-backed policy manager for tollgate.
Policies are kept as a JSON list of policy documents.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import asyncio
import json
import logging

import aiofiles

from ..authz.conditions import ConditionRegistry
from ..authz.policy import new_policy
from ..authz.types import Policy, Request
from ..errors import (
    ConditionBuildError, InvalidPolicyError, PolicyExistsError,
    PolicyManagerError, PolicyNotFoundError
)
from .types import PolicyManager

logger = logging.getLogger(__name__)


class FilePolicyManager(PolicyManager):
    """
    Policy manager persisting policies to a JSON file.

    The file is read by ``load()`` (or lazily on first use) and rewritten in
    full after every mutation. Condition option bags are rebuilt through the
    given condition registry when loading.
    """

    def __init__(self, file_path: Union[str, Path], registry: Optional[ConditionRegistry] = None):
        self.file_path = Path(file_path)
        self.registry = registry
        self._policies: Dict[str, Policy] = {}
        self._loaded = False
        self._lock = asyncio.Lock()

    async def load(self) -> None:
        """Load policies from the file. A missing file means no policies."""
        async with self._lock:
            await self._load()

    async def _load(self) -> None:
        policies: Dict[str, Policy] = {}

        if self.file_path.exists():
            try:
                async with aiofiles.open(self.file_path, 'r') as f:
                    data = json.loads(await f.read() or "[]")
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Failed to load policies from {self.file_path}: {e}")
                raise PolicyManagerError("load", f"cannot read {self.file_path}: {e}", cause=e) from e

            if not isinstance(data, list):
                raise PolicyManagerError("load", f"{self.file_path} must contain a list of policies")

            for document in data:
                try:
                    policy = new_policy(document, self.registry)
                except (InvalidPolicyError, ConditionBuildError, TypeError, AttributeError) as e:
                    raise PolicyManagerError("load", f"invalid policy document: {e}", cause=e) from e
                if policy.id in policies:
                    raise PolicyExistsError("load", policy.id)
                policies[policy.id] = policy

        self._policies = policies
        self._loaded = True

    async def _ensure_loaded(self) -> None:
        if not self._loaded:
            await self._load()

    async def _save(self, policies: Dict[str, Policy]) -> None:
        documents: List[Dict[str, Any]] = [p.to_dict() for p in policies.values()]
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(self.file_path, 'w') as f:
                await f.write(json.dumps(documents, indent=2))
        except OSError as e:
            logger.error(f"Failed to save policies to {self.file_path}: {e}")
            raise PolicyManagerError("save", f"cannot write {self.file_path}: {e}", cause=e) from e

    async def create(self, policy: Policy) -> None:
        async with self._lock:
            await self._ensure_loaded()
            if policy.id in self._policies:
                raise PolicyExistsError("create", policy.id)
            policies = dict(self._policies)
            policies[policy.id] = policy
            # memory only changes once the file has been written
            await self._save(policies)
            self._policies = policies

    async def update(self, policy: Policy) -> None:
        async with self._lock:
            await self._ensure_loaded()
            if policy.id not in self._policies:
                raise PolicyNotFoundError("update", policy.id)
            policies = dict(self._policies)
            policies[policy.id] = policy
            await self._save(policies)
            self._policies = policies

    async def get(self, policy_id: str) -> Policy:
        async with self._lock:
            await self._ensure_loaded()
            if policy_id not in self._policies:
                raise PolicyNotFoundError("get", policy_id)
            return self._policies[policy_id]

    async def delete(self, policy_id: str) -> None:
        async with self._lock:
            await self._ensure_loaded()
            if policy_id not in self._policies:
                raise PolicyNotFoundError("delete", policy_id)
            policies = dict(self._policies)
            del policies[policy_id]
            await self._save(policies)
            self._policies = policies

    async def all(self) -> List[Policy]:
        async with self._lock:
            await self._ensure_loaded()
            return list(self._policies.values())

    async def find_by_request(self, request: Request) -> List[Policy]:
        async with self._lock:
            await self._ensure_loaded()
            return list(self._policies.values())
