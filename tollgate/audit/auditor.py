"""
Decision auditing for tollgate.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.
"""

from abc import ABC, abstractmethod
from collections import deque
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import asyncio
import json
import logging

import aiofiles

from ..authz.types import Decision, Effect
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


class Auditor(ABC):
    """Abstract base class for decision auditors"""

    @abstractmethod
    async def record(self, decision: Decision) -> None:
        """Record a decision outcome"""
        pass

    async def close(self) -> None:
        """Close the auditor and release resources"""
        pass


class MemoryAuditor(Auditor):
    """In-memory auditor for development and testing"""

    def __init__(self, max_entries: int = 1000):
        self.max_entries = max_entries
        self.decisions: deque = deque(maxlen=max_entries)
        self._lock = asyncio.Lock()

    async def record(self, decision: Decision) -> None:
        """Record a decision in memory"""
        async with self._lock:
            self.decisions.append(decision)

    async def get_decisions(
        self,
        effect: Optional[Effect] = None,
        policy_id: Optional[str] = None,
    ) -> List[Decision]:
        """Retrieve recorded decisions with optional filtering"""
        async with self._lock:
            filtered = []

            for decision in self.decisions:
                if effect is not None and decision.effect != effect:
                    continue

                # Filter by any matched policy, not only the denying one
                if policy_id is not None and policy_id not in decision.matched_ids:
                    continue

                filtered.append(decision)

            return filtered


class FileAuditor(Auditor):
    """File-based auditor writing one JSON document per line"""

    def __init__(self, file_path: Union[str, Path]):
        self.file_path = Path(file_path)
        self._lock = asyncio.Lock()

    async def record(self, decision: Decision) -> None:
        """Append a decision to the audit file"""
        line = json.dumps(decision.to_dict(), default=str)
        async with self._lock:
            try:
                async with aiofiles.open(self.file_path, 'a') as f:
                    await f.write(line + "\n")
            except OSError as e:
                logger.error(f"Failed to write audit record to {self.file_path}: {e}")

    async def get_decisions(self) -> List[Dict[str, Any]]:
        """Read recorded decisions back as dictionaries"""
        records = []

        if not self.file_path.exists():
            return records

        async with self._lock:
            async with aiofiles.open(self.file_path, 'r') as f:
                async for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        records.append(json.loads(line))
                    except json.JSONDecodeError:
                        logger.warning(f"Skipping malformed audit line in {self.file_path}")

        return records


class LoggingAuditor(Auditor):
    """Auditor writing decisions to a standard library logger"""

    def __init__(self, audit_logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.logger = audit_logger or logging.getLogger("tollgate.audit")
        self.level = level

    async def record(self, decision: Decision) -> None:
        request = decision.request
        self.logger.log(
            self.level,
            f"decision={decision.kind.value} effect={decision.effect.value} "
            f"role={request.role} action={request.action} resource={request.resource} "
            f"scope={request.scope} policy={decision.policy_id or '-'} "
            f"matched={','.join(decision.matched_ids) or '-'}"
        )


# Factory function for creating auditors
def create_auditor(auditor_type: str = "memory", **kwargs) -> Auditor:
    """
    Factory function to create auditors

    Args:
        auditor_type: Type of auditor ("memory", "file" or "logging")
        **kwargs: Additional arguments for the auditor

    Returns:
        Auditor instance
    """
    if auditor_type == "memory":
        return MemoryAuditor(kwargs.get("max_entries", 1000))
    elif auditor_type == "file":
        return FileAuditor(kwargs.get("file_path", "audit.log"))
    elif auditor_type == "logging":
        return LoggingAuditor(kwargs.get("audit_logger"), kwargs.get("level", logging.INFO))
    else:
        raise ConfigurationError(
            f"Unknown auditor type: {auditor_type}",
            config_key="auditor_type",
            config_value=auditor_type
        )
