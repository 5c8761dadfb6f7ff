"""
Audit module initialization
"""

from .auditor import Auditor, MemoryAuditor, FileAuditor, LoggingAuditor, create_auditor

__all__ = [
    "Auditor",
    "MemoryAuditor",
    "FileAuditor",
    "LoggingAuditor",
    "create_auditor"
]
