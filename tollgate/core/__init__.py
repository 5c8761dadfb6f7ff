"""
Core configuration for tollgate.
"""

from .config import EnforcerConfig, parse_effect

__all__ = [
    "EnforcerConfig",
    "parse_effect",
]
