"""
Configuration module for the tollgate enforcer.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.
"""

from dataclasses import dataclass
from typing import Any, Dict, Union
import os

from ..authz.types import Effect, parse_effect as _parse_effect
from ..errors import ConfigurationError


ENV_PREFIX = "TOLLGATE_"


def parse_effect(value: Union[str, Effect], config_key: str = "default_effect") -> Effect:
    """Parse an effect name ("allow"/"deny", any case) into an Effect."""
    return _parse_effect(value, lambda v: ConfigurationError(
        f"{config_key} must be one of: {[e.value for e in Effect]}",
        config_key=config_key,
        config_value=v
    ))


@dataclass(frozen=True)
class EnforcerConfig:
    """Configuration for a policy enforcer.

    ``default_effect`` decides the outcome when no policy allows a request.
    It is read once when the enforcer is built and never changed afterwards.
    """
    default_effect: Effect = Effect.DENY

    def __post_init__(self):
        object.__setattr__(self, 'default_effect', parse_effect(self.default_effect))

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> "EnforcerConfig":
        """Create configuration from environment variables"""
        return cls(
            default_effect=parse_effect(
                os.getenv(f"{prefix}DEFAULT_EFFECT", Effect.DENY.value),
                config_key=f"{prefix}DEFAULT_EFFECT"
            )
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnforcerConfig":
        """Create configuration from dictionary representation."""
        return cls(default_effect=data.get('default_effect', Effect.DENY.value))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {'default_effect': self.default_effect.value}

    def validate(self) -> bool:
        """Validate the configuration"""
        if not isinstance(self.default_effect, Effect):
            raise ConfigurationError(
                "default_effect must be an Effect",
                config_key="default_effect",
                config_value=self.default_effect
            )
        return True
