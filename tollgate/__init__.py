"""
Tollgate Python Package

Embeddable authorization decision engine: deny-overrides-allow evaluation of
declarative policies with pluggable matchers and conditions.
"""

__version__ = "0.1.0"

from .authz import (
    Effect,
    Allow,
    Deny,
    Request,
    Policy,
    PolicyOptions,
    Condition,
    ConditionOptions,
    Decision,
    DecisionKind,
    new_policy,
    new_condition_registry,
    build_conditions,
    GlobMatcher,
    RegexMatcher,
    PolicyEnforcer,
    new_enforcer,
    new_default_enforcer,
)
from .core.config import EnforcerConfig
from .errors import (
    TollgateError,
    RequestDeniedError,
    ExplicitDenialError,
    ImplicitDenialError,
    MatcherError,
    PolicyManagerError,
    is_denial,
)
from .store import MemoryPolicyManager, FilePolicyManager, create_policy_manager
from .audit import MemoryAuditor, FileAuditor, LoggingAuditor, create_auditor

__all__ = [
    "Effect",
    "Allow",
    "Deny",
    "Request",
    "Policy",
    "PolicyOptions",
    "Condition",
    "ConditionOptions",
    "Decision",
    "DecisionKind",
    "new_policy",
    "new_condition_registry",
    "build_conditions",
    "GlobMatcher",
    "RegexMatcher",
    "PolicyEnforcer",
    "new_enforcer",
    "new_default_enforcer",
    "EnforcerConfig",
    "TollgateError",
    "RequestDeniedError",
    "ExplicitDenialError",
    "ImplicitDenialError",
    "MatcherError",
    "PolicyManagerError",
    "is_denial",
    "MemoryPolicyManager",
    "FilePolicyManager",
    "create_policy_manager",
    "MemoryAuditor",
    "FileAuditor",
    "LoggingAuditor",
    "create_auditor",
]
