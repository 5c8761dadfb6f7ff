# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package authz implements policy evaluation and access decisions.

A request is matched against candidate policies by action, role, resource,
scope and conditions. Any matching deny policy wins over every allow; when
nothing allows the request the configured default effect applies.
"""

from .types import (
    Effect,
    Allow,
    Deny,
    Request,
    Policy,
    Condition,
    ConditionOptions,
    Decision,
    DecisionKind
)

from .conditions import (
    BoolCondition,
    RoleEqualsCondition,
    IPWhitelistCondition,
    ConditionRegistry,
    new_condition_registry,
    build_conditions
)

from .matcher import (
    Matcher,
    GlobMatcher,
    RegexMatcher,
    DEFAULT_MATCHER
)

from .policy import (
    PolicyOptions,
    new_policy
)

from .enforcer import (
    Enforcer,
    PolicyEnforcer,
    new_enforcer,
    new_default_enforcer
)

__all__ = [
    # Types
    'Effect',
    'Allow',
    'Deny',
    'Request',
    'Policy',
    'Condition',
    'ConditionOptions',
    'Decision',
    'DecisionKind',

    # Conditions
    'BoolCondition',
    'RoleEqualsCondition',
    'IPWhitelistCondition',
    'ConditionRegistry',
    'new_condition_registry',
    'build_conditions',

    # Matchers
    'Matcher',
    'GlobMatcher',
    'RegexMatcher',
    'DEFAULT_MATCHER',

    # Policies
    'PolicyOptions',
    'new_policy',

    # Enforcement
    'Enforcer',
    'PolicyEnforcer',
    'new_enforcer',
    'new_default_enforcer'
]
