# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package store provides policy managers: the storage the enforcer asks for
candidate policies.

This package implements:
- The PolicyManager interface
- Memory-based storage for development/testing
- JSON file storage
- A factory for configured backends
"""

from .types import PolicyManager

from .memory import MemoryPolicyManager

from .file import FilePolicyManager

from .factory import (
    create_policy_manager,
    register_policy_manager,
    available_policy_managers
)

__all__ = [
    'PolicyManager',
    'MemoryPolicyManager',
    'FilePolicyManager',
    'create_policy_manager',
    'register_policy_manager',
    'available_policy_managers'
]
