# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Error types for the tollgate authorization engine.

Two families of errors leave the enforcer:

- denials (``RequestDeniedError`` and its subclasses), which are deterministic
  outcomes of policy evaluation and never worth retrying;
- infrastructure failures (``PolicyManagerError``, ``MatcherError`` or any
  exception raised by a third-party policy manager), which callers may retry
  or map to fail-open/fail-closed behaviour as they see fit.

``ConditionBuildError``, ``InvalidPolicyError`` and ``ConfigurationError`` are
raised while composing policies and enforcers, never during evaluation.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes used across tollgate."""
    REQUEST_DENIED_EXPLICIT = "request_denied_explicit"
    REQUEST_DENIED_IMPLICIT = "request_denied_implicit"
    MATCHER_ERROR = "matcher_error"
    POLICY_MANAGER_ERROR = "policy_manager_error"
    POLICY_NOT_FOUND = "policy_not_found"
    POLICY_EXISTS = "policy_exists"
    CONDITION_BUILD_FAILED = "condition_build_failed"
    INVALID_POLICY = "invalid_policy"
    CONFIGURATION_ERROR = "configuration_error"

    def __str__(self) -> str:
        return self.value


class TollgateError(Exception):
    """Base exception for all tollgate errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            'error': self.error_code.value,
            'message': self.message,
            'details': self.details
        }

        if self.cause:
            result['cause'] = str(self.cause)

        return result

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"


class RequestDeniedError(TollgateError):
    """Raised when a request is denied, explicitly or implicitly."""

    policy_id: Optional[str] = None


class ExplicitDenialError(RequestDeniedError):
    """A matching policy with a deny effect rejected the request."""

    def __init__(self, policy_id: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"access denied by policy {policy_id}",
            ErrorCode.REQUEST_DENIED_EXPLICIT,
            details
        )
        self.policy_id = policy_id
        self.details['policy_id'] = policy_id


class ImplicitDenialError(RequestDeniedError):
    """No policy allowed the request and the default effect is deny."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            "access denied because no policy allowed access",
            ErrorCode.REQUEST_DENIED_IMPLICIT,
            details
        )


class MatcherError(TollgateError):
    """Raised when a matcher cannot evaluate a pattern."""

    def __init__(
        self,
        message: str,
        pattern: Optional[Any] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message, ErrorCode.MATCHER_ERROR, cause=cause)
        self.pattern = pattern

        if pattern is not None:
            self.details['pattern'] = str(pattern)


class PolicyManagerError(TollgateError):
    """Raised when a policy manager fails to store or retrieve policies."""

    def __init__(
        self,
        operation: str,
        message: str,
        policy_id: str = "",
        error_code: ErrorCode = ErrorCode.POLICY_MANAGER_ERROR,
        cause: Optional[Exception] = None
    ):
        super().__init__(f"{operation}: {message}", error_code, cause=cause)
        self.operation = operation
        self.policy_id = policy_id

        self.details['operation'] = operation
        if policy_id:
            self.details['policy_id'] = policy_id


class PolicyNotFoundError(PolicyManagerError):
    """Raised when a policy id is not known to the manager."""

    def __init__(self, operation: str, policy_id: str):
        super().__init__(
            operation,
            f"policy {policy_id} not found",
            policy_id,
            ErrorCode.POLICY_NOT_FOUND
        )


class PolicyExistsError(PolicyManagerError):
    """Raised when creating a policy whose id is already stored."""

    def __init__(self, operation: str, policy_id: str):
        super().__init__(
            operation,
            f"policy {policy_id} already exists",
            policy_id,
            ErrorCode.POLICY_EXISTS
        )


class ConditionBuildError(TollgateError):
    """Raised when a condition option bag cannot be decoded."""

    def __init__(
        self,
        message: str,
        condition_name: str = "",
        condition_type: str = "",
        cause: Optional[Exception] = None
    ):
        super().__init__(message, ErrorCode.CONDITION_BUILD_FAILED, cause=cause)
        self.condition_name = condition_name
        self.condition_type = condition_type

        if condition_name:
            self.details['condition_name'] = condition_name
        if condition_type:
            self.details['condition_type'] = condition_type


class InvalidPolicyError(TollgateError):
    """Raised when declarative policy options cannot form a policy."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None):
        super().__init__(message, ErrorCode.INVALID_POLICY)
        self.field = field
        self.value = value

        if field:
            self.details['field'] = field
        if value is not None:
            self.details['value'] = str(value)


class ConfigurationError(TollgateError):
    """Raised when there's a configuration error."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None
    ):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR)
        self.config_key = config_key
        self.config_value = config_value

        if config_key:
            self.details['config_key'] = config_key
        if config_value is not None:
            self.details['config_value'] = str(config_value)


def is_denial(error: BaseException) -> bool:
    """Check whether an error raised by an enforcer is a policy denial."""
    return isinstance(error, RequestDeniedError)


__all__ = [
    'ErrorCode',
    'TollgateError',
    'RequestDeniedError',
    'ExplicitDenialError',
    'ImplicitDenialError',
    'MatcherError',
    'PolicyManagerError',
    'PolicyNotFoundError',
    'PolicyExistsError',
    'ConditionBuildError',
    'InvalidPolicyError',
    'ConfigurationError',
    'is_denial',
]
