"""
Policy enforcement for tollgate.
Implements the decision algorithm: policies are matched by action, role,
resource, scope and finally conditions, and a matching deny always wins.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, TYPE_CHECKING
import logging

from ..core.config import EnforcerConfig
from ..errors import ExplicitDenialError, ImplicitDenialError, RequestDeniedError
from .matcher import DEFAULT_MATCHER, Matcher
from .types import Decision, DecisionKind, Effect, Policy, Request

if TYPE_CHECKING:
    from ..audit.auditor import Auditor
    from ..store.types import PolicyManager


logger = logging.getLogger(__name__)


class Enforcer(ABC):
    """
    Base class for enforcers.
    """

    @abstractmethod
    async def enforce(self, request: Request) -> None:
        """
        Enforce policies against a request.

        Returns normally when the request is allowed.

        Raises:
            ExplicitDenialError: A matching policy denied the request
            ImplicitDenialError: No policy allowed the request
        """
        pass


class PolicyEnforcer(Enforcer):
    """
    Default enforcer combining a policy manager, a matcher and an optional
    auditor.

    The enforcer holds no state besides these references, so one instance
    can serve concurrent requests as long as its collaborators can.
    """

    def __init__(
        self,
        manager: "PolicyManager",
        matcher: Optional[Matcher] = None,
        auditor: Optional["Auditor"] = None,
        config: Optional[EnforcerConfig] = None
    ):
        self.manager = manager
        self.matcher = matcher or DEFAULT_MATCHER
        self.auditor = auditor
        self.config = config or EnforcerConfig()

    async def enforce(self, request: Request) -> None:
        decision = await self.evaluate(request)

        if decision.kind == DecisionKind.EXPLICIT_DENY:
            raise ExplicitDenialError(decision.policy_id)
        if decision.kind == DecisionKind.IMPLICIT_DENY:
            raise ImplicitDenialError()

    async def is_allowed(self, request: Request) -> bool:
        """Check whether a request is allowed. Infrastructure errors still raise."""
        try:
            await self.enforce(request)
        except RequestDeniedError:
            return False
        return True

    async def evaluate(self, request: Request) -> Decision:
        """
        Evaluate a request against the candidate policies of the manager.

        Policies are evaluated in the order the manager returns them. The
        first matching deny ends evaluation; allows are collected until the
        candidates are exhausted.

        Args:
            request: The access request to evaluate

        Returns:
            Decision: The outcome, also handed to the auditor if one is set

        Raises:
            MatcherError: If a policy pattern cannot be evaluated
            Exception: Whatever the policy manager raises, unchanged
        """
        policies = await self.manager.find_by_request(request)

        matched: List[Policy] = []
        allow = False

        for policy in policies:
            if not self._eval_policy(request, policy):
                continue

            matched.append(policy)

            # deny overrides all
            if policy.effect == Effect.DENY:
                decision = Decision(
                    request=request,
                    effect=Effect.DENY,
                    kind=DecisionKind.EXPLICIT_DENY,
                    reason=f"access denied by policy {policy.id}",
                    matched=tuple(matched),
                    policy_id=policy.id
                )
                return await self._finish(decision)

            allow = True

        if allow:
            decision = Decision(
                request=request,
                effect=Effect.ALLOW,
                kind=DecisionKind.ALLOWED,
                reason="access allowed by policy",
                matched=tuple(matched)
            )
        elif self.config.default_effect == Effect.DENY:
            decision = Decision(
                request=request,
                effect=Effect.DENY,
                kind=DecisionKind.IMPLICIT_DENY,
                reason="access denied because no policy allowed access"
            )
        else:
            decision = Decision(
                request=request,
                effect=Effect.ALLOW,
                kind=DecisionKind.DEFAULT_ALLOW,
                reason="access allowed by default effect"
            )

        return await self._finish(decision)

    async def _finish(self, decision: Decision) -> Decision:
        logger.debug(
            f"Decision {decision.kind.value} for role={decision.request.role!r} "
            f"action={decision.request.action!r} resource={decision.request.resource!r} "
            f"scope={decision.request.scope!r} matched={decision.matched_ids}"
        )
        if self.auditor is not None:
            # a failing auditor must not change the outcome of the decision
            try:
                await self.auditor.record(decision)
            except Exception:
                logger.exception(
                    f"Failed to audit {decision.kind.value} decision for policy {decision.policy_id}"
                )
        return decision

    def _eval_policy(self, request: Request, policy: Policy) -> bool:
        # match actions
        if not self.matcher.match_policy(policy, policy.actions, request.action):
            return False

        # match roles, any single role pattern is enough
        if not any(self.matcher.match_role(role, request.role) for role in policy.roles):
            logger.debug(f"Policy {policy.id} skipped: role {request.role!r} not matched")
            return False

        # match resources
        if not self.matcher.match_policy(policy, policy.resources, request.resource):
            logger.debug(f"Policy {policy.id} skipped: resource {request.resource!r} not matched")
            return False

        # match scopes
        if not self.matcher.match_policy(policy, policy.scopes, request.scope):
            logger.debug(f"Policy {policy.id} skipped: scope {request.scope!r} not matched")
            return False

        return self._check_conditions(request, policy)

    def _check_conditions(self, request: Request, policy: Policy) -> bool:
        for key, condition in policy.conditions.items():
            if not condition.meets(request.lookup(key), request):
                logger.debug(f"Policy {policy.id} skipped: condition {key!r} not met")
                return False
        return True


def new_enforcer(
    manager: "PolicyManager",
    matcher: Optional[Matcher] = None,
    auditor: Optional["Auditor"] = None,
    config: Optional[EnforcerConfig] = None
) -> PolicyEnforcer:
    """Create an enforcer combining a policy manager, matcher and auditor."""
    return PolicyEnforcer(manager, matcher=matcher, auditor=auditor, config=config)


def new_default_enforcer(manager: "PolicyManager") -> PolicyEnforcer:
    """Create an enforcer with the default matcher, no auditor and default configuration."""
    return PolicyEnforcer(manager)
