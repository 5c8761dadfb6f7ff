"""
Basic tollgate usage example.

This example demonstrates the fundamental tollgate operations:
- Building policies from policy documents
- Enforcing requests with deny-overrides-allow
- Conditions over request metadata
- Reading the audit trail
"""

import asyncio

from tollgate import (
    EnforcerConfig,
    MemoryAuditor,
    MemoryPolicyManager,
    RequestDeniedError,
    Request,
    new_enforcer,
    new_policy,
)


POLICIES = [
    {
        "id": "admins-read",
        "effect": "allow",
        "actions": ["read", "list"],
        "roles": ["admin"],
        "resources": ["*"],
        "scopes": ["default"],
    },
    {
        "id": "secrets-office-only",
        "effect": "deny",
        "actions": ["*"],
        "roles": ["*"],
        "resources": ["secrets/*"],
        "scopes": ["*"],
        "conditions": [
            {"name": "remote", "type": "bool", "options": {"value": True}},
        ],
    },
]


async def basic_example():
    """Demonstrate basic tollgate usage"""
    print("Basic tollgate Example")
    print("=" * 30)

    # 1. Build policies and the enforcer
    manager = MemoryPolicyManager([new_policy(doc) for doc in POLICIES])
    auditor = MemoryAuditor()
    enforcer = new_enforcer(manager, auditor=auditor, config=EnforcerConfig.from_env())
    print(f"✓ Loaded {len(manager)} policies")

    requests = [
        Request(role="admin", action="read", resource="reports/q3", scope="default"),
        Request(role="admin", action="read", resource="secrets/db", scope="default",
                metadata={"remote": True}),
        Request(role="guest", action="read", resource="reports/q3", scope="default"),
    ]

    # 2. Enforce
    for request in requests:
        try:
            await enforcer.enforce(request)
            print(f"✓ {request.role} may {request.action} {request.resource}")
        except RequestDeniedError as e:
            print(f"✗ {request.role} may not {request.action} {request.resource}: {e}")

    # 3. Check audit trail
    decisions = await auditor.get_decisions()
    print(f"✓ Decisions audited: {len(decisions)}")


if __name__ == "__main__":
    asyncio.run(basic_example())
