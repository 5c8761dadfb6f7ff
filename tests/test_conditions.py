"""
Tests for tollgate conditions and the condition registry.
"""

import logging

import pytest

from tollgate.authz import (
    BoolCondition,
    Condition,
    ConditionOptions,
    ConditionRegistry,
    IPWhitelistCondition,
    Request,
    RoleEqualsCondition,
    build_conditions,
    new_condition_registry,
)
from tollgate.errors import ConditionBuildError


@pytest.fixture
def request_():
    return Request(role="admin", action="read", resource="doc1", scope="default")


class TestBoolCondition:
    """Test the bool condition"""

    def test_matches_configured_value(self, request_):
        cond = BoolCondition(value=True)
        assert cond.meets(True, request_)
        assert not cond.meets(False, request_)

    def test_wrong_type_does_not_match(self, request_):
        cond = BoolCondition(value=True)
        assert not cond.meets("true", request_)
        assert not cond.meets(1, request_)
        assert not cond.meets(None, request_)

    def test_default_is_false(self, request_):
        cond = BoolCondition.from_options({})
        assert cond.meets(False, request_)
        assert not cond.meets(True, request_)

    def test_decode_is_case_insensitive(self, request_):
        cond = BoolCondition.from_options({"Value": True})
        assert cond.value is True

    def test_decode_rejects_non_boolean(self):
        with pytest.raises(ConditionBuildError):
            BoolCondition.from_options({"value": "yes"})

    def test_name_and_options(self):
        cond = BoolCondition(value=True)
        assert cond.name == "bool"
        assert cond.to_dict() == {"value": True}


class TestRoleEqualsCondition:
    """Test the role_equals condition"""

    def test_matches_request_role(self, request_):
        cond = RoleEqualsCondition()
        assert cond.meets("admin", request_)

    def test_is_case_sensitive(self, request_):
        cond = RoleEqualsCondition()
        assert not cond.meets("Admin", request_)
        assert not cond.meets("editor", request_)

    def test_non_string_does_not_match(self, request_):
        cond = RoleEqualsCondition()
        assert not cond.meets(["admin"], request_)
        assert not cond.meets(None, request_)


class TestIPWhitelistCondition:
    """Test the ip_whitelist condition"""

    def test_address_inside_network(self, request_):
        cond = IPWhitelistCondition(networks=["10.0.0.0/24"])
        assert cond.meets("10.0.0.5", request_)

    def test_address_outside_network(self, request_):
        cond = IPWhitelistCondition(networks=["10.0.0.0/24"])
        assert not cond.meets("10.0.1.5", request_)

    def test_non_string_does_not_match(self, request_):
        cond = IPWhitelistCondition(networks=["10.0.0.0/24"])
        assert not cond.meets(167772165, request_)
        assert not cond.meets(None, request_)

    def test_unparsable_address_does_not_match(self, request_):
        cond = IPWhitelistCondition(networks=["10.0.0.0/24"])
        assert not cond.meets("not-an-ip", request_)

    def test_malformed_network_is_skipped(self, request_, caplog):
        with caplog.at_level(logging.WARNING):
            cond = IPWhitelistCondition(networks=["bogus", "192.168.0.0/16"])
        assert "bogus" in caplog.text
        assert cond.meets("192.168.4.20", request_)
        assert not cond.meets("10.0.0.5", request_)

    def test_ipv6_network(self, request_):
        cond = IPWhitelistCondition(networks=["2001:db8::/32"])
        assert cond.meets("2001:db8::1", request_)
        assert not cond.meets("10.0.0.5", request_)

    def test_ipv4_mapped_address_matches_ipv4_network(self, request_):
        cond = IPWhitelistCondition(networks=["10.0.0.0/24"])
        assert cond.meets("::ffff:10.0.0.5", request_)
        assert not cond.meets("::ffff:10.0.1.5", request_)

    def test_padded_address_does_not_match(self, request_):
        cond = IPWhitelistCondition(networks=["10.0.0.0/24"])
        assert not cond.meets(" 10.0.0.5", request_)
        assert not cond.meets("10.0.0.5\n", request_)

    def test_no_networks_never_matches(self, request_):
        cond = IPWhitelistCondition.from_options({})
        assert not cond.meets("10.0.0.5", request_)

    def test_decode_rejects_string_networks(self):
        with pytest.raises(ConditionBuildError):
            IPWhitelistCondition.from_options({"networks": "10.0.0.0/24"})

    def test_options_round_trip(self):
        cond = IPWhitelistCondition.from_options({"networks": ["10.0.0.0/24"]})
        assert cond.to_dict() == {"networks": ["10.0.0.0/24"]}


class ExpiresCondition(Condition):
    """Custom condition used to exercise registry extension."""

    def __init__(self, limit: int = 0):
        self.limit = limit

    @property
    def name(self) -> str:
        return "below"

    def meets(self, value, request) -> bool:
        return isinstance(value, int) and not isinstance(value, bool) and value < self.limit

    def to_dict(self):
        return {"limit": self.limit}


class TestConditionRegistry:
    """Test registry construction and condition building"""

    def test_builtins_registered(self):
        registry = new_condition_registry()
        assert set(registry.names()) == {"bool", "role_equals", "ip_whitelist"}
        assert "bool" in registry
        assert len(registry) == 3

    def test_extra_factories(self):
        registry = new_condition_registry({"below": lambda opts: ExpiresCondition(opts.get("limit", 0))})
        assert "below" in registry
        conditions = build_conditions(
            [ConditionOptions(name="age", type="below", options={"limit": 10})],
            registry
        )
        assert conditions["age"].meets(3, None)

    def test_build_stores_under_name(self):
        conditions = build_conditions([
            {"name": "mfa", "type": "bool", "options": {"value": True}},
            {"name": "legacy", "type": "bool", "options": {"value": False}},
        ])
        assert set(conditions) == {"mfa", "legacy"}
        assert conditions["mfa"].value is True
        assert conditions["legacy"].value is False

    def test_unknown_type_is_skipped(self):
        conditions = build_conditions([
            {"name": "office", "type": "geo_fence", "options": {"radius": 5}},
            {"name": "owner", "type": "role_equals"},
        ])
        assert list(conditions) == ["owner"]

    def test_decode_failure_aborts_build(self):
        with pytest.raises(ConditionBuildError) as exc:
            build_conditions([
                {"name": "owner", "type": "role_equals"},
                {"name": "mfa", "type": "bool", "options": {"value": "true"}},
            ])
        assert exc.value.condition_name == "mfa"
        assert exc.value.condition_type == "bool"

    def test_builds_fresh_instances(self):
        options = [{"name": "office", "type": "ip_whitelist", "options": {"networks": ["10.0.0.0/8"]}}]
        first = build_conditions(options)
        second = build_conditions(options)
        assert first["office"] is not second["office"]

    def test_register_overrides(self):
        registry = ConditionRegistry()
        registry.register("bool", BoolCondition.from_options)
        assert registry.get("bool") is not None
        assert registry.get("role_equals") is None
