"""
Tests for tollgate matchers.
"""

import pytest

from tollgate.authz import DEFAULT_MATCHER, Effect, GlobMatcher, Policy, RegexMatcher
from tollgate.errors import MatcherError


@pytest.fixture
def policy():
    return Policy(id="p1", effect=Effect.ALLOW)


class TestGlobMatcher:
    """Test exact and glob matching"""

    def test_default_matcher_is_glob(self):
        assert isinstance(DEFAULT_MATCHER, GlobMatcher)

    def test_exact_match(self, policy):
        matcher = GlobMatcher()
        assert matcher.match_policy(policy, ["read"], "read")
        assert not matcher.match_policy(policy, ["read"], "write")

    def test_wildcard(self, policy):
        matcher = GlobMatcher()
        assert matcher.match_policy(policy, ["*"], "doc1")
        assert matcher.match_policy(policy, ["docs/*"], "docs/a/b")
        assert matcher.match_policy(policy, ["doc?"], "doc1")
        assert not matcher.match_policy(policy, ["docs/*"], "images/a")

    def test_any_pattern_in_set(self, policy):
        matcher = GlobMatcher()
        assert matcher.match_policy(policy, ["write", "read"], "read")

    def test_empty_set_never_matches(self, policy):
        matcher = GlobMatcher()
        assert not matcher.match_policy(policy, [], "read")
        assert not matcher.match_policy(policy, (), "")

    def test_case_sensitive(self, policy):
        matcher = GlobMatcher()
        assert not matcher.match_policy(policy, ["Read"], "read")
        assert not matcher.match_role("ADMIN*", "admin")

    def test_match_role(self):
        matcher = GlobMatcher()
        assert matcher.match_role("admin", "admin")
        assert matcher.match_role("team:*", "team:ops")
        assert not matcher.match_role("admin", "editor")

    def test_non_string_pattern_raises(self, policy):
        with pytest.raises(MatcherError):
            GlobMatcher().match_policy(policy, [42], "read")


class TestRegexMatcher:
    """Test delimited regular expression matching"""

    def test_literal_pattern(self, policy):
        matcher = RegexMatcher()
        assert matcher.match_policy(policy, ["docs:1"], "docs:1")
        assert not matcher.match_policy(policy, ["docs:1"], "docs:12")

    def test_embedded_expression(self, policy):
        matcher = RegexMatcher()
        assert matcher.match_policy(policy, ["docs:<[0-9]+>"], "docs:42")
        assert not matcher.match_policy(policy, ["docs:<[0-9]+>"], "docs:abc")

    def test_whole_value_must_match(self, policy):
        matcher = RegexMatcher()
        assert not matcher.match_policy(policy, ["<[a-z]+>"], "abc1")
        assert not matcher.match_policy(policy, ["<[a-z]+>"], "abc\n")

    def test_literal_text_is_escaped(self, policy):
        matcher = RegexMatcher()
        assert matcher.match_policy(policy, ["a.b:<.*>"], "a.b:x")
        assert not matcher.match_policy(policy, ["a.b:<.*>"], "aXb:x")

    def test_alternation_stays_grouped(self):
        matcher = RegexMatcher()
        assert matcher.match_role("role:<admin|owner>", "role:owner")
        assert not matcher.match_role("role:<admin|owner>", "owner")

    def test_custom_delimiters(self, policy):
        matcher = RegexMatcher("{", "}")
        assert matcher.match_policy(policy, ["v{[0-9]}"], "v1")

    def test_invalid_expression_raises(self, policy):
        with pytest.raises(MatcherError):
            RegexMatcher().match_policy(policy, ["docs:<[0-9>"], "docs:1")

    def test_unbalanced_delimiters_raise(self, policy):
        with pytest.raises(MatcherError):
            RegexMatcher().match_policy(policy, ["docs:<[0-9]+"], "docs:1")
        with pytest.raises(MatcherError):
            RegexMatcher().match_policy(policy, ["docs:[0-9]+>"], "docs:1")

    def test_empty_set_never_matches(self, policy):
        assert not RegexMatcher().match_policy(policy, [], "read")

    def test_invalid_delimiters(self):
        with pytest.raises(ValueError):
            RegexMatcher("<", "<")
