"""
Pattern matchers for tollgate.

A matcher decides whether the patterns declared on a policy match the
action, resource, scope or role of a request. The enforcer only talks to
the Matcher interface, so the matching semantics can be swapped without
touching the decision algorithm.
"""

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Iterable
import fnmatch
import re

from ..errors import MatcherError
from .types import Policy


_GLOB_CHARS = frozenset("*?[")


class Matcher(ABC):
    """
    Base class for pattern matchers.
    """

    @abstractmethod
    def match_policy(self, policy: Policy, patterns: Iterable[str], value: str) -> bool:
        """
        Check a request value against one dimension of a policy.

        Args:
            policy: The policy that declares the patterns
            patterns: Action, resource or scope patterns of the policy
            value: The matching value from the request

        Returns:
            bool: True if any pattern matches

        Raises:
            MatcherError: If a pattern is malformed
        """
        pass

    @abstractmethod
    def match_role(self, pattern: str, role: str) -> bool:
        """
        Check a single role pattern against the role of a request.

        Raises:
            MatcherError: If the pattern is malformed
        """
        pass


class GlobMatcher(Matcher):
    """
    Exact string and shell-style glob matching.

    ``*`` matches any run of characters, ``?`` one character and ``[...]`` a
    character set. Matching is case-sensitive. An empty pattern set never
    matches.
    """

    def match_policy(self, policy: Policy, patterns: Iterable[str], value: str) -> bool:
        return any(self._match(pattern, value) for pattern in patterns)

    def match_role(self, pattern: str, role: str) -> bool:
        return self._match(pattern, role)

    def _match(self, pattern: str, value: str) -> bool:
        if not isinstance(pattern, str):
            raise MatcherError(
                f"pattern must be a string, got {type(pattern).__name__}",
                pattern=pattern
            )
        if pattern == value:
            return True
        if _GLOB_CHARS.isdisjoint(pattern):
            return False
        return fnmatch.fnmatchcase(value, pattern)


@lru_cache(maxsize=512)
def _compile_delimited(pattern: str, start: str, end: str) -> "re.Pattern":
    parts = []
    pos = 0
    while pos < len(pattern):
        open_at = pattern.find(start, pos)
        close_at = pattern.find(end, pos)

        if open_at == -1:
            if close_at != -1:
                raise MatcherError(f"unbalanced delimiter {end!r} in pattern", pattern=pattern)
            parts.append(re.escape(pattern[pos:]))
            break

        if close_at != -1 and close_at < open_at:
            raise MatcherError(f"unbalanced delimiter {end!r} in pattern", pattern=pattern)

        parts.append(re.escape(pattern[pos:open_at]))

        # find the matching end delimiter, allowing nested groups such as <a<b>c>
        depth = 0
        i = open_at
        while i < len(pattern):
            if pattern.startswith(start, i):
                depth += 1
                i += len(start)
                continue
            if pattern.startswith(end, i):
                depth -= 1
                if depth == 0:
                    break
                i += len(end)
                continue
            i += 1
        else:
            raise MatcherError(f"unbalanced delimiter {start!r} in pattern", pattern=pattern)

        parts.append("(" + pattern[open_at + len(start):i] + ")")
        pos = i + len(end)

    try:
        return re.compile("".join(parts))
    except re.error as e:
        raise MatcherError(f"invalid regular expression in pattern: {e}", pattern=pattern, cause=e) from e


class RegexMatcher(Matcher):
    """
    Matching with regular expressions embedded between delimiters.

    ``"docs:<[0-9]+>"`` matches ``"docs:42"``. Text outside the delimiters
    is literal, and the whole value must match. Compiled patterns are
    cached across calls.
    """

    def __init__(self, start_delimiter: str = "<", end_delimiter: str = ">"):
        if not start_delimiter or not end_delimiter:
            raise ValueError("delimiters must not be empty")
        if start_delimiter == end_delimiter:
            raise ValueError("start and end delimiters must differ")
        self.start_delimiter = start_delimiter
        self.end_delimiter = end_delimiter

    def match_policy(self, policy: Policy, patterns: Iterable[str], value: str) -> bool:
        return any(self._match(pattern, value) for pattern in patterns)

    def match_role(self, pattern: str, role: str) -> bool:
        return self._match(pattern, role)

    def _match(self, pattern: str, value: str) -> bool:
        if not isinstance(pattern, str):
            raise MatcherError(
                f"pattern must be a string, got {type(pattern).__name__}",
                pattern=pattern
            )
        if self.start_delimiter not in pattern and self.end_delimiter not in pattern:
            return pattern == value

        compiled = _compile_delimited(pattern, self.start_delimiter, self.end_delimiter)
        return compiled.fullmatch(value) is not None


DEFAULT_MATCHER = GlobMatcher()
