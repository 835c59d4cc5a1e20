"""
Version range matching built atop packaging.

Supported expressions:
- bare versions ("2.0") meaning "this version or newer"
- wildcard versions ("1.9.*") matching any 1.9.x release
- ranges ("1.9.0 - 1.10.*"), with wildcards in the upper bound matching any number
- comma separated alternatives of the above ("1.9.*, 2.0 - 2.1.*"), any of which may match
- PEP 440 specifier sets when the expression starts with an operator (">=2.0", ">=1.0,<2.0")
"""

import re
from typing import List, Optional, Tuple

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from owatools.owatools_exceptions import MalformedVersionExpression

_OPERATOR_CHARS = "<>=!~"
_WILDCARD = "*"
_WILDCARD_UPPER = str(2**31 - 1)
# a hyphen separates a range only when the upper bound starts with a number
_RANGE_SEPARATOR = re.compile(r"-(?=\s?\d)")


def _parse_version(text: str, expression: str) -> Version:
    # drop "-SNAPSHOT" and similar qualifiers before comparing
    base = text.strip().split("-", 1)[0].strip()
    try:
        return Version(base)
    except InvalidVersion as e:
        raise MalformedVersionExpression(expression, f"'{text}' is not a version") from e


def _bound(text: str, wildcard_value: str, expression: str) -> Version:
    return _parse_version(text.replace(_WILDCARD, wildcard_value), expression)


def _split_range(alternative: str) -> Tuple[str, Optional[str]]:
    match = _RANGE_SEPARATOR.search(alternative)
    if match is None:
        return alternative, None
    return alternative[: match.start()], alternative[match.end():]


class VersionMatcher:
    """
    Decides whether an installed version satisfies a required version expression.
    """

    def satisfies(self, installed_version: str, required_expression: Optional[str]) -> bool:
        """
        Args:
            installed_version: Version reported by the host, e.g. "2.3.0-SNAPSHOT"
            required_expression: Version expression declared by the app

        Returns:
            True if the installed version is acceptable

        Raises:
            MalformedVersionExpression: If either argument cannot be interpreted
        """
        if required_expression is None or not required_expression.strip():
            return True

        expression = required_expression.strip()
        installed = _parse_version(installed_version, expression)

        if expression[0] in _OPERATOR_CHARS:
            return self._matches_specifier(installed, expression)

        return any(
            self._matches_alternative(installed, alternative, expression)
            for alternative in self._alternatives(expression)
        )

    @staticmethod
    def _matches_specifier(installed: Version, expression: str) -> bool:
        try:
            specifier = SpecifierSet(expression)
        except InvalidSpecifier as e:
            raise MalformedVersionExpression(expression, str(e)) from e
        return specifier.contains(installed, prereleases=True)

    @staticmethod
    def _alternatives(expression: str) -> List[str]:
        alternatives = [a.strip() for a in expression.split(",")]
        if not all(alternatives):
            raise MalformedVersionExpression(expression, "empty alternative")
        return alternatives

    @staticmethod
    def _matches_alternative(installed: Version, alternative: str, expression: str) -> bool:
        lower, upper = _split_range(alternative)

        if upper is None:
            if _WILDCARD not in alternative:
                return installed >= _parse_version(alternative, expression)
            # a lone wildcard version is its own lower and upper bound
            lower = upper = alternative

        low = _bound(lower, "0", expression)
        high = _bound(upper, _WILDCARD_UPPER, expression)
        return low <= installed <= high


_default_matcher = VersionMatcher()


def satisfies(installed_version: str, required_expression: Optional[str]) -> bool:
    """Module level shortcut for VersionMatcher().satisfies()."""
    return _default_matcher.satisfies(installed_version, required_expression)
