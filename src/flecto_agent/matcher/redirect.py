"""Default table-backed redirect matcher.

Lookup order for a request ``(host, path)``:

1. ``basic_host`` rules, exact ``(host, path)``
2. ``basic`` rules, exact ``path``
3. ``regex_host`` rules, full match on ``host + path``, in insertion order
4. ``regex`` rules, full match on ``path``, in insertion order

Hosts are compared case-insensitively and without their port. When two exact
rules share a key, the first inserted wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from flecto_agent.core.contracts.redirect import Redirect, RedirectType
from flecto_agent.core.errors import InvalidRuleError

_GROUP_REF = re.compile(r"\$\{(\w+)\}|\$(\w+)")


def normalize_host(host: str) -> str:
    """Lowercase ``host`` and drop any ``:port`` suffix."""
    return host.strip().lower().split(":", 1)[0]


def split_host_source(source: str) -> tuple[str, str]:
    """Split ``example.com/old`` into ``("example.com", "/old")``."""
    host, sep, rest = source.partition("/")
    return normalize_host(host), sep + rest if sep else "/"


def _to_template(target: str, pattern: re.Pattern[str]) -> str:
    """Convert ``$1`` / ``${name}`` references into a ``Match.expand`` template."""
    escaped = target.replace("\\", "\\\\")

    def _ref(m: re.Match[str]) -> str:
        ref = m.group(1) or m.group(2)
        known = int(ref) <= pattern.groups if ref.isdigit() else ref in pattern.groupindex
        if not known:
            raise InvalidRuleError(f"unknown group reference ${ref} in target {target!r}")
        return rf"\g<{ref}>"

    return _GROUP_REF.sub(_ref, escaped)


@dataclass(frozen=True, slots=True)
class _RegexRule:
    redirect: Redirect
    pattern: re.Pattern[str]
    template: str


@dataclass(slots=True)
class RedirectTable:
    """Hash-map plus ordered-regex implementation of :class:`RedirectMatcher`."""

    _exact_host: dict[tuple[str, str], Redirect] = field(default_factory=dict)
    _exact: dict[str, Redirect] = field(default_factory=dict)
    _regex_host: list[_RegexRule] = field(default_factory=list)
    _regex: list[_RegexRule] = field(default_factory=list)
    _count: int = 0

    def insert(self, redirect: Redirect) -> None:
        if redirect.type is RedirectType.BASIC:
            self._exact.setdefault(redirect.source, redirect)
        elif redirect.type is RedirectType.BASIC_HOST:
            self._exact_host.setdefault(split_host_source(redirect.source), redirect)
        else:
            rule = self._compile(redirect)
            bucket = self._regex_host if redirect.type is RedirectType.REGEX_HOST else self._regex
            bucket.append(rule)
        self._count += 1

    def match(self, host: str, path: str) -> tuple[Redirect | None, str]:
        host = normalize_host(host)

        found = self._exact_host.get((host, path)) or self._exact.get(path)
        if found is not None:
            return found, found.target

        for rules, subject in ((self._regex_host, host + path), (self._regex, path)):
            for rule in rules:
                m = rule.pattern.fullmatch(subject)
                if m is not None:
                    return rule.redirect, m.expand(rule.template)
        return None, ""

    def __len__(self) -> int:
        return self._count

    @staticmethod
    def _compile(redirect: Redirect) -> _RegexRule:
        try:
            pattern = re.compile(redirect.source)
        except re.error as exc:
            raise InvalidRuleError(
                f"invalid redirect pattern {redirect.source!r}: {exc}"
            ) from exc
        return _RegexRule(
            redirect=redirect,
            pattern=pattern,
            template=_to_template(redirect.target, pattern),
        )


__all__ = ["RedirectTable", "normalize_host", "split_host_source"]
