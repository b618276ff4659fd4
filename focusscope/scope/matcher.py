"""Scope override parsing and include/exclude glob matching."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

from ..models import ScopeConfig

_SCOPE_KEYS = ("include", "exclude")


class FormatError(ValueError):
    """Raised when a scope override string is malformed."""


class _BadPattern(ValueError):
    pass


def parse_scope_override(text: str | None) -> Optional[ScopeConfig]:
    """Parse ``include=a/**,b/**;exclude=c/**`` into a ScopeConfig.

    Empty input means "no override" and returns None. A trailing ``;`` is
    allowed; any other empty clause is malformed. When a key repeats, the
    last clause wins.
    """
    if text is None or not text.strip():
        return None

    clauses = text.split(";")
    while clauses and not clauses[-1].strip():
        clauses.pop()

    patterns: dict[str, List[str]] = {key: [] for key in _SCOPE_KEYS}
    for clause in clauses:
        clause = clause.strip()
        if "=" not in clause:
            raise FormatError(
                f"invalid scope format: '{clause}'. Expected 'include=...' or 'exclude=...'"
            )
        key, value = clause.split("=", 1)
        key = key.strip()
        if key not in patterns:
            raise FormatError(f"unknown scope key: '{key}'. Expected 'include' or 'exclude'")
        values = [part.strip() for part in value.split(",") if part.strip()]
        if not values:
            raise FormatError(f"no patterns given for '{key}'")
        patterns[key] = values

    return ScopeConfig(include=tuple(patterns["include"]), exclude=tuple(patterns["exclude"]))


def match_glob(pattern: str, path: str) -> bool:
    """Return True when ``path`` matches ``pattern``; invalid patterns never match."""
    compiled = compile_glob(pattern)
    if compiled is None:
        return False
    return compiled.fullmatch(path) is not None


def match_scope(path: str, scope: ScopeConfig | None) -> bool:
    """Return True when ``path`` belongs to ``scope``."""
    if scope is None:
        return True
    return ScopeMatcher(scope).matches(path)


class ScopeMatcher:
    """Pre-compiled include/exclude rules for matching many paths."""

    def __init__(self, scope: ScopeConfig | None) -> None:
        self.scope = scope
        self._include = _compile_all(scope.include) if scope else ()
        self._exclude = _compile_all(scope.exclude) if scope else ()
        self._has_include = bool(scope and scope.include)

    def include_matches(self, path: str) -> bool:
        if not self._has_include:
            return True
        return any(regex.fullmatch(path) for regex in self._include)

    def exclude_matches(self, path: str) -> bool:
        return any(regex.fullmatch(path) for regex in self._exclude)

    def matches(self, path: str) -> bool:
        if self.scope is None:
            return True
        if not self.include_matches(path):
            return False
        return not self.exclude_matches(path)

    def filter(self, paths: Iterable[str]) -> List[str]:
        return [path for path in paths if self.matches(path)]


def _compile_all(patterns: Sequence[str]) -> Tuple[Pattern[str], ...]:
    compiled = (compile_glob(pattern) for pattern in patterns)
    return tuple(regex for regex in compiled if regex is not None)


@lru_cache(maxsize=1024)
def compile_glob(pattern: str) -> Optional[Pattern[str]]:
    """Compile a doublestar glob into a regex, or None when the syntax is invalid."""
    try:
        return re.compile(_translate(pattern), re.DOTALL)
    except (_BadPattern, re.error):
        return None


def is_valid_glob(pattern: str) -> bool:
    return compile_glob(pattern) is not None


# ----------------------------------------------------------------------
# Glob translation
#
# ``*`` and ``?`` never cross a ``/``. ``**`` spanning a whole segment matches
# zero or more directories, so ``src/**`` also matches ``src`` itself.


def _translate(pattern: str) -> str:
    out: List[str] = []
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            if (
                pattern.startswith("**", i)
                and (i == 0 or pattern[i - 1] == "/")
                and (i + 2 == n or pattern[i + 2] == "/")
            ):
                if i + 2 == n:
                    if out and out[-1] == "/":
                        out.pop()
                        out.append("(?:/.*)?")
                    else:
                        out.append(".*")
                    i += 2
                else:
                    out.append("(?:[^/]*/)*")
                    i += 3
                continue
            while i < n and pattern[i] == "*":
                i += 1
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
            i += 1
        elif ch == "[":
            end = _find_class_end(pattern, i)
            out.append(_translate_class(pattern[i + 1 : end]))
            i = end + 1
        elif ch == "{":
            end = _find_brace_end(pattern, i)
            alternatives = _split_alternatives(pattern[i + 1 : end])
            out.append("(?:" + "|".join(_translate(alt) for alt in alternatives) + ")")
            i = end + 1
        elif ch == "\\":
            if i + 1 >= n:
                raise _BadPattern("dangling escape")
            out.append(re.escape(pattern[i + 1]))
            i += 2
        elif ch == "/":
            out.append("/")
            i += 1
        else:
            out.append(re.escape(ch))
            i += 1
    return "".join(out)


def _find_class_end(pattern: str, start: int) -> int:
    j = start + 1
    n = len(pattern)
    if j < n and pattern[j] in "!^":
        j += 1
    if j < n and pattern[j] == "]":
        j += 1
    while j < n:
        if pattern[j] == "\\":
            j += 2
            continue
        if pattern[j] == "]":
            return j
        j += 1
    raise _BadPattern("unterminated character class")


def _translate_class(body: str) -> str:
    negate = bool(body) and body[0] in "!^"
    if negate:
        body = body[1:]
    if not body:
        raise _BadPattern("empty character class")
    parts: List[str] = []
    k = 0
    while k < len(body):
        ch = body[k]
        if ch == "\\" and k + 1 < len(body):
            parts.append(re.escape(body[k + 1]))
            k += 2
            continue
        parts.append("-" if ch == "-" else re.escape(ch))
        k += 1
    # A class never matches the separator, negated or not.
    if negate:
        return "(?!/)[^" + "".join(parts) + "]"
    return "(?!/)[" + "".join(parts) + "]"


def _find_brace_end(pattern: str, start: int) -> int:
    depth = 0
    j = start
    n = len(pattern)
    while j < n:
        ch = pattern[j]
        if ch == "\\":
            j += 2
            continue
        if ch == "[":
            j = _find_class_end(pattern, j) + 1
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return j
        j += 1
    raise _BadPattern("unterminated alternation")


def _split_alternatives(body: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    j = 0
    while j < len(body):
        ch = body[j]
        if ch == "\\" and j + 1 < len(body):
            current.append(body[j : j + 2])
            j += 2
            continue
        if ch == "[":
            end = _find_class_end(body, j)
            current.append(body[j : end + 1])
            j = end + 1
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
            j += 1
            continue
        current.append(ch)
        j += 1
    parts.append("".join(current))
    return parts


__all__ = [
    "FormatError",
    "ScopeMatcher",
    "compile_glob",
    "is_valid_glob",
    "match_glob",
    "match_scope",
    "parse_scope_override",
]
