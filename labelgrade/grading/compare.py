"""Comparators: pure pass/fail rules over an extracted, typed value.

Every function here is total. A value that failed extraction never passes,
and a comparator whose expectation is absent is not applicable rather than
failed (see `is_applicable`).

Note that `equals` on floats is exact, so `0.1 + 0.2` typed by a labeler as
`0.30000000000000004` will not equal an expected `0.3`. Use `range` for
tolerant numeric answers.

`contains` and `regex` see numbers as a labeler would have typed them, so a
float field holding 5.0 matches `^5$`.
"""

from __future__ import annotations

import functools
import re
import typing as t

from labelgrade.model import ComparatorConfig, ComparatorType, JSONPrimitive, TypedValue


def is_number(v: t.Any) -> t.TypeGuard[int | float]:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def as_text(v: TypedValue | JSONPrimitive) -> str:
    """Text form used by `contains` and `regex`: booleans as true/false, 5.0 as 5."""
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, float) and v.is_integer() and abs(v) < 1e21:
        return str(int(v))
    return str(v)


@functools.lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern)
    except (re.error, RecursionError, OverflowError):
        return None


def is_applicable(comparator: ComparatorConfig) -> bool:
    """Whether the comparator carries the expectation it needs to score."""
    opts = comparator.config
    match comparator.type:
        case ComparatorType.Equals | ComparatorType.Contains:
            return opts.expected is not None
        case ComparatorType.Range:
            return opts.min is not None or opts.max is not None
        case ComparatorType.Regex:
            return bool(opts.pattern)


def equals(actual: TypedValue, expected: JSONPrimitive) -> bool:
    if expected is None:
        return False
    if isinstance(actual, bool) or isinstance(expected, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual is expected
    if is_number(actual) and is_number(expected):
        return actual == expected
    if isinstance(actual, str) and isinstance(expected, str):
        return actual == expected
    return False


def contains(actual: TypedValue, expected: JSONPrimitive) -> bool:
    if expected is None:
        return False
    return as_text(expected) in as_text(actual)


def in_range(actual: TypedValue, lo: int | float | None, hi: int | float | None) -> bool:
    if not is_number(actual) or (lo is None and hi is None):
        return False
    if lo is not None and actual < lo:
        return False
    if hi is not None and actual > hi:
        return False
    return True


def matches(actual: TypedValue, pattern: str | None) -> bool:
    if not pattern:
        return False
    compiled = _compile(pattern)
    if compiled is None:
        return False
    return compiled.search(as_text(actual)) is not None


def compare(comparator: ComparatorConfig, actual: TypedValue | None) -> bool:
    """Verdict for `actual` under `comparator`; None (a failed extraction) never passes."""
    if actual is None:
        return False

    opts = comparator.config
    match comparator.type:
        case ComparatorType.Equals:
            return equals(actual, opts.expected)
        case ComparatorType.Contains:
            return contains(actual, opts.expected)
        case ComparatorType.Range:
            return in_range(actual, opts.min, opts.max)
        case ComparatorType.Regex:
            return matches(actual, opts.pattern)
