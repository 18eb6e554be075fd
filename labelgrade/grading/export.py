"""Engine-adjacent transforms of grader JSON for task export.

These work on the authored JSON rather than on `GraderConfig` so that keys
the engine does not know about, and the order of every key, survive the
round trip. Inputs are never mutated.
"""

from __future__ import annotations

import copy
import math
import typing as t
from collections.abc import Mapping

from labelgrade.model import FieldType, GraderConfig

from .compare import as_text
from .errors import GradingError
from .extract import coerce, FLOAT_PATTERN, INT_PATTERN

JSONObject = dict[str, t.Any]


def to_json(grader: GraderConfig | Mapping[str, t.Any]) -> JSONObject:
    if isinstance(grader, GraderConfig):
        return grader.model_dump(mode="json", exclude_unset=True)
    return copy.deepcopy(dict(grader))


def _fields(grader: JSONObject, key: str) -> list[JSONObject]:
    config = grader.get("config")
    if not isinstance(config, dict):
        return []
    items = t.cast(dict[str, t.Any], config).get(key)
    if not isinstance(items, list):
        return []
    return [item for item in t.cast(list[t.Any], items) if isinstance(item, dict)]


def _set_comparator_expected(item: JSONObject, value: t.Any) -> None:
    comparator = item.get("comparator")
    if not isinstance(comparator, dict):
        return
    comparator = t.cast(JSONObject, comparator)
    config = comparator.get("config")
    if isinstance(config, dict):
        t.cast(JSONObject, config)["expected"] = value
    elif config is None:
        comparator["config"] = {"expected": value}


def clear_expected(grader: GraderConfig | Mapping[str, t.Any]) -> JSONObject:
    out = to_json(grader)
    for field in _fields(out, "structure"):
        _set_comparator_expected(field, None)
    for case in _fields(out, "test_cases"):
        case["expected_value"] = None
        if "comparator" in case:
            _set_comparator_expected(case, None)
    config = out.get("config")
    if out.get("type") in ("text", "number") and isinstance(config, dict) and "expected" in config:
        t.cast(JSONObject, config)["expected"] = None
    return out


def export_graders(graders: t.Iterable[GraderConfig | Mapping[str, t.Any]]) -> list[JSONObject]:
    """A template copy of `graders` with every expected answer set to null."""
    return [clear_expected(g) for g in graders]


def export_tasks(bundle: Mapping[str, t.Any]) -> JSONObject:
    """Apply `export_graders` to every task of a `{"tasks": [...]}` bundle."""
    tasks = bundle.get("tasks")
    if not isinstance(tasks, list):
        raise GradingError('task bundle must have a "tasks" list')

    out = copy.deepcopy(dict(bundle))
    for task in t.cast(list[t.Any], out["tasks"]):
        if isinstance(task, dict) and isinstance(task.get("graders"), list):
            graders = t.cast(list[t.Any], task["graders"])
            task["graders"] = [clear_expected(g) if isinstance(g, Mapping) else g for g in graders]
    return out


def _lookup(values: Mapping[str, t.Any], *keys: str) -> t.Any:
    for key in keys:
        value = values.get(key)
        if value is not None:
            return value
    return None


def field_expected(value: t.Any, field_type: str | None) -> t.Any:
    """Convert a reviewed form value into an expectation of `field_type`."""
    if value is None or value == "":
        return None
    try:
        ftype = FieldType(field_type)
    except ValueError:
        ftype = FieldType.String

    match ftype:
        case FieldType.Int | FieldType.Float:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return None if isinstance(value, float) and not math.isfinite(value) else value
            return coerce(as_text(value), ftype)
        case FieldType.Boolean:
            if isinstance(value, bool):
                return value
            return as_text(value).lower() == "true"
        case FieldType.String:
            return as_text(value)


def inferred_expected(value: t.Any) -> t.Any:
    """Read a reviewed test case answer as a number, boolean or string."""
    if value is None or value == "":
        return None
    s = as_text(value)
    stripped = s.strip()
    if INT_PATTERN.fullmatch(stripped):
        return coerce(stripped, FieldType.Int)
    if FLOAT_PATTERN.fullmatch(stripped):
        # None when the number does not fit, e.g. 1e999
        return coerce(stripped, FieldType.Float)
    if s.lower() in ("true", "false"):
        return s.lower() == "true"
    return s


def populate_expected(
    graders: t.Iterable[GraderConfig | Mapping[str, t.Any]],
    values: Mapping[str, t.Any],
) -> list[JSONObject]:
    """Fill expected answers from a reviewed submission's form values.

    Structure fields are looked up by id, then name, then their lower-cased
    forms; test cases by id, then lower-cased id.
    """
    populated: list[JSONObject] = []
    for grader in graders:
        out = to_json(grader)
        for field in _fields(out, "structure"):
            fid = str(field.get("id", ""))
            name = str(field.get("name", ""))
            value = _lookup(values, fid, name, fid.lower(), name.lower())
            _set_comparator_expected(field, field_expected(value, field.get("type")))
        for case in _fields(out, "test_cases"):
            cid = str(case.get("id", ""))
            case["expected_value"] = inferred_expected(_lookup(values, cid, cid.lower()))
        populated.append(out)
    return populated
