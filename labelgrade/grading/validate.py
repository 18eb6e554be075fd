"""Validation of authored task bundles and grader lists.

Checks what an admin uploads before it is frozen into a task, reporting
every problem found instead of stopping at the first. Errors include every
schema mistake `evaluate_response` rejects as a configuration error (unknown
types, missing fields, weights or bounds that are not numbers), plus
expectations that load but can never pass. Warnings flag graders that load
but score nothing, such as a comparator with no expectation.
"""

from __future__ import annotations

import enum
import re
import typing as t
from collections.abc import Mapping

import pydantic as p

from labelgrade.model import BaseModel, ComparatorType, FieldType, GraderType

from .extract import coerce

GRADER_TYPES = {g.value for g in GraderType}
FIELD_TYPES = {f.value for f in FieldType} | {"bool"}
COMPARATOR_TYPES = {c.value for c in ComparatorType}
STRUCTURED_KEYS: dict[str, str] = {
    GraderType.XML.value: "structure",
    GraderType.JSON.value: "structure",
    GraderType.UnitTest.value: "test_cases",
}


class Severity(enum.Enum):
    Critical = "CRITICAL"
    Error = "ERROR"
    Warning = "WARNING"
    Info = "INFO"


class ValidationIssue(BaseModel):
    severity: Severity
    path: str
    message: str


class ValidationReport(BaseModel):
    issues: list[ValidationIssue] = []
    task_count: int = 0
    grader_count: int = 0
    strict: bool = False

    def count(self, severity: Severity) -> int:
        return sum(1 for i in self.issues if i.severity is severity)

    @p.computed_field
    def critical_count(self) -> int:
        return self.count(Severity.Critical)

    @p.computed_field
    def error_count(self) -> int:
        return self.count(Severity.Error)

    @p.computed_field
    def warning_count(self) -> int:
        return self.count(Severity.Warning)

    @p.computed_field
    def is_valid(self) -> bool:
        blocking = self.count(Severity.Critical) + self.count(Severity.Error)
        if self.strict:
            blocking += self.count(Severity.Warning)
        return blocking == 0


class Issues(list[ValidationIssue]):
    def add(self, severity: Severity, path: str, message: str) -> None:
        self.append(ValidationIssue(severity=severity, path=path, message=message))


def is_number(v: t.Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def type_name(v: t.Any) -> str:
    if v is None:
        return "null"
    if isinstance(v, bool):
        return "boolean"
    if is_number(v):
        return "number"
    if isinstance(v, str):
        return "string"
    if isinstance(v, list):
        return "array"
    return "object"


def _required_str(obj: Mapping[str, t.Any], key: str, path: str, issues: Issues) -> str | None:
    if key not in obj:
        issues.add(Severity.Critical, path, f"Missing required field: {key}")
        return None
    value = obj[key]
    if not isinstance(value, str) or not value.strip():
        issues.add(Severity.Error, f"{path}.{key}", f'Field "{key}" must be non-empty string')
        return None
    return value


def _weight(obj: Mapping[str, t.Any], path: str, issues: Issues) -> None:
    if "weight" not in obj:
        issues.add(Severity.Info, path, "No weight given, defaulting to 1")
        return
    weight = obj["weight"]
    if isinstance(weight, str):
        issues.add(Severity.Error, f"{path}.weight", f'Field "weight" is string "{weight}", should be number')
    elif not is_number(weight):
        issues.add(Severity.Error, f"{path}.weight", f'Field "weight" must be a number, got {type_name(weight)}')
    elif weight < 0:
        issues.add(Severity.Error, f"{path}.weight", 'Field "weight" must not be negative')
    elif weight == 0:
        issues.add(Severity.Warning, f"{path}.weight", "Zero weight never contributes to the score")


def _expected_matches_type(expected: t.Any, field_type: str) -> bool:
    ftype = FieldType(field_type)
    match ftype:
        case FieldType.Int:
            if is_number(expected):
                return float(expected).is_integer()
            return isinstance(expected, str) and coerce(expected, ftype) is not None
        case FieldType.Float:
            return is_number(expected) or (isinstance(expected, str) and coerce(expected, ftype) is not None)
        case FieldType.Boolean:
            return isinstance(expected, bool) or (isinstance(expected, str) and coerce(expected, ftype) is not None)
        case FieldType.String:
            return isinstance(expected, str)


def validate_comparator(comparator: t.Any, field_type: str | None, path: str, issues: Issues) -> None:
    if not isinstance(comparator, Mapping):
        issues.add(Severity.Error, path, 'Field "comparator" must be an object')
        return
    comparator = t.cast(Mapping[str, t.Any], comparator)
    if "type" not in comparator:
        issues.add(Severity.Error, path, "Missing required field: type")
        return
    ctype = comparator["type"]
    if not isinstance(ctype, str) or ctype not in COMPARATOR_TYPES:
        issues.add(
            Severity.Error,
            f"{path}.type",
            f'Invalid comparator type "{ctype}". Must be one of: {", ".join(sorted(COMPARATOR_TYPES))}',
        )
        return

    config = comparator.get("config", {})
    if config is None:
        config = {}
    if not isinstance(config, Mapping):
        issues.add(Severity.Error, f"{path}.config", 'Field "config" must be an object')
        return
    config = t.cast(Mapping[str, t.Any], config)

    match ComparatorType(ctype):
        case ComparatorType.Equals:
            expected = config.get("expected")
            if expected is None:
                issues.add(Severity.Warning, f"{path}.config", "No expected value, field will not be scored")
            elif field_type is not None and not _expected_matches_type(expected, field_type):
                issues.add(
                    Severity.Error,
                    f"{path}.config.expected",
                    f"Expected value {expected!r} can never equal a {field_type} field",
                )
        case ComparatorType.Contains:
            expected = config.get("expected")
            if expected is None:
                issues.add(Severity.Warning, f"{path}.config", "No expected value, field will not be scored")
            elif isinstance(expected, (list, dict)):
                issues.add(Severity.Error, f"{path}.config.expected", "Expected value must be a primitive")
        case ComparatorType.Range:
            lo, hi = config.get("min"), config.get("max")
            if lo is None and hi is None:
                issues.add(Severity.Warning, f"{path}.config", "No min or max, field will not be scored")
            for key, bound in (("min", lo), ("max", hi)):
                if bound is not None and not is_number(bound):
                    issues.add(Severity.Error, f"{path}.config.{key}", f'Field "{key}" must be a number')
            if is_number(lo) and is_number(hi) and lo > hi:
                issues.add(Severity.Error, f"{path}.config", f"min ({lo}) is greater than max ({hi})")
            if field_type in (FieldType.String.value, FieldType.Boolean.value, "bool"):
                issues.add(Severity.Warning, path, f"range never passes a {field_type} field")
        case ComparatorType.Regex:
            pattern = config.get("pattern")
            if pattern is None or pattern == "":
                issues.add(Severity.Warning, f"{path}.config", "No pattern, field will not be scored")
            elif not isinstance(pattern, str):
                issues.add(Severity.Error, f"{path}.config.pattern", 'Field "pattern" must be a string')
            else:
                try:
                    re.compile(pattern)
                except re.error as e:
                    issues.add(Severity.Error, f"{path}.config.pattern", f"Invalid regular expression: {e}")


def _field_type(item: Mapping[str, t.Any], path: str, issues: Issues, required: bool) -> str | None:
    if "type" not in item or item["type"] is None:
        if required:
            issues.add(Severity.Critical, path, "Missing required field: type")
        return None
    ftype = item["type"]
    if not isinstance(ftype, str) or ftype not in FIELD_TYPES:
        issues.add(
            Severity.Error,
            f"{path}.type",
            f'Invalid type "{ftype}". Must be one of: {", ".join(sorted(FIELD_TYPES))}',
        )
        return None
    return ftype


def validate_structure_field(item: t.Any, path: str, issues: Issues) -> str | None:
    if not isinstance(item, Mapping):
        issues.add(Severity.Critical, path, "Structure item must be an object")
        return None
    item = t.cast(Mapping[str, t.Any], item)
    _required_str(item, "id", path, issues)
    name = _required_str(item, "name", path, issues)
    ftype = _field_type(item, path, issues, required=True)
    _weight(item, path, issues)
    if "comparator" not in item:
        issues.add(Severity.Critical, path, "Missing required field: comparator")
    else:
        validate_comparator(item["comparator"], ftype, f"{path}.comparator", issues)
    return name


def validate_test_case(item: t.Any, path: str, issues: Issues) -> str | None:
    if not isinstance(item, Mapping):
        issues.add(Severity.Critical, path, "Test case must be an object")
        return None
    item = t.cast(Mapping[str, t.Any], item)
    cid = _required_str(item, "id", path, issues)
    ftype = _field_type(item, path, issues, required=False)
    _weight(item, path, issues)
    if "comparator" in item and item["comparator"] is not None:
        comparator = item["comparator"]
        if (
            isinstance(comparator, Mapping)
            and item.get("expected_value") is not None
            and isinstance(comparator.get("config"), Mapping)
            and comparator["config"].get("expected") is None
        ):
            # expected_value fills in for the comparator's missing expectation
            comparator = {**comparator, "config": {**comparator["config"], "expected": item["expected_value"]}}
        validate_comparator(comparator, ftype, f"{path}.comparator", issues)
    elif item.get("expected_value") is None:
        issues.add(Severity.Warning, path, "No expected_value, test case will not be scored")
    return cid


def validate_grader(grader: t.Any, path: str, issues: Issues) -> None:
    if not isinstance(grader, Mapping):
        issues.add(Severity.Critical, path, "Grader must be an object")
        return
    grader = t.cast(Mapping[str, t.Any], grader)
    if "type" not in grader:
        issues.add(Severity.Critical, path, "Missing required field: type")
        return
    gtype = grader["type"]
    if not isinstance(gtype, str) or gtype not in GRADER_TYPES:
        issues.add(
            Severity.Error,
            f"{path}.type",
            f'Invalid grader type "{gtype}". Must be one of: {", ".join(sorted(GRADER_TYPES))}',
        )
        return

    if "name" not in grader:
        issues.add(Severity.Warning, path, "Missing recommended field: name")
    elif not isinstance(grader["name"], str):
        issues.add(Severity.Error, f"{path}.name", 'Field "name" must be a string')
    _weight(grader, path, issues)

    config = grader.get("config")
    if config is None:
        if gtype in STRUCTURED_KEYS:
            issues.add(Severity.Critical, path, "Missing required field: config")
        else:
            issues.add(Severity.Warning, path, "No expected value, grader will not be scored")
        return
    if not isinstance(config, Mapping):
        issues.add(Severity.Critical, f"{path}.config", 'Field "config" must be an object')
        return
    config = t.cast(Mapping[str, t.Any], config)

    declared = [k for k in ("structure", "test_cases") if config.get(k) is not None]
    if len(declared) > 1:
        issues.add(Severity.Error, f"{path}.config", "Grader declares both structure and test_cases")
        return

    key = STRUCTURED_KEYS.get(gtype)
    if key is None:
        if declared:
            issues.add(Severity.Error, f"{path}.config.{declared[0]}", f"{gtype} grader takes no fields")
        elif config.get("expected") is None:
            issues.add(Severity.Warning, f"{path}.config", "No expected value, grader will not be scored")
        return

    if key not in declared:
        issues.add(Severity.Critical, f"{path}.config", f"Missing required field: {key}")
        return
    items = config[key]
    if not isinstance(items, list):
        issues.add(Severity.Critical, f"{path}.config.{key}", f'Field "{key}" must be an array')
        return
    items = t.cast(list[t.Any], items)
    if not items:
        issues.add(Severity.Warning, f"{path}.config.{key}", f'Field "{key}" is empty, grader will not be scored')
        return

    validate_item = validate_structure_field if key == "structure" else validate_test_case
    seen: set[str] = set()
    for i, item in enumerate(items):
        item_path = f"{path}.config.{key}[{i}]"
        field_key = validate_item(item, item_path, issues)
        if field_key is None:
            continue
        if field_key in seen:
            issues.add(Severity.Warning, item_path, f'Duplicate field key "{field_key}" reads the same answer twice')
        seen.add(field_key)


def _graders(graders: t.Any, path: str, issues: Issues) -> int:
    if not isinstance(graders, list):
        issues.add(Severity.Critical, path, 'Field "graders" must be an array')
        return 0
    graders = t.cast(list[t.Any], graders)
    if not graders:
        issues.add(Severity.Error, path, 'Field "graders" must be non-empty array')
        return 0
    for i, grader in enumerate(graders):
        validate_grader(grader, f"{path}[{i}]", issues)
    return len(graders)


def validate_task(task: t.Any, path: str, issues: Issues) -> int:
    if not isinstance(task, Mapping):
        issues.add(Severity.Critical, path, "Task must be an object")
        return 0
    task = t.cast(Mapping[str, t.Any], task)
    _required_str(task, "name", path, issues)
    _required_str(task, "prompt", path, issues)
    if "graders" not in task:
        issues.add(Severity.Critical, path, "Missing required field: graders")
        return 0
    return _graders(task["graders"], f"{path}.graders", issues)


def validate_tasks(data: t.Any, strict: bool = False) -> ValidationReport:
    """Validate a `{"tasks": [...]}` bundle.

    Args:
        data: Decoded bundle JSON
        strict: Treat warnings as making the bundle invalid

    Returns:
        ValidationReport listing every issue found
    """
    issues = Issues()
    if not isinstance(data, Mapping):
        issues.add(Severity.Critical, "root", "Root must be an object")
        return ValidationReport(issues=issues, strict=strict)
    data = t.cast(Mapping[str, t.Any], data)
    if "tasks" not in data:
        issues.add(Severity.Critical, "root", "Missing required field: tasks")
        return ValidationReport(issues=issues, strict=strict)
    tasks = data["tasks"]
    if not isinstance(tasks, list):
        issues.add(Severity.Critical, "root", 'Field "tasks" must be an array')
        return ValidationReport(issues=issues, strict=strict)

    tasks = t.cast(list[t.Any], tasks)
    grader_count = 0
    for i, task in enumerate(tasks):
        grader_count += validate_task(task, f"tasks[{i}]", issues)
    return ValidationReport(issues=issues, task_count=len(tasks), grader_count=grader_count, strict=strict)


def validate_graders(graders: t.Any, strict: bool = False) -> ValidationReport:
    """Validate a bare grader list, as stored on a task."""
    issues = Issues()
    grader_count = _graders(graders, "graders", issues)
    return ValidationReport(issues=issues, grader_count=grader_count, strict=strict)
