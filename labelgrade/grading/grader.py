"""Per-grader evaluation.

`normalize_grader` collapses the two authored shapes (`structure` keyed by
name, `test_cases` keyed by id) and the whole-response graders into one list
of `ScoredField`; `evaluate_grader` extracts and compares each of them.
"""

from __future__ import annotations

import logging
import typing as t

from labelgrade.model import ComparatorConfig, ComparatorOptions, ComparatorType, FieldResult, FieldType, \
    GraderConfig, GraderResult, GraderStructureField, GraderType, JSONPrimitive, TestCase
from labelgrade.model.evaluation import Expectation

from .compare import compare, is_applicable
from .errors import GraderConfigurationError
from .extract import coerce, ContainerFormat, extract_field, MalformedContainer, parse_container
from .score import grader_contribution

logger = logging.getLogger(__name__)

CONTAINERS: dict[GraderType, ContainerFormat] = {
    GraderType.XML: ContainerFormat.XML,
    GraderType.JSON: ContainerFormat.JSON,
    GraderType.UnitTest: ContainerFormat.XML,
    GraderType.Text: ContainerFormat.Text,
    GraderType.Number: ContainerFormat.Text,
}

WHOLE_RESPONSE_KEY = "response"


class ScoredField(t.NamedTuple):
    key: str
    type: FieldType
    weight: float
    comparator: ComparatorConfig


class NormalizedGrader(t.NamedTuple):
    name: str
    type: GraderType
    weight: float
    container: ContainerFormat
    fields: tuple[ScoredField, ...]


def infer_type(value: JSONPrimitive) -> FieldType:
    if isinstance(value, bool):
        return FieldType.Boolean
    if isinstance(value, (int, float)):
        # labelers may type "15.0" for 15, which only a float field accepts
        return FieldType.Float
    return FieldType.String


def with_expected(comparator: ComparatorConfig, expected: JSONPrimitive) -> ComparatorConfig:
    config = comparator.config.model_copy(update={"expected": expected})
    return comparator.model_copy(update={"config": config})


def typed_expectation(comparator: ComparatorConfig, field_type: FieldType) -> ComparatorConfig:
    """Read a string `equals` expectation with the field's own coercion rules."""
    expected = comparator.config.expected
    if comparator.type is not ComparatorType.Equals or field_type is FieldType.String:
        return comparator
    if not isinstance(expected, str):
        return comparator
    coerced = coerce(expected, field_type)
    if coerced is None:
        return comparator
    return with_expected(comparator, coerced)


def from_structure_field(field: GraderStructureField) -> ScoredField:
    return ScoredField(
        key=field.name,
        type=field.type,
        weight=field.weight,
        comparator=typed_expectation(field.comparator, field.type),
    )


def from_test_case(case: TestCase) -> ScoredField:
    field_type = case.type or infer_type(case.expected_value)
    comparator = case.comparator
    if comparator is None:
        comparator = ComparatorConfig(type=ComparatorType.Equals, config=ComparatorOptions(expected=case.expected_value))
    elif comparator.config.expected is None and case.expected_value is not None:
        comparator = with_expected(comparator, case.expected_value)
    return ScoredField(
        key=case.id,
        type=field_type,
        weight=case.weight,
        comparator=typed_expectation(comparator, field_type),
    )


def whole_response_field(grader: GraderConfig) -> ScoredField:
    expected = grader.config.expected
    field_type = FieldType.Float if grader.type is GraderType.Number else FieldType.String
    if isinstance(expected, str) and field_type is FieldType.String:
        expected = expected.strip()
    comparator = ComparatorConfig(type=ComparatorType.Equals, config=ComparatorOptions(expected=expected))
    return ScoredField(
        key=WHOLE_RESPONSE_KEY,
        type=field_type,
        weight=grader.weight,
        comparator=typed_expectation(comparator, field_type),
    )


def normalize_grader(grader: GraderConfig) -> NormalizedGrader:
    structure = grader.config.structure
    test_cases = grader.config.test_cases

    def invalid(message: str) -> GraderConfigurationError:
        return GraderConfigurationError(message, grader_name=grader.name or None)

    if structure is not None and test_cases is not None:
        raise invalid("grader declares both structure and test_cases")

    fields: list[ScoredField]
    match grader.type:
        case GraderType.XML | GraderType.JSON:
            if structure is None:
                raise invalid(f"{grader.type.value} grader declares no structure")
            fields = [from_structure_field(f) for f in structure]
        case GraderType.UnitTest:
            if test_cases is None:
                raise invalid("unit_test grader declares no test_cases")
            fields = [from_test_case(c) for c in test_cases]
        case GraderType.Text | GraderType.Number:
            if structure is not None or test_cases is not None:
                raise invalid(f"{grader.type.value} grader compares the whole response and takes no fields")
            fields = [whole_response_field(grader)]

    return NormalizedGrader(
        name=grader.name,
        type=grader.type,
        weight=grader.weight,
        container=CONTAINERS[grader.type],
        fields=tuple(fields),
    )


def expectation(comparator: ComparatorConfig) -> Expectation:
    opts = comparator.config
    match comparator.type:
        case ComparatorType.Equals | ComparatorType.Contains:
            return opts.expected
        case ComparatorType.Range:
            return {"min": opts.min, "max": opts.max}
        case ComparatorType.Regex:
            return {"pattern": opts.pattern}


def evaluate_grader(response: str, grader: GraderConfig) -> GraderResult:
    """Grade `response` against one grader.

    Args:
        response: The labeler's raw response text
        grader: The grader configuration

    Returns:
        GraderResult with raw field-weight scores and one FieldResult per
        declared field, in declared order

    Raises:
        GraderConfigurationError: the grader was authored incorrectly
    """
    normalized = normalize_grader(grader)
    parsed = parse_container(response, normalized.container)

    error: str | None = None
    if isinstance(parsed, MalformedContainer):
        error = f"Invalid {normalized.container.value.upper()} format"
        logger.warning(
            "response container could not be parsed",
            extra={
                "grader": normalized.name,
                "container": normalized.container.value,
            },
        )

    score = 0.0
    max_score = 0.0
    details: list[FieldResult] = []
    for field in normalized.fields:
        extraction = extract_field(parsed, field.key, field.type, normalized.container)
        applicable = is_applicable(field.comparator)
        passed = applicable and compare(field.comparator, extraction.value)

        if applicable:
            max_score += field.weight
            if passed:
                score += field.weight

        details.append(
            FieldResult(
                key=field.key,
                type=field.type,
                comparator=field.comparator.type,
                weight=field.weight,
                raw=extraction.raw,
                actual=extraction.value,
                failure=extraction.failure,
                expected=expectation(field.comparator),
                applicable=applicable,
                passed=passed,
            )
        )

    result = GraderResult(
        grader_name=normalized.name,
        grader_type=normalized.type,
        weight=normalized.weight,
        score=score,
        max_score=max_score,
        weighted_score=grader_contribution(score, max_score, normalized.weight),
        passed=all(d.passed for d in details if d.applicable),
        details=details,
        error=error,
    )
    logger.debug(
        "graded response",
        extra={
            "grader": result.grader_name,
            "score": result.score,
            "max_score": result.max_score,
            "passed": result.passed,
        },
    )
    return result
