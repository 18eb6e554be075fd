"""Derived evaluation records, stored verbatim as a submission's grader_results."""

from __future__ import annotations

from .base import CamelModel
from .enum import ComparatorType, ExtractionFailure, FieldType, GraderType

TypedValue = bool | int | float | str
Expectation = bool | int | float | str | dict[str, bool | int | float | str | None] | None


class FieldResult(CamelModel):
    key: str
    type: FieldType
    comparator: ComparatorType
    weight: float

    raw: str | None = None
    actual: TypedValue | None = None
    failure: ExtractionFailure | None = None
    expected: Expectation = None

    applicable: bool
    passed: bool


class GraderResult(CamelModel):
    grader_name: str
    grader_type: GraderType
    weight: float

    score: float
    max_score: float
    weighted_score: float
    passed: bool

    details: list[FieldResult] = []
    error: str | None = None


class EvaluationResult(CamelModel):
    total_score: float
    max_score: float
    percentage_score: float
    passed: bool

    grader_results: list[GraderResult] = []
