"""Grader configuration authored by admins and frozen into a task record."""

from __future__ import annotations

import typing as t

import annotated_types as ant
import pydantic as p

from .base import FrozenModel
from .enum import ComparatorType, FieldType, GraderType

JSONPrimitive = str | int | float | bool | None
# strict: a weight or bound authored as "2" is a configuration error
Number = p.StrictInt | p.StrictFloat
Weight = t.Annotated[p.StrictFloat, ant.Ge(0)]


class ComparatorOptions(FrozenModel):
    model_config = p.ConfigDict(extra="allow")

    expected: JSONPrimitive = None
    min: Number | None = None
    max: Number | None = None
    pattern: str | None = None


class ComparatorConfig(FrozenModel):
    type: ComparatorType
    config: ComparatorOptions = ComparatorOptions()


class GraderStructureField(FrozenModel):
    model_config = p.ConfigDict(extra="allow")

    id: str
    name: str
    type: FieldType
    weight: Weight = 1.0
    comparator: ComparatorConfig


class TestCase(FrozenModel):
    """A fill-in answer of a unit_test grader, keyed by its id."""

    __test__: t.ClassVar[bool] = False

    model_config = p.ConfigDict(extra="allow")

    id: str
    type: FieldType | None = None
    weight: Weight = 1.0
    expected_value: JSONPrimitive = None
    comparator: ComparatorConfig | None = None


class GraderOptions(FrozenModel):
    model_config = p.ConfigDict(extra="allow")

    structure: list[GraderStructureField] | None = None
    test_cases: list[TestCase] | None = None
    # whole-response expectation of text and number graders
    expected: JSONPrimitive = None


class GraderConfig(FrozenModel):
    type: GraderType
    name: str = ""
    weight: Weight = 1.0
    config: GraderOptions = GraderOptions()
