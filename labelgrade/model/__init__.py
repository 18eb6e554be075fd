__all__ = [
    # Base
    "BaseModel",
    "CamelModel",
    "FrozenModel",
    # Enums
    "ComparatorType",
    "DeploymentEnvironment",
    "ExtractionFailure",
    "FieldType",
    "GraderType",
    # Grader configuration
    "ComparatorConfig",
    "ComparatorOptions",
    "GraderConfig",
    "GraderOptions",
    "GraderStructureField",
    "JSONPrimitive",
    "TestCase",
    # Evaluation
    "EvaluationResult",
    "FieldResult",
    "GraderResult",
    "TypedValue",
    # Responses
    "FormResponse",
    "Response",
    "TextResponse",
]

from .base import BaseModel, CamelModel, FrozenModel
from .enum import ComparatorType, DeploymentEnvironment, ExtractionFailure, FieldType, GraderType
from .evaluation import EvaluationResult, FieldResult, GraderResult, TypedValue
from .grader import ComparatorConfig, ComparatorOptions, GraderConfig, GraderOptions, GraderStructureField, \
    JSONPrimitive, TestCase
from .response import FormResponse, Response, TextResponse
