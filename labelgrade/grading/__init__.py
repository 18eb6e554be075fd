"""Response grading engine.

Extracts typed field values from a labeler's response, compares each against
its grader's expectation, and aggregates the verdicts into a weighted score.
"""

from .compare import compare, is_applicable
from .errors import GraderConfigurationError, GradingError
from .evaluate import evaluate_response, load_graders
from .export import export_graders, export_tasks, populate_expected
from .extract import coerce, ContainerFormat, extract, extract_field, Extraction, parse_container
from .grader import evaluate_grader, normalize_grader, NormalizedGrader, ScoredField
from .response import render_response
from .score import Aggregate, aggregate
from .validate import Severity, validate_graders, validate_tasks, ValidationIssue, ValidationReport

__all__ = [
    "Aggregate",
    "ContainerFormat",
    "Extraction",
    "GraderConfigurationError",
    "GradingError",
    "NormalizedGrader",
    "ScoredField",
    "Severity",
    "ValidationIssue",
    "ValidationReport",
    "aggregate",
    "coerce",
    "compare",
    "evaluate_grader",
    "evaluate_response",
    "export_graders",
    "export_tasks",
    "extract",
    "extract_field",
    "is_applicable",
    "load_graders",
    "normalize_grader",
    "parse_container",
    "populate_expected",
    "render_response",
    "validate_graders",
    "validate_tasks",
]
