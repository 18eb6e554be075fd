"""Entry point used by every consumer of grading results."""

from __future__ import annotations

import logging
import typing as t
from collections.abc import Mapping

import pydantic as p

from labelgrade.model import EvaluationResult, FormResponse, GraderConfig, GraderResult, TextResponse

from .errors import GraderConfigurationError
from .grader import evaluate_grader
from .response import render_response
from .score import aggregate

logger = logging.getLogger(__name__)

GraderInput = GraderConfig | Mapping[str, t.Any]


def describe_validation_error(e: p.ValidationError) -> str:
    parts: list[str] = []
    for err in e.errors():
        loc = ".".join(str(part) for part in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def load_graders(graders: t.Iterable[GraderInput]) -> list[GraderConfig]:
    """Validate authored grader JSON into `GraderConfig`s.

    Raises:
        GraderConfigurationError: a grader does not match the configuration schema
    """
    if isinstance(graders, (str, bytes, Mapping)):
        raise GraderConfigurationError("graders must be a list of grader configurations")

    loaded: list[GraderConfig] = []
    for i, grader in enumerate(graders):
        if isinstance(grader, GraderConfig):
            loaded.append(grader)
            continue
        try:
            loaded.append(GraderConfig.model_validate(grader))
        except p.ValidationError as e:
            name = grader.get("name") if isinstance(grader, Mapping) else None
            raise GraderConfigurationError(
                describe_validation_error(e),
                grader_index=i,
                grader_name=name if isinstance(name, str) and name else None,
            ) from e
    return loaded


def evaluate_response(
    response: str | TextResponse | FormResponse,
    graders: t.Iterable[GraderInput],
) -> EvaluationResult:
    """Grade one response against all of a task's graders.

    Args:
        response: Raw response text, or a labeler payload to render first
        graders: The task's grader configurations, as models or authored JSON

    Returns:
        EvaluationResult with one GraderResult per grader, in order

    Raises:
        GraderConfigurationError: a grader was authored incorrectly
    """
    configs = load_graders(graders)
    text = render_response(response, configs)

    results: list[GraderResult] = []
    for i, grader in enumerate(configs):
        try:
            results.append(evaluate_grader(text, grader))
        except GraderConfigurationError as e:
            if e.grader_index is not None:
                raise
            raise GraderConfigurationError(e.args[0], grader_index=i, grader_name=e.grader_name) from e

    totals = aggregate(results)
    logger.info(
        "evaluated response",
        extra={
            "graders": len(results),
            "total_score": totals.total_score,
            "max_score": totals.max_score,
            "percentage_score": totals.percentage_score,
        },
    )
    return EvaluationResult(
        total_score=totals.total_score,
        max_score=totals.max_score,
        percentage_score=totals.percentage_score,
        passed=all(r.passed for r in results),
        grader_results=results,
    )
