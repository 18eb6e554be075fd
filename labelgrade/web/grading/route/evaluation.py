"""Grading routes used by the submission store and the review UI."""

import logging
import typing as t

from fastapi import APIRouter, Body, Depends, HTTPException, status

from labelgrade.core import di
from labelgrade.grading import evaluate_response, export_graders, GraderConfigurationError, populate_expected, \
    validate_tasks, ValidationReport
from labelgrade.model import EvaluationResult

from ..view import EvaluateRequest, GradersRequest, GradersResponse, PopulateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["grading"])


@router.post("/evaluations", operation_id="evaluate_response")
@di.inject
def evaluate(
    request: EvaluateRequest,
    max_response_length: int = Depends(di.Provide["config.web.grading.max_response_length"]),
) -> EvaluationResult:
    """Grade a response against the task's graders.

    Misconfigured graders are reported as 422 with the offending grader's
    position and name.
    """
    if request.response_length > max_response_length:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Response exceeds {max_response_length} characters",
        )
    try:
        return evaluate_response(request.response, request.graders)
    except GraderConfigurationError as e:
        logger.warning("rejected grader configuration", extra={"error": str(e), "grader_index": e.grader_index})
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e


@router.post("/graders/export", operation_id="export_graders")
def export(request: GradersRequest) -> GradersResponse:
    """Strip expected answers so graders can be shared with labelers."""
    return GradersResponse(graders=export_graders(request.graders))


@router.post("/graders/populate", operation_id="populate_graders")
def populate(request: PopulateRequest) -> GradersResponse:
    """Fill expected answers from a reviewed submission."""
    return GradersResponse(graders=populate_expected(request.graders, request.values))


@router.post("/tasks/validate", operation_id="validate_tasks")
def validate(
    bundle: dict[str, t.Any] = Body(...),  # noqa: B008
    strict: bool = False,
) -> ValidationReport:
    """Check a task bundle before import.

    Returns the full report; the caller decides whether `is_valid` blocks the
    import.
    """
    return validate_tasks(bundle, strict=strict)
