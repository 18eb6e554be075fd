"""Exceptions for grading operations."""

from __future__ import annotations


class GradingError(Exception):
    """Error during a grading operation."""

    pass


class GraderConfigurationError(GradingError):
    """A grader was authored incorrectly.

    Raised instead of scoring, since it means the task is broken rather than
    the labeler's answer being wrong.
    """

    def __init__(self, message: str, *, grader_index: int | None = None, grader_name: str | None = None):
        self.grader_index = grader_index
        self.grader_name = grader_name
        super().__init__(message)

    def __str__(self) -> str:
        msg = super().__str__()
        if self.grader_index is None:
            return msg
        label = f"graders[{self.grader_index}]"
        if self.grader_name:
            label = f"{label} ({self.grader_name!r})"
        return f"{label}: {msg}"
