"""View models for the grading web application."""

__all__ = [
    "EvaluateRequest",
    "GradersRequest",
    "GradersResponse",
    "PopulateRequest",
]

from .evaluation import EvaluateRequest, GradersRequest, GradersResponse, PopulateRequest
