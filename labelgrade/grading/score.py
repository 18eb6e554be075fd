"""Weighted aggregation of grader results.

Each grader contributes `weight * score / max_score`: its declared weight,
scaled by the share of its applicable field weight the response earned. How
many fields a grader has, or how their weights are scaled, therefore never
changes how much the grader counts. Graders with nothing applicable
(`max_score == 0`) are left out of both the total and the maximum.
"""

from __future__ import annotations

import typing as t

from labelgrade.model import GraderResult


class Aggregate(t.NamedTuple):
    total_score: float
    max_score: float
    percentage_score: float


def grader_contribution(score: float, max_score: float, weight: float) -> float:
    if max_score <= 0:
        return 0.0
    return weight * score / max_score


def percentage(total_score: float, max_score: float) -> float:
    if max_score <= 0:
        return 0.0
    return min(100.0, max(0.0, total_score / max_score * 100))


def aggregate(grader_results: t.Iterable[GraderResult]) -> Aggregate:
    total_score = 0.0
    max_score = 0.0
    for result in grader_results:
        if result.max_score <= 0:
            continue
        total_score += grader_contribution(result.score, result.max_score, result.weight)
        max_score += result.weight
    return Aggregate(
        total_score=total_score,
        max_score=max_score,
        percentage_score=percentage(total_score, max_score),
    )
