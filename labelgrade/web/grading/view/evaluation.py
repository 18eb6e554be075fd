"""View models for grading requests."""

from __future__ import annotations

import typing as t

import pydantic as p

from labelgrade.model import FormResponse, Response, TextResponse

AuthoredGrader = dict[str, t.Any]


class EvaluateRequest(p.BaseModel):
    """Request to grade one response against a task's graders.

    Graders are accepted as authored JSON so that configuration mistakes are
    reported with the offending grader's position.
    """

    response: str | Response
    graders: list[AuthoredGrader]

    @property
    def response_length(self) -> int:
        match self.response:
            case str():
                return len(self.response)
            case TextResponse():
                return len(self.response.text)
            case FormResponse():
                return sum(len(str(v)) for v in self.response.values.values() if v is not None)


class GradersRequest(p.BaseModel):
    """Graders to strip of their expected answers."""

    graders: list[AuthoredGrader]


class PopulateRequest(p.BaseModel):
    """Graders to fill from a reviewed submission's form values."""

    graders: list[AuthoredGrader]
    values: dict[str, t.Any]


class GradersResponse(p.BaseModel):
    graders: list[AuthoredGrader]
