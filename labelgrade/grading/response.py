"""Rendering of fill-in-the-blank form answers into gradable text."""

from __future__ import annotations

import json
import typing as t

from labelgrade.model import FormResponse, GraderConfig, GraderType, TextResponse

from .compare import as_text


def structured_grader(graders: t.Iterable[GraderConfig]) -> GraderConfig | None:
    """The grader whose fields the labeler's form was built from."""
    for grader in graders:
        if grader.config.structure or grader.config.test_cases:
            return grader
    return None


def render_form(values: t.Mapping[str, t.Any], grader_type: GraderType | None) -> str:
    if grader_type is GraderType.JSON:
        return json.dumps(dict(values), indent=2)
    return "\n".join(f"<{k}>{'' if v is None else as_text(v)}</{k}>" for k, v in values.items())


def render_response(response: str | TextResponse | FormResponse, graders: t.Iterable[GraderConfig]) -> str:
    match response:
        case str():
            return response
        case TextResponse():
            return response.text
        case FormResponse():
            grader = structured_grader(graders)
            return render_form(response.values, grader.type if grader is not None else None)
