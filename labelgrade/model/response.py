"""Labeler response payloads, disambiguated once at the boundary."""

from __future__ import annotations

import typing as t

import pydantic as p

from .base import FrozenModel

FormValue = str | int | float | bool | None


class TextResponse(FrozenModel):
    kind: t.Literal["text"] = "text"
    text: str


class FormResponse(FrozenModel):
    kind: t.Literal["form"] = "form"
    values: dict[str, FormValue]


Response = t.Annotated[TextResponse | FormResponse, p.Field(discriminator="kind")]
