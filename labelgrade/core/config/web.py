from __future__ import annotations

import typing as t

import annotated_types as ant
import pydantic as p

from .base import BaseSettings


class ServeSettings(BaseSettings):
    host: p.IPvAnyAddress
    port: t.Annotated[int, ant.Gt(0), ant.Le(65535)]


class GradingWebSettings(BaseSettings):
    """Settings for the grading service consumed by the submission store and review UI."""

    backend: ServeSettings
    frontend: ServeSettings | None = None
    # bounds request size; evaluation time grows with response length
    max_response_length: t.Annotated[int, ant.Gt(0)] = 1_000_000


class WebSettings(BaseSettings):
    grading: GradingWebSettings
