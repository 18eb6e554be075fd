"""Pytest fixtures for labelgrade tests.

Grading functions are pure and need no fixtures; the container, app and client
fixtures boot the Test environment for API and CLI tests.

Usage:
    def test_evaluate(client: TestClient):
        response = client.post("/api/evaluations", json={...})
        assert response.status_code == 200
"""

from __future__ import annotations

import os
import typing as t
from pathlib import Path

import pydantic as p
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import labelgrade
from labelgrade.core import LabelgradeContainer
from labelgrade.model import DeploymentEnvironment, GraderConfig

ConfigRoot = Path(os.path.dirname(labelgrade.__file__)).parent / "config"


@pytest.fixture(scope="session")
def container() -> t.Generator[LabelgradeContainer]:
    """Boot the DI container for the test session.

    Uses the Test environment, which reads config/env.d/test/.
    """
    ct = LabelgradeContainer()

    LabelgradeContainer.boot(
        ct,
        debug=True,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{ConfigRoot}"),
        override=(),
    )

    yield ct

    ct.shutdown_resources()


@pytest.fixture(scope="session")
def app(container: LabelgradeContainer) -> FastAPI:
    """Create the FastAPI application from the booted container."""
    from labelgrade.core.config import GradingWebSettings
    from labelgrade.web.grading.main import _create_app  # pyright: ignore[reportPrivateUsage]

    return _create_app(config=GradingWebSettings(**container.config.web.grading()), env=DeploymentEnvironment.Test)


@pytest.fixture
def client(app: FastAPI) -> t.Generator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def xml_grader() -> dict[str, t.Any]:
    """A two-field XML grader as an admin would author it."""
    return {
        "type": "xml",
        "name": "Answer fields",
        "weight": 1,
        "config": {
            "structure": [
                {
                    "id": "f1",
                    "name": "city",
                    "type": "string",
                    "weight": 1,
                    "comparator": {"type": "equals", "config": {"expected": "Paris"}},
                },
                {
                    "id": "f2",
                    "name": "population",
                    "type": "int",
                    "weight": 1,
                    "comparator": {"type": "range", "config": {"min": 2000000, "max": 3000000}},
                },
            ]
        },
    }


@pytest.fixture
def grader_factory() -> t.Callable[..., GraderConfig]:
    """Factory fixture for single-field graders.

    Usage:
        def test_something(grader_factory):
            grader = grader_factory("x", "int", "equals", expected=5)
    """

    def create_grader(
        name: str,
        field_type: str,
        comparator: str,
        *,
        grader_type: str = "xml",
        weight: float = 1.0,
        field_weight: float = 1.0,
        **config: t.Any,
    ) -> GraderConfig:
        return GraderConfig.model_validate(
            {
                "type": grader_type,
                "name": f"{name} grader",
                "weight": weight,
                "config": {
                    "structure": [
                        {
                            "id": name,
                            "name": name,
                            "type": field_type,
                            "weight": field_weight,
                            "comparator": {"type": comparator, "config": config},
                        }
                    ]
                },
            }
        )

    return create_grader
