"""Tests for settings loading from the config root."""

from __future__ import annotations

import os
from pathlib import Path

import pydantic as p

import labelgrade
from labelgrade.core import Settings
from labelgrade.model import DeploymentEnvironment

Root = p.FileUrl(f"file://{Path(os.path.dirname(labelgrade.__file__)).parent / 'config'}")


class TestSettings(object):
    """Tests for Settings sources."""

    def test_local_reads_root(self) -> None:
        """Local settings come straight from the config root."""
        settings = Settings(env=DeploymentEnvironment.Local, root=Root, override=())

        assert settings.web.grading.backend.port == 8400
        assert settings.web.grading.max_response_length == 1_000_000

    def test_env_directory_takes_precedence(self) -> None:
        """env.d/<env>/ replaces the root file of the same name."""
        settings = Settings(env=DeploymentEnvironment.Test, root=Root, override=())

        assert settings.web.grading.backend.port == 8401
        assert settings.web.grading.frontend is None
        assert settings.logging.root.level == "WARNING"

    def test_override_replaces_one_key(self) -> None:
        """An override changes only the path it names."""
        settings = Settings(
            env=DeploymentEnvironment.Test,
            root=Root,
            override=("web.grading.max_response_length=10", "logging.loggers.labelgrade.level=ERROR"),
        )

        assert settings.web.grading.max_response_length == 10
        assert settings.web.grading.backend.port == 8401
        assert settings.logging.loggers["labelgrade"].level == "ERROR"
        assert "console" in settings.logging.handlers

    def test_logging_dumps_dict_config(self) -> None:
        """Logging settings dump to a dictConfig document."""
        dumped = Settings(env=DeploymentEnvironment.Test, root=Root, override=()).logging.model_dump()

        assert dumped["formatters"]["console"]["()"] == "labelgrade.lib.logging.ExtraFormatter"
        assert dumped["handlers"]["console"]["class"] == "colorlog.StreamHandler"
