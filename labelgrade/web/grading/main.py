"""Main entry point for the grading web application."""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import labelgrade
from labelgrade.core import BootConfiguration, di, LabelgradeContainer
from labelgrade.core.config import GradingWebSettings
from labelgrade.lib.json import FastAPIJSONResponse
from labelgrade.model import DeploymentEnvironment

from .route import router


@di.inject
def _create_app(
    config: GradingWebSettings = di.Provide["config.web.grading", di.as_(GradingWebSettings)],
    env: DeploymentEnvironment = di.Provide["env"],
) -> FastAPI:
    app = FastAPI(
        title="Labelgrade",
        description="Response grading for labeling tasks",
        version=labelgrade.__version__,
        default_response_class=FastAPIJSONResponse,
    )

    if env is DeploymentEnvironment.Local and config.frontend is not None:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[
                f"http://{config.frontend.host}:{config.frontend.port}",
                f"http://localhost:{config.frontend.port}",
            ],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(router)
    return app


def create_app() -> FastAPI:
    """Factory function for uvicorn."""
    boot_vars = os.getenv("__Labelgrade_BOOT")
    if boot_vars:
        boot_cf = BootConfiguration.model_validate_json(boot_vars)
        ct = LabelgradeContainer()
        LabelgradeContainer.boot(ct, **dict(boot_cf))
        ct.wire(modules=["labelgrade.web.grading.main", "labelgrade.web.grading.route.evaluation"])
        return _create_app(config=GradingWebSettings(**ct.config.web.grading()), env=boot_cf.env)
    return _create_app()
