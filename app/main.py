"""FastAPI entry point for the workflow engine service."""

from typing import Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import WorkflowSettings, get_settings
from .routers import workflows
from .workflows.engine import WorkflowEngine
from .workflows.loader import seed_engine


def create_app(
    settings: Optional[WorkflowSettings] = None,
    engine: Optional[WorkflowEngine] = None,
) -> FastAPI:
    """Create a FastAPI application serving one in-memory workflow engine."""

    resolved_settings = settings or get_settings()
    resolved_engine = engine or WorkflowEngine()

    if resolved_settings.seed_definitions_file:
        seed_engine(resolved_engine, resolved_settings.seed_definitions_file)

    app = FastAPI(title=resolved_settings.app_name)
    app.state.workflow_engine = resolved_engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=resolved_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(workflows.router)

    @app.get("/health", tags=["health"])
    def health_check() -> Dict[str, str]:
        """Report service status."""

        return {"status": "ok", "service": resolved_settings.app_name}

    return app


app = create_app()
