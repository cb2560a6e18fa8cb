"""Configuration utilities for the workflow engine service."""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class WorkflowSettings(BaseSettings):
    """Service settings, read from ``WORKFLOW_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    app_name: str = "workflow-engine"
    cors_origins: List[str] = ["http://localhost:3000"]
    # YAML file of definitions registered at startup
    seed_definitions_file: Optional[str] = None


@lru_cache
def get_settings() -> WorkflowSettings:
    """Return cached WorkflowSettings to avoid repeated environment parsing."""

    return WorkflowSettings()
