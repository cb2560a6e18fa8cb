"""Load workflow definitions from YAML files."""

from pathlib import Path
from typing import Any, List, Union

import yaml
from loguru import logger

from ..models.workflow import WorkflowDefinition
from .engine import WorkflowEngine


def load_definitions(path: Union[str, Path]) -> List[WorkflowDefinition]:
    """
    Parse workflow definitions from a YAML file.

    Accepted layouts:
    - a single document holding a list of definitions
    - a single document mapping ``definitions`` to such a list
    - a stream of documents, one definition each

    Example:
    ```yaml
    definitions:
      - id: doc
        states:
          - {id: draft, isInitial: true}
          - {id: review}
          - {id: done, isFinal: true}
        actions:
          - {id: submit, fromStates: [draft], toState: review}
          - {id: approve, fromStates: [review], toState: done}
    ```
    """
    with open(path, encoding="utf-8") as handle:
        documents = [doc for doc in yaml.safe_load_all(handle) if doc is not None]

    entries: List[Any] = []
    for doc in documents:
        if isinstance(doc, list):
            entries.extend(doc)
        elif isinstance(doc, dict) and "definitions" in doc:
            entries.extend(doc["definitions"] or [])
        elif isinstance(doc, dict):
            entries.append(doc)
        else:
            raise ValueError(f"Unsupported workflow document in {path}: {doc!r}")

    return [WorkflowDefinition.model_validate(entry) for entry in entries]


def seed_engine(engine: WorkflowEngine, path: Union[str, Path]) -> List[str]:
    """Register every definition found in ``path`` and return their ids."""
    definitions = load_definitions(path)
    created = [engine.create_definition(definition) for definition in definitions]
    logger.info(f"Seeded {len(created)} workflow definitions from {path}")
    return created
