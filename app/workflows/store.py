"""In-memory entity stores backing the workflow engine."""

import threading
from abc import ABC, abstractmethod
from typing import Dict, Generic, List, Optional, TypeVar

from loguru import logger

T = TypeVar("T")


class EntityStore(ABC, Generic[T]):
    """Append-only keyed storage for definitions or instances."""

    @abstractmethod
    def get(self, entity_id: str) -> Optional[T]:
        """Return the entity stored under ``entity_id``, or None."""

    @abstractmethod
    def add(self, entity_id: str, entity: T) -> bool:
        """Insert ``entity`` unless the id is taken.

        Returns:
            True if the entity was stored, False if the id already existed
        """

    @abstractmethod
    def save(self, entity_id: str, entity: T) -> None:
        """Replace the entity stored under an existing id."""

    @abstractmethod
    def list(self) -> List[T]:
        """Return every stored entity."""

    def __contains__(self, entity_id: object) -> bool:
        return isinstance(entity_id, str) and self.get(entity_id) is not None


class InMemoryEntityStore(EntityStore[T]):
    """Thread-safe dict-backed store preserving insertion order."""

    def __init__(self, name: str = "entities") -> None:
        self.name = name
        self._entities: Dict[str, T] = {}
        self._lock = threading.RLock()

    def get(self, entity_id: str) -> Optional[T]:
        with self._lock:
            return self._entities.get(entity_id)

    def add(self, entity_id: str, entity: T) -> bool:
        with self._lock:
            if entity_id in self._entities:
                return False
            self._entities[entity_id] = entity

        logger.debug(f"Stored {self.name} entry: {entity_id}")
        return True

    def save(self, entity_id: str, entity: T) -> None:
        with self._lock:
            if entity_id not in self._entities:
                raise KeyError(entity_id)
            self._entities[entity_id] = entity

        logger.debug(f"Updated {self.name} entry: {entity_id}")

    def list(self) -> List[T]:
        with self._lock:
            return list(self._entities.values())
