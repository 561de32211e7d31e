"""
Project context — "which project are we working on, and with what tools."

Every tree node receives a ProjectContext in its constructor and
resolves paths and collaborators through it.  The context is created
once by the entry point and never mutated afterwards:

    - CLI:    main.py  → ProjectContext.create(root)
    - Tests:  conftest → ProjectContext.create(tmp_path)

Nodes build their children through ``context.classes`` rather than by
importing each other, so Module and Function stay decoupled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from nodetree.core.config.loader import ConfigError
from nodetree.core.persistence.documents import DocumentStore
from nodetree.core.services.populate import Populator

if TYPE_CHECKING:
    from nodetree.core.models.node import NodeEntity

logger = logging.getLogger(__name__)


class EntityRegistry:
    """Maps entity kinds ("module", "function") to their classes."""

    def __init__(self) -> None:
        self._classes: dict[str, type[NodeEntity]] = {}

    def register(self, kind: str, cls: type[NodeEntity]) -> None:
        if kind in self._classes:
            logger.warning("Overwriting existing entity class: %s", kind)
        self._classes[kind] = cls
        logger.debug("Registered entity class %s for kind '%s'", cls.__name__, kind)

    def get(self, kind: str) -> type[NodeEntity]:
        """Look up the class registered for *kind*.

        Raises:
            ConfigError: If nothing is registered under that kind.
        """
        try:
            return self._classes[kind]
        except KeyError:
            raise ConfigError(f"No entity class registered for '{kind}'") from None

    def kinds(self) -> list[str]:
        return list(self._classes)


@dataclass(frozen=True)
class ProjectContext:
    """Shared, read-only state for every node of one project tree."""

    project_root: Path | None = None
    classes: EntityRegistry = field(default_factory=EntityRegistry)
    store: DocumentStore = field(default_factory=DocumentStore)
    populator: Populator = field(default_factory=Populator)

    @classmethod
    def create(cls, project_root: Path | None = None, **kwargs: Any) -> ProjectContext:
        """Context with the standard Module and Function classes registered."""
        from nodetree.core.models import default_registry

        root = project_root.resolve() if project_root is not None else None
        return cls(project_root=root, classes=default_registry(), **kwargs)

    def new(self, kind: str, config: dict[str, Any]) -> NodeEntity:
        """Construct an entity of *kind* bound to this context."""
        return self.classes.get(kind)(self, config)
