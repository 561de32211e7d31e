"""
Module use cases — load, populate, scaffold, and inspect modules.

Each use case drives one async entity operation to completion and
returns a result object; configuration problems end up in ``error``
instead of being raised, so the CLI can render them.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from nodetree.core.config.loader import ConfigError, find_project_root, load_project
from nodetree.core.context import ProjectContext
from nodetree.core.models import ModuleEntity

logger = logging.getLogger(__name__)


@dataclass
class ModuleResult:
    """Outcome of a module use case."""

    spath: str = ""
    data: dict[str, Any] | None = None
    path: Path | None = None
    error: str | None = None
    functions: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "spath": self.spath,
            "path": str(self.path) if self.path else None,
            "functions": self.functions,
            "data": self.data,
            "error": self.error,
        }


def project_context(project_root: Path | None = None) -> ProjectContext:
    """Context for an explicit root, or for the project enclosing the cwd.

    Raises:
        ConfigError: If no project is found or its s-project.json is invalid.
    """
    root = project_root or find_project_root()
    if root is None:
        raise ConfigError("No s-project.json found. Run from inside a project or pass --project.")

    project = load_project(root)
    logger.debug("Using project '%s' at %s", project.get("name", root.name), root)
    return ProjectContext.create(root)


def _module(context: ProjectContext, component: str, module: str) -> ModuleEntity:
    return context.new("module", {"component": component, "module": module})


def show_module(context: ProjectContext, component: str, module: str) -> ModuleResult:
    """Load a module with its functions and export it."""
    result = ModuleResult()
    try:
        entity = _module(context, component, module)
        result.spath = entity.spath
        result.path = entity.full_path
        asyncio.run(entity.load())
    except ConfigError as e:
        result.error = str(e)
        return result

    result.data = entity.get()
    result.functions = list(entity.functions)
    return result


def populate_module(
    context: ProjectContext,
    component: str,
    module: str,
    stage: str | None,
    region: str | None,
) -> ModuleResult:
    """Load a module and resolve it for one stage and region."""
    result = ModuleResult()

    async def _run(entity: ModuleEntity) -> dict[str, Any]:
        await entity.load()
        return await entity.get_populated(stage=stage, region=region)

    try:
        entity = _module(context, component, module)
        result.spath = entity.spath
        result.path = entity.full_path
        result.data = asyncio.run(_run(entity))
    except ConfigError as e:
        result.error = str(e)
        return result

    result.functions = list(entity.functions)
    logger.info("Populated %s for %s/%s", result.spath, stage, region)
    return result


def create_module(
    context: ProjectContext,
    component: str,
    module: str,
    overrides: dict[str, Any] | None = None,
    functions: list[str] | None = None,
) -> ModuleResult:
    """Scaffold a new module (and optional empty functions) and save it."""
    result = ModuleResult()
    try:
        entity = _module(context, component, module)
        result.spath = entity.spath
        result.path = entity.full_path

        if asyncio.run(context.store.exists(entity.descriptor_path)):
            raise ConfigError(f"Module already exists: {entity.spath}")

        entity.set({**(overrides or {}), "functions": {name: {} for name in functions or []}})
        asyncio.run(entity.save(deep=True))
    except (ConfigError, FileExistsError) as e:
        result.error = str(e)
        return result

    result.data = entity.get()
    result.functions = list(entity.functions)
    return result


def module_templates(context: ProjectContext, component: str, module: str) -> ModuleResult:
    """The module's own s-templates.json."""
    result = ModuleResult()
    try:
        entity = _module(context, component, module)
        result.spath = entity.spath
        result.path = entity.full_path
        result.data = asyncio.run(entity.get_templates())
    except ConfigError as e:
        result.error = str(e)
    return result
