"""
Module entity — a component's module and the functions it owns.

On disk a module is ``<root>/<component>/<module>/s-module.json`` plus
one subdirectory per function.  Functions are persisted in their own
``s-function.json`` files and never inside the module document.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from nodetree import __version__
from nodetree.core.models.node import NodeEntity
from nodetree.core.services.identity import short_id


def _default_cloud_formation() -> dict[str, Any]:
    return {"resources": {}, "lambdaIamPolicyDocumentStatements": []}


class ModuleEntity(NodeEntity):
    """A module node: descriptor fields plus a map of FunctionEntity children."""

    KIND: ClassVar[str] = "module"
    DESCRIPTOR_FILE: ClassVar[str] = "s-module.json"
    IDENTITY_KEYS: ClassVar[tuple[str, ...]] = ("component", "module")
    CHILD_KIND: ClassVar[str | None] = "function"
    CHILDREN_FIELD: ClassVar[str | None] = "functions"

    version: str = "0.0.1"
    profile: str = f"aws-v{__version__}"
    location: str = "https://github.com/..."
    author: str = ""
    description: str = "A Serverless Module"
    runtime: str = "nodejs"
    custom: dict[str, Any] = Field(default_factory=dict)
    functions: dict[str, Any] = Field(default_factory=dict)
    cloudFormation: dict[str, Any] = Field(default_factory=_default_cloud_formation)

    @classmethod
    def default_name(cls, config: dict[str, Any]) -> str:
        return config.get("module") or "module" + short_id(6)

    @property
    def component(self) -> str:
        return self._config["component"]

    @property
    def module(self) -> str:
        return self._config["module"]
