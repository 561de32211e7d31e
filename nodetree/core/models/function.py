"""
Function entity — the leaf of the tree.

Lives at ``<root>/<component>/<module>/<function>/s-function.json``.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from nodetree.core.models.node import NodeEntity
from nodetree.core.services.identity import short_id


def _default_custom() -> dict[str, Any]:
    return {"excludePatterns": [], "envVars": []}


class FunctionEntity(NodeEntity):
    """A function node; same lifecycle as a module, no children."""

    KIND: ClassVar[str] = "function"
    DESCRIPTOR_FILE: ClassVar[str] = "s-function.json"
    IDENTITY_KEYS: ClassVar[tuple[str, ...]] = ("component", "module", "function")

    handler: str = ""
    timeout: int | str = 6
    memorySize: int | str = 1024
    custom: dict[str, Any] = Field(default_factory=_default_custom)
    endpoints: list[Any] = Field(default_factory=list)

    def __init__(self, context: Any, config: dict[str, Any] | None = None, **data: Any):
        super().__init__(context, config, **data)
        if not self.handler:
            self.handler = f"{self.module}/{self.name}/handler.handler"

    @classmethod
    def default_name(cls, config: dict[str, Any]) -> str:
        return config.get("function") or "function" + short_id(6)

    @property
    def component(self) -> str:
        return self._config["component"]

    @property
    def module(self) -> str:
        return self._config["module"]

    @property
    def function(self) -> str:
        return self._config["function"]
