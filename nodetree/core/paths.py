"""
Path resolver — logical identities ("sPaths") and their directories.

An sPath is the slash-joined identity of a node:

    component                    → a component
    component/module             → a module
    component/module/function    → a function

It says nothing about where the node lives on disk.  ``node_dir()``
maps an sPath onto a project root.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from nodetree.core.config.loader import ConfigError


class SPath(BaseModel):
    """Parsed identity of a tree node."""

    component: str
    module: str | None = None
    function: str | None = None

    def parts(self) -> list[str]:
        return [p for p in (self.component, self.module, self.function) if p]

    def __str__(self) -> str:
        return build_spath(self.component, self.module, self.function)


def build_spath(
    component: str,
    module: str | None = None,
    function: str | None = None,
) -> str:
    """Join identity parts into a canonical sPath.

    Raises:
        ConfigError: If a deeper part is given without its parent.
    """
    if not component:
        raise ConfigError("An sPath requires a component")
    if function and not module:
        raise ConfigError("An sPath with a function requires a module")

    return "/".join(p for p in (component, module, function) if p)


def parse_spath(spath: str) -> SPath:
    """Split a canonical sPath back into its parts.

    Raises:
        ConfigError: If the sPath is empty or has too many segments.
    """
    segments = [s for s in spath.strip("/").split("/") if s]
    if not segments or len(segments) > 3:
        raise ConfigError(f"Invalid sPath: {spath!r}")

    keys = ("component", "module", "function")
    return SPath(**dict(zip(keys, segments)))


def node_dir(project_root: Path, spath: str) -> Path:
    """Absolute directory for the node identified by *spath*."""
    return project_root.joinpath(*parse_spath(spath).parts())
