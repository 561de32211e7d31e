"""
Node entity — the lifecycle every level of the tree shares.

A node is a directory holding a descriptor document (``s-module.json``,
``s-function.json``, ...) and, optionally, one subdirectory per child
node.  Subclasses only declare *what* they are: their identity keys,
their descriptor filename, their defaults, and which kind of child
they own.  The lifecycle itself lives here:

    construct → load / set → get / get_populated → save

Descriptor data is stored on the model itself.  Known fields are typed
Pydantic fields; unknown keys pass through as extras, so a document
round-trips without losing anything this code does not understand.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from abc import abstractmethod
from pathlib import Path
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, PrivateAttr

from nodetree.core.config.loader import ConfigError
from nodetree.core.paths import build_spath, node_dir

logger = logging.getLogger(__name__)

TEMPLATES_FILE = "s-templates.json"


class EntityTypeError(TypeError):
    """Raised when a live entity is passed where a literal document is required."""


class NodeEntity(BaseModel):
    """Base class for every node of the configuration tree."""

    model_config = ConfigDict(extra="allow")

    # ── Declared by subclasses ───────────────────────────────────
    KIND: ClassVar[str] = "node"
    DESCRIPTOR_FILE: ClassVar[str] = ""
    IDENTITY_KEYS: ClassVar[tuple[str, ...]] = ()
    CHILD_KIND: ClassVar[str | None] = None
    CHILDREN_FIELD: ClassVar[str | None] = None

    name: str = ""

    # ── Runtime only (never exported) ────────────────────────────
    _context: Any = PrivateAttr(default=None)
    _config: dict[str, Any] = PrivateAttr(default_factory=dict)

    def __init__(self, context: Any, config: dict[str, Any] | None = None, **data: Any):
        config = config or {}
        missing = [key for key in self.IDENTITY_KEYS if not config.get(key)]
        if missing:
            raise ConfigError(
                f"Missing required config for {self.KIND}: {', '.join(missing)}"
            )

        data.setdefault("name", self.default_name(config))
        super().__init__(**data)
        self._context = context
        self.reconfigure(config)

    @classmethod
    @abstractmethod
    def default_name(cls, config: dict[str, Any]) -> str:
        """Name used when the descriptor does not provide one."""

    # ── Identity ─────────────────────────────────────────────────

    def reconfigure(self, config: dict[str, Any] | None) -> None:
        """Re-derive the sPath and, when a project root is known, the location.

        An empty config is a no-op.  Identity keys are replaced all
        together, never one at a time.
        """
        if not config:
            return

        if any(config.get(key) for key in self.IDENTITY_KEYS):
            missing = [key for key in self.IDENTITY_KEYS if not config.get(key)]
            if missing:
                raise ConfigError(
                    f"Incomplete identity for {self.KIND}: missing {', '.join(missing)}"
                )
            for key in self.IDENTITY_KEYS:
                self._config[key] = config[key]
            self._config["spath"] = build_spath(*(config[key] for key in self.IDENTITY_KEYS))

        root = self._context.project_root if self._context is not None else None
        if root is not None and self._config.get("spath"):
            self._config["full_path"] = node_dir(root, self._config["spath"])

    @property
    def identity(self) -> dict[str, str]:
        return {key: self._config[key] for key in self.IDENTITY_KEYS}

    @property
    def spath(self) -> str:
        return self._config["spath"]

    @property
    def full_path(self) -> Path | None:
        return self._config.get("full_path")

    @property
    def context(self) -> Any:
        return self._context

    @property
    def children(self) -> dict[str, NodeEntity]:
        if self.CHILDREN_FIELD is None:
            return {}
        return getattr(self, self.CHILDREN_FIELD)

    @property
    def descriptor_path(self) -> Path:
        return self._require_location("located") / self.DESCRIPTOR_FILE

    def _require_location(self, action: str) -> Path:
        if self._context is None or self._context.project_root is None or self.full_path is None:
            raise ConfigError(
                f"{self.KIND.capitalize()} could not be {action} because no project "
                "path has been set"
            )
        return self.full_path

    def _child_config(self, child_name: str) -> dict[str, Any]:
        child_cls = self._context.classes.get(self.CHILD_KIND)
        return {**self.identity, child_cls.IDENTITY_KEYS[-1]: child_name}

    # ── Load ─────────────────────────────────────────────────────

    async def load(self) -> Self:
        """Read the descriptor and every child found on disk.

        Children named in the descriptor itself are ignored; the
        directory listing is the source of truth.

        Raises:
            ConfigError: If no project root is set or the descriptor is missing.
        """
        location = self._require_location("loaded")
        store = self._context.store
        path = location / self.DESCRIPTOR_FILE

        if not await store.exists(path):
            raise ConfigError(
                f"{self.KIND.capitalize()} could not be loaded because it does not "
                f"exist in your project: {self.spath} (not found)"
            )

        logger.debug("Loading %s %s from %s", self.KIND, self.spath, path)
        data = await store.read_json(path)
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a JSON object in {path}, got {type(data).__name__}")

        if self.CHILDREN_FIELD is not None:
            data[self.CHILDREN_FIELD] = await self._load_children(location)

        self._merge(data)
        return self

    async def _load_children(self, location: Path) -> dict[str, NodeEntity]:
        store = self._context.store
        child_cls = self._context.classes.get(self.CHILD_KIND)

        discovered: list[NodeEntity] = []
        for entry in await store.list_directory(location):
            if not await store.exists(location / entry / child_cls.DESCRIPTOR_FILE):
                continue
            discovered.append(self._context.new(self.CHILD_KIND, self._child_config(entry)))

        loaded = await asyncio.gather(*(child.load() for child in discovered))

        children: dict[str, NodeEntity] = {}
        for child in loaded:
            key = child.identity[child_cls.IDENTITY_KEYS[-1]]
            if child.name != key:
                raise ConfigError(
                    f"{child_cls.KIND.capitalize()} at {child.spath} declares name "
                    f"'{child.name}' which does not match its directory"
                )
            children[key] = child

        logger.debug("Loaded %d %s children of %s", len(children), self.CHILD_KIND, self.spath)
        return children

    # ── Set / Get ────────────────────────────────────────────────

    def set(self, data: dict[str, Any]) -> Self:
        """Overlay a literal document onto this entity.

        Child literals are turned into live entities first.  Top-level
        keys replace existing values wholesale (no deep merge).  The
        caller's document is not modified.

        Raises:
            EntityTypeError: If a child value is already an entity.
        """
        children_field = self.CHILDREN_FIELD
        literals = data.get(children_field) if children_field is not None else None
        merged = {k: copy.deepcopy(v) for k, v in data.items() if k != children_field}

        if literals is not None:
            children: dict[str, NodeEntity] = {}
            for key, literal in literals.items():
                if isinstance(literal, NodeEntity):
                    raise EntityTypeError(
                        "You cannot pass entity instances into set(), only literal documents"
                    )
                if not isinstance(literal, dict):
                    raise EntityTypeError(
                        f"{self.CHILD_KIND} '{key}' must be a literal document, "
                        f"got {type(literal).__name__}"
                    )
                if literal.get("name", key) != key:
                    raise ConfigError(
                        f"{self.CHILD_KIND} '{key}' declares a different name: {literal['name']}"
                    )
                child = self._context.new(self.CHILD_KIND, self._child_config(key))
                children[key] = child.set(literal)
            merged[children_field] = children

        self._merge(merged)
        return self

    def _merge(self, data: dict[str, Any]) -> None:
        extra = self.__pydantic_extra__
        for key, value in data.items():
            if key in type(self).model_fields:
                setattr(self, key, value)
            else:
                extra[key] = value

    def _snapshot(self) -> dict[str, Any]:
        exclude = {self.CHILDREN_FIELD} if self.CHILDREN_FIELD else None
        # typed fields may hold placeholder strings until populated
        return copy.deepcopy(self.model_dump(exclude=exclude, warnings=False))

    def get(self) -> dict[str, Any]:
        """Independent, exportable copy of this entity and its children."""
        data = self._snapshot()
        if self.CHILDREN_FIELD is not None:
            data[self.CHILDREN_FIELD] = {key: child.get() for key, child in self.children.items()}
        return data

    # ── Populate ─────────────────────────────────────────────────

    async def get_populated(self, stage: str | None = None, region: str | None = None) -> dict[str, Any]:
        """Copy of this entity with templates and variables resolved.

        Children are populated concurrently and all of them are in
        the result before it is returned.

        Raises:
            ConfigError: If stage or region is missing, or no project root is set.
        """
        if not stage or not region:
            raise ConfigError('Both "stage" and "region" params are required')
        self._require_location("populated")

        snapshot = self._snapshot()
        if self.CHILDREN_FIELD is not None:
            snapshot[self.CHILDREN_FIELD] = {}

        templates = await self.collect_templates()
        keys = list(self.children)
        populated, *children = await asyncio.gather(
            self._context.populator.populate(self._context, snapshot, stage, region, templates),
            *(self.children[key].get_populated(stage=stage, region=region) for key in keys),
        )

        if self.CHILDREN_FIELD is not None:
            populated[self.CHILDREN_FIELD] = dict(zip(keys, children))
        return populated

    async def get_templates(self) -> dict[str, Any]:
        """This node's own s-templates.json, or {} when there is none."""
        path = self._require_location("read") / TEMPLATES_FILE
        store = self._context.store
        if not await store.exists(path):
            return {}
        data = await store.read_json(path)
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a JSON object in {path}, got {type(data).__name__}")
        return data

    async def collect_templates(self) -> dict[str, Any]:
        """Templates visible to this node: every ancestor's, nearest wins."""
        self._require_location("read")
        root = self._context.project_root
        store = self._context.store
        merged: dict[str, Any] = {}

        directory = root
        for part in self.identity.values():
            directory = directory / part
            path = directory / TEMPLATES_FILE
            if not await store.exists(path):
                continue
            data = await store.read_json(path)
            if not isinstance(data, dict):
                raise ConfigError(f"Expected a JSON object in {path}, got {type(data).__name__}")
            merged.update(data)

        return merged

    # ── Save / Create ────────────────────────────────────────────

    async def save(self, deep: bool = False) -> Self:
        """Write this entity's descriptor, scaffolding the directory if needed.

        With ``deep=True`` every child is saved first, one at a time.
        Children are never written into the parent's descriptor.

        Raises:
            ConfigError: If no project root is set.
        """
        location = self._require_location("saved")
        store = self._context.store
        path = location / self.DESCRIPTOR_FILE

        if not await store.exists(path):
            await self.create()

        if deep:
            for child in self.children.values():
                await child.save(deep=True)

        data = self.get()
        if self.CHILDREN_FIELD is not None:
            data.pop(self.CHILDREN_FIELD, None)

        await store.write_json(path, data)
        logger.info("Saved %s %s", self.KIND, self.spath)
        return self

    async def create(self) -> None:
        """Scaffold the node directory and an empty templates file.

        Raises:
            FileExistsError: If the directory already exists.
        """
        location = self._require_location("created")
        store = self._context.store

        await store.make_directory(location)
        await store.write_file(location / TEMPLATES_FILE, "{}\n")
        logger.info("Created %s %s at %s", self.KIND, self.spath, location)
