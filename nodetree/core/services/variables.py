"""
Variable store — per-stage/region values used during population.

Variables live under ``_meta/variables/`` in the project root:

    s-variables-common.json              every stage and region
    s-variables-<stage>.json             one stage
    s-variables-<stage>-<region>.json    one stage in one region

Files are layered in that order; later files win on conflict.  Missing
files are skipped.  The built-ins ``stage`` and ``region`` are always
present and cannot be overridden.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from nodetree.core.config.loader import ConfigError
from nodetree.core.persistence.documents import DocumentStore

logger = logging.getLogger(__name__)

VARIABLES_DIR = Path("_meta") / "variables"


def variable_files(project_root: Path, stage: str, region: str) -> list[Path]:
    """Candidate variable files for a stage/region, lowest precedence first."""
    base = project_root / VARIABLES_DIR
    return [
        base / "s-variables-common.json",
        base / f"s-variables-{stage}.json",
        base / f"s-variables-{stage}-{region}.json",
    ]


async def load_variables(
    store: DocumentStore,
    project_root: Path,
    stage: str,
    region: str,
) -> dict[str, Any]:
    """Merge every variable file that applies to *stage* / *region*.

    Raises:
        ConfigError: If a variable file is not a JSON object.
    """
    merged: dict[str, Any] = {}

    for path in variable_files(project_root, stage, region):
        if not await store.exists(path):
            continue
        data = await store.read_json(path)
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a JSON object in {path}, got {type(data).__name__}")
        merged.update(data)
        logger.debug("Layered %d variables from %s", len(data), path)

    merged["stage"] = stage
    merged["region"] = region
    return merged
