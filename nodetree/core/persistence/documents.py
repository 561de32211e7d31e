"""
Document store — async JSON file access for tree nodes.

Every call hands the blocking filesystem work to a worker thread via
``asyncio.to_thread`` so the event loop only ever waits on I/O.
Errors (missing files, permissions, malformed JSON) propagate
unchanged; callers decide what is fatal.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Process umask, read once at import (os.umask can only be read by setting it)
_UMASK = os.umask(0)
os.umask(_UMASK)


class DocumentStore:
    """Reads and writes the JSON documents that back tree nodes."""

    async def exists(self, path: Path) -> bool:
        return await asyncio.to_thread(path.exists)

    async def read_json(self, path: Path) -> Any:
        """Read and parse a JSON document.

        Raises:
            FileNotFoundError: If the file does not exist.
            json.JSONDecodeError: If the content is not valid JSON.
        """
        raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
        logger.debug("Read %s (%d bytes)", path, len(raw))
        return json.loads(raw)

    async def write_file(self, path: Path, content: str) -> None:
        """Write text to *path* atomically (temp file, then rename)."""
        await asyncio.to_thread(_atomic_write, path, content)
        logger.debug("Wrote %s (%d bytes)", path, len(content))

    async def write_json(self, path: Path, data: Any) -> None:
        """Serialize *data* as indented JSON and write it."""
        content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        await self.write_file(path, content)

    async def list_directory(self, path: Path) -> list[str]:
        """Entry names in *path*, sorted for stable ordering."""
        entries = await asyncio.to_thread(lambda: [p.name for p in path.iterdir()])
        return sorted(entries)

    async def make_directory(self, path: Path) -> None:
        """Create *path*.  Fails if it already exists."""
        await asyncio.to_thread(path.mkdir, parents=True, exist_ok=False)
        logger.debug("Created directory %s", path)


def _target_mode(path: Path) -> int:
    """Mode the written file should end up with.

    An existing file keeps its permissions; a new one gets the usual
    0666 minus umask instead of the 0600 that mkstemp uses.
    """
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_UMASK


def _atomic_write(path: Path, content: str) -> None:
    _fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}_", suffix=".tmp")
    tmp = Path(tmp_path)
    try:
        with open(_fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.chmod(tmp, _target_mode(path))
        tmp.replace(path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise
