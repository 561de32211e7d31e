"""
Tests for the async document store.
"""

import asyncio
import json
import os
import stat
from pathlib import Path

import pytest

from nodetree.core.persistence.documents import DocumentStore


class TestDocumentStore:

    def test_write_and_read_json(self, tmp_path: Path):
        store = DocumentStore()
        path = tmp_path / "doc.json"
        asyncio.run(store.write_json(path, {"name": "x", "list": [1, 2]}))
        assert asyncio.run(store.read_json(path)) == {"name": "x", "list": [1, 2]}
        assert path.read_text().startswith("{\n  ")

    def test_exists(self, tmp_path: Path):
        store = DocumentStore()
        assert asyncio.run(store.exists(tmp_path)) is True
        assert asyncio.run(store.exists(tmp_path / "nope")) is False

    def test_read_malformed(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{ nope")
        with pytest.raises(json.JSONDecodeError):
            asyncio.run(DocumentStore().read_json(path))

    def test_read_missing(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            asyncio.run(DocumentStore().read_json(tmp_path / "missing.json"))

    def test_list_directory_sorted(self, tmp_path: Path):
        for name in ("b", "a", "c.txt"):
            (tmp_path / name).touch()
        assert asyncio.run(DocumentStore().list_directory(tmp_path)) == ["a", "b", "c.txt"]

    def test_make_directory_refuses_existing(self, tmp_path: Path):
        store = DocumentStore()
        asyncio.run(store.make_directory(tmp_path / "x" / "y"))
        assert (tmp_path / "x" / "y").is_dir()
        with pytest.raises(FileExistsError):
            asyncio.run(store.make_directory(tmp_path / "x" / "y"))

    def test_write_leaves_no_temp_files(self, tmp_path: Path):
        asyncio.run(DocumentStore().write_file(tmp_path / "out.json", "{}"))
        assert sorted(p.name for p in tmp_path.iterdir()) == ["out.json"]


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
class TestWritePermissions:
    """Written documents are project files, not private temp files."""

    @staticmethod
    def mode(path: Path) -> int:
        return stat.S_IMODE(path.stat().st_mode)

    def test_new_file_follows_umask(self, tmp_path: Path):
        umask = os.umask(0)
        os.umask(umask)
        path = tmp_path / "s-module.json"
        asyncio.run(DocumentStore().write_json(path, {"name": "m"}))
        assert self.mode(path) == 0o666 & ~umask

    def test_existing_mode_preserved(self, tmp_path: Path):
        path = tmp_path / "s-module.json"
        path.write_text("{}")
        path.chmod(0o644)
        asyncio.run(DocumentStore().write_json(path, {"name": "m"}))
        assert self.mode(path) == 0o644

        path.chmod(0o640)
        asyncio.run(DocumentStore().write_json(path, {"name": "m2"}))
        assert self.mode(path) == 0o640

    def test_saved_module_is_not_owner_only(self, context, project: Path):
        module = context.new("module", {"component": "billing", "module": "invoices"})
        asyncio.run(module.save())
        descriptor = project / "billing" / "invoices" / "s-module.json"
        descriptor.chmod(0o644)

        asyncio.run(module.load())
        asyncio.run(module.save())
        assert self.mode(descriptor) == 0o644
