"""
Shared test fixtures — a throwaway project tree on disk.
"""

from pathlib import Path

import pytest

from nodetree.core.context import ProjectContext
from tests._helpers import write_json


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An empty project root (just s-project.json)."""
    write_json(tmp_path / "s-project.json", {"name": "test-project"})
    return tmp_path


@pytest.fixture
def context(project: Path) -> ProjectContext:
    return ProjectContext.create(project)


@pytest.fixture
def module_dir(project: Path) -> Path:
    """users/profile with two functions, templates and stage variables."""
    mod = project / "users" / "profile"
    write_json(mod / "s-module.json", {
        "name": "profile",
        "version": "1.2.0",
        "runtime": "python3.12",
        "description": "Profile endpoints",
        "custom": {"owner": "${owner}"},
        "functions": {"stale": {"name": "stale"}},
        "cloudFormation": {"resources": {"Table": "$${tableTemplate}"}},
        "extraKey": ["kept"],
    })
    write_json(mod / "s-templates.json", {
        "tableTemplate": {"Type": "Table", "Name": "profile-${stage}"},
        "memory": 512,
    })
    write_json(mod / "get" / "s-function.json", {
        "name": "get",
        "handler": "profile/get/handler.handler",
        "memorySize": "$${memory}",
        "custom": {"envVars": ["TABLE=profile-${stage}-${region}"]},
    })
    write_json(mod / "update" / "s-function.json", {
        "name": "update",
        "timeout": 30,
    })
    # Not a function: no descriptor
    (mod / "lib").mkdir()
    (mod / "README.md").write_text("docs")

    write_json(project / "_meta" / "variables" / "s-variables-common.json", {"owner": "team-a"})
    write_json(project / "_meta" / "variables" / "s-variables-dev.json", {"owner": "team-dev"})
    return mod
