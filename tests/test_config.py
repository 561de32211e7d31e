"""
Tests for configuration — project discovery and nodetree.yml settings.
"""

from pathlib import Path

import pytest

from nodetree.core.config.loader import (
    ConfigError,
    Settings,
    find_project_file,
    find_project_root,
    load_project,
    load_settings,
)


class TestFindProject:

    def test_find_in_current_dir(self, project: Path):
        result = find_project_file(project)
        assert result is not None
        assert result.name == "s-project.json"

    def test_find_in_parent_dir(self, project: Path):
        subdir = project / "users" / "profile"
        subdir.mkdir(parents=True)
        assert find_project_root(subdir) == project.resolve()

    def test_not_found_returns_none(self, tmp_path: Path):
        subdir = tmp_path / "deep" / "nested"
        subdir.mkdir(parents=True)
        assert find_project_file(subdir) is None
        assert find_project_root(subdir) is None


class TestLoadProject:

    def test_load(self, project: Path):
        assert load_project(project)["name"] == "test-project"

    def test_missing(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_project(tmp_path)

    def test_invalid_json(self, tmp_path: Path):
        (tmp_path / "s-project.json").write_text("{{")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_project(tmp_path)

    def test_non_object(self, tmp_path: Path):
        (tmp_path / "s-project.json").write_text("[]")
        with pytest.raises(ConfigError, match="Expected a JSON object"):
            load_project(tmp_path)


class TestLoadSettings:

    def test_missing_file_defaults(self, project: Path):
        assert load_settings(project) == Settings()
        assert load_settings(None) == Settings()

    def test_values(self, project: Path):
        (project / "nodetree.yml").write_text("stage: dev\nregion: us-east-1\nlog_level: INFO\n")
        settings = load_settings(project)
        assert settings.stage == "dev"
        assert settings.region == "us-east-1"
        assert settings.log_level == "INFO"

    def test_empty_file(self, project: Path):
        (project / "nodetree.yml").write_text("")
        assert load_settings(project) == Settings()

    def test_invalid_yaml(self, project: Path):
        (project / "nodetree.yml").write_text(":: invalid: yaml: [")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(project)

    def test_non_mapping(self, project: Path):
        (project / "nodetree.yml").write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_settings(project)

    def test_invalid_values(self, project: Path):
        (project / "nodetree.yml").write_text("stage:\n  nested: true\n")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(project)
