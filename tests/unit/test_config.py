"""Tests for mdsl.toml loading."""

from pathlib import Path

import pytest

from mdsl.core.config import MdslConfig, OutputConfig, load_config
from mdsl.core.errors import ConfigError


def write_manifest(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "mdsl.toml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "mdsl.toml")
        assert isinstance(config, MdslConfig)
        assert config.root == tmp_path
        assert config.sources.paths == []
        assert config.output.enabled_targets() == ["sql", "cypher"]
        assert not config.validation.fail_on_warnings

    def test_full_manifest(self, tmp_path: Path):
        path = write_manifest(
            tmp_path,
            """
[project]
name = "austria"
version = "2.0.0"

[sources]
paths = ["models/krone.mdsl", "models/kurier.mdsl"]

[output]
directory = "dist"
sql = false
sql_anmi = true

[validation]
fail_on_warnings = true
""",
        )
        config = load_config(path)
        assert config.project.name == "austria"
        assert config.project.version == "2.0.0"
        assert config.source_files() == [
            tmp_path / "models" / "krone.mdsl",
            tmp_path / "models" / "kurier.mdsl",
        ]
        assert config.output_directory() == tmp_path / "dist"
        assert config.output.enabled_targets() == ["sql_anmi", "cypher"]
        assert config.validation.fail_on_warnings

    def test_partial_manifest_keeps_defaults(self, tmp_path: Path):
        config = load_config(write_manifest(tmp_path, '[project]\nname = "x"\n'))
        assert config.project.name == "x"
        assert config.project.version == "0.1.0"
        assert config.output.directory == "build"

    def test_invalid_toml(self, tmp_path: Path):
        path = write_manifest(tmp_path, "[project\nname = ")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.kind == "invalid_toml"
        assert str(path) in exc_info.value.message


class TestOutputConfig:
    def test_all_targets(self):
        config = OutputConfig(sql=True, sql_anmi=True, cypher=True)
        assert config.enabled_targets() == ["sql", "sql_anmi", "cypher"]

    def test_no_targets(self):
        assert OutputConfig(sql=False, cypher=False).enabled_targets() == []
