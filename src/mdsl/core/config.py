"""
Project configuration loaded from mdsl.toml.

Every table and key is optional; a missing file yields the defaults.
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "mdsl.toml"


@dataclass
class ProjectConfig:
    name: str = "mdsl-project"
    version: str = "0.1.0"


@dataclass
class SourcesConfig:
    """Source files compiled by ``mdsl build``, relative to the manifest."""

    paths: list[str] = field(default_factory=list)


@dataclass
class OutputConfig:
    """Emitter selection and output directory."""

    directory: str = "build"
    sql: bool = True
    sql_anmi: bool = False
    cypher: bool = True

    def enabled_targets(self) -> list[str]:
        targets = []
        if self.sql:
            targets.append("sql")
        if self.sql_anmi:
            targets.append("sql_anmi")
        if self.cypher:
            targets.append("cypher")
        return targets


@dataclass
class ValidationConfig:
    fail_on_warnings: bool = False


@dataclass
class MdslConfig:
    """
    Project manifest loaded from mdsl.toml.

    ``root`` is the directory the manifest lives in; source and output
    paths resolve against it.
    """

    project: ProjectConfig = field(default_factory=ProjectConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    root: Path = field(default_factory=Path)

    def source_files(self) -> list[Path]:
        return [self.root / p for p in self.sources.paths]

    def output_directory(self) -> Path:
        return self.root / self.output.directory


def load_config(path: Path) -> MdslConfig:
    """
    Load an mdsl.toml manifest.

    Args:
        path: Manifest path

    Returns:
        MdslConfig with defaults for anything missing

    Raises:
        ConfigError: If the file is not valid TOML
    """
    root = path.parent
    if not path.exists():
        logger.debug("No manifest at %s, using defaults", path)
        return MdslConfig(root=root)

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}", kind="invalid_toml") from e

    project = data.get("project", {})
    sources = data.get("sources", {})
    output = data.get("output", {})
    validation = data.get("validation", {})

    defaults = OutputConfig()
    config = MdslConfig(
        project=ProjectConfig(
            name=project.get("name", ProjectConfig.name),
            version=project.get("version", ProjectConfig.version),
        ),
        sources=SourcesConfig(paths=list(sources.get("paths", []))),
        output=OutputConfig(
            directory=output.get("directory", defaults.directory),
            sql=output.get("sql", defaults.sql),
            sql_anmi=output.get("sql_anmi", defaults.sql_anmi),
            cypher=output.get("cypher", defaults.cypher),
        ),
        validation=ValidationConfig(
            fail_on_warnings=validation.get("fail_on_warnings", False),
        ),
        root=root,
    )
    logger.debug(
        "Loaded %s: %d sources, targets %s",
        path,
        len(config.sources.paths),
        config.output.enabled_targets(),
    )
    return config
