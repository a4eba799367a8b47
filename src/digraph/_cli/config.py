"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    """Error in digraph configuration."""


@dataclass(slots=True, frozen=True)
class DigraphConfig:
    """Configuration loaded from the ``[tool.digraph]`` table of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    graph: Path | None = None
    cache: Path | None = None
    max_depth: int | None = None
    payload_key: str | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _parse_path(section: dict[str, object], key: str, project_root: Path) -> Path | None:
    if key not in section:
        return None
    value = section[key]
    if not isinstance(value, str):
        msg = f"Invalid [tool.digraph].{key}: expected string path"
        raise ConfigError(msg)
    path = Path(value)
    if not path.is_absolute():
        path = project_root / path
    return path


def _parse_max_depth(section: dict[str, object]) -> int | None:
    if "max_depth" not in section:
        return None
    value = section["max_depth"]
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        msg = "Invalid [tool.digraph].max_depth: expected non-negative integer"
        raise ConfigError(msg)
    return value


def load_config(pyproject_path: Path) -> DigraphConfig:
    """Load and validate [tool.digraph] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed DigraphConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("digraph", {})
    if not section:
        return DigraphConfig(project_root=project_root)

    payload_key = section.get("payload_key")
    if payload_key is not None and not isinstance(payload_key, str):
        msg = "Invalid [tool.digraph].payload_key: expected string"
        raise ConfigError(msg)

    return DigraphConfig(
        graph=_parse_path(section, "graph", project_root),
        cache=_parse_path(section, "cache", project_root),
        max_depth=_parse_max_depth(section),
        payload_key=payload_key,
        project_root=project_root,
    )


def get_config() -> DigraphConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        DigraphConfig (may be empty if no pyproject.toml or no [tool.digraph] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return DigraphConfig()
    return load_config(pyproject_path)
