"""Tests for the configuration module."""

from pathlib import Path

import pytest

from digraph._cli.config import (
    ConfigError,
    DigraphConfig,
    find_pyproject_toml,
    get_config,
    load_config,
)


def write_pyproject(directory: Path, content: str) -> Path:
    pyproject = directory / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml function."""

    def test_finds_in_current_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in current directory."""
        pyproject = write_pyproject(tmp_path, "[project]\nname = 'test'\n")

        assert find_pyproject_toml(tmp_path) == pyproject

    def test_finds_in_parent_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in parent directory."""
        pyproject = write_pyproject(tmp_path, "[project]\nname = 'test'\n")
        subdir = tmp_path / "src" / "pkg"
        subdir.mkdir(parents=True)

        assert find_pyproject_toml(subdir) == pyproject

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        """Should return None when no pyproject.toml is found."""
        assert find_pyproject_toml(tmp_path) is None


class TestLoadConfig:
    """Tests for loading [tool.digraph]."""

    def test_full_configuration(self, tmp_path: Path) -> None:
        """Should parse every field and resolve paths from the project root."""
        pyproject = write_pyproject(
            tmp_path,
            """
[tool.digraph]
graph = "deps/graph.toml"
cache = ".cache/digraph.toml"
max_depth = 6
payload_key = "component"
""",
        )

        config = load_config(pyproject)

        assert config == DigraphConfig(
            graph=tmp_path / "deps/graph.toml",
            cache=tmp_path / ".cache/digraph.toml",
            max_depth=6,
            payload_key="component",
            project_root=tmp_path,
        )

    def test_absolute_path_is_kept(self, tmp_path: Path) -> None:
        graph_path = tmp_path / "elsewhere" / "graph.toml"
        pyproject = write_pyproject(tmp_path, f'[tool.digraph]\ngraph = "{graph_path.as_posix()}"\n')

        assert load_config(pyproject).graph == graph_path

    def test_zero_max_depth(self, tmp_path: Path) -> None:
        pyproject = write_pyproject(tmp_path, "[tool.digraph]\nmax_depth = 0\n")
        assert load_config(pyproject).max_depth == 0

    def test_no_tool_section(self, tmp_path: Path) -> None:
        """Should return empty config when no [tool.digraph] section."""
        pyproject = write_pyproject(tmp_path, "[project]\nname = 'test'\n")

        config = load_config(pyproject)

        assert config.graph is None
        assert config.cache is None
        assert config.max_depth is None
        assert config.payload_key is None
        assert config.project_root == tmp_path


class TestLoadConfigErrors:
    """Tests for configuration error handling."""

    def test_invalid_toml_raises_error(self, tmp_path: Path) -> None:
        pyproject = write_pyproject(tmp_path, "invalid toml [[[")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(pyproject)

    def test_invalid_graph_type(self, tmp_path: Path) -> None:
        pyproject = write_pyproject(tmp_path, "[tool.digraph]\ngraph = 123\n")

        with pytest.raises(ConfigError, match="expected string path"):
            load_config(pyproject)

    @pytest.mark.parametrize("value", ["-1", "true", '"4"', "2.5"])
    def test_invalid_max_depth(self, tmp_path: Path, value: str) -> None:
        pyproject = write_pyproject(tmp_path, f"[tool.digraph]\nmax_depth = {value}\n")

        with pytest.raises(ConfigError, match="max_depth"):
            load_config(pyproject)

    def test_invalid_payload_key(self, tmp_path: Path) -> None:
        pyproject = write_pyproject(tmp_path, "[tool.digraph]\npayload_key = ['a']\n")

        with pytest.raises(ConfigError, match="payload_key"):
            load_config(pyproject)


class TestGetConfig:
    def test_reads_from_working_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        write_pyproject(tmp_path, "[tool.digraph]\nmax_depth = 3\n")
        monkeypatch.chdir(tmp_path)

        assert get_config().max_depth == 3


class TestDigraphConfigDataclass:
    def test_default_values(self) -> None:
        config = DigraphConfig()

        assert config.graph is None
        assert config.project_root is None

    def test_frozen(self) -> None:
        config = DigraphConfig()

        with pytest.raises(AttributeError):
            config.max_depth = 2  # type: ignore[misc]
