"""Tests for the dependency-first traversal."""

import pytest

from digraph import VertexNotFoundError, iter_dependencies_first


class TestIterDependenciesFirst:
    """Tests for iter_dependencies_first."""

    def test_single_vertex(self) -> None:
        """Should yield only the root when it has no dependencies."""
        assert list(iter_dependencies_first({"a": []}, "a")) == ["a"]

    def test_linear_chain(self) -> None:
        """Should yield the deepest dependency first and the root last."""
        adjacency = {"app": ["lib"], "lib": ["core"], "core": []}
        assert list(iter_dependencies_first(adjacency, "app")) == ["core", "lib", "app"]

    def test_exclude_root(self) -> None:
        """Should leave out the root with include_root=False."""
        adjacency = {"app": ["lib"], "lib": ["core"], "core": []}
        assert list(iter_dependencies_first(adjacency, "app", include_root=False)) == ["core", "lib"]

    def test_siblings_follow_edge_order(self) -> None:
        """Should visit sibling dependencies in edge order."""
        adjacency = {"app": ["b", "a"], "a": [], "b": []}
        assert list(iter_dependencies_first(adjacency, "app")) == ["b", "a", "app"]

    def test_shared_dependency_yielded_once(self) -> None:
        """Should yield a dependency shared by two branches only once."""
        # app -> ui -> core, app -> api -> core
        adjacency = {"app": ["ui", "api"], "ui": ["core"], "api": ["core"], "core": []}

        order = list(iter_dependencies_first(adjacency, "app"))

        assert order == ["core", "ui", "api", "app"]

    def test_only_reachable_vertices(self) -> None:
        """Should skip vertices the root does not depend on."""
        adjacency = {"app": ["lib"], "lib": [], "unrelated": ["lib"]}
        assert list(iter_dependencies_first(adjacency, "app")) == ["lib", "app"]

    def test_cycle_terminates(self) -> None:
        """Should not re-enter a vertex already on the current path."""
        adjacency = {"a": ["b"], "b": ["c"], "c": ["a"]}
        assert list(iter_dependencies_first(adjacency, "a")) == ["c", "b", "a"]

    def test_unknown_dependency_is_skipped(self) -> None:
        """Should skip ids that are not in the adjacency mapping."""
        adjacency = {"a": ["ghost", "b"], "b": []}
        assert list(iter_dependencies_first(adjacency, "a")) == ["b", "a"]

    def test_unknown_root_raises(self) -> None:
        """Should raise eagerly for a root missing from the mapping."""
        with pytest.raises(VertexNotFoundError):
            iter_dependencies_first({"a": []}, "z")

    def test_is_lazy(self) -> None:
        """Should produce vertices one at a time."""
        walk = iter_dependencies_first({"a": ["b"], "b": []}, "a")
        assert next(walk) == "b"
