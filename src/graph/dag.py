"""Module dependency graph with cycle prohibition."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from logs import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

LOGGER = get_logger("graph")


class CycleProhibitedError(Exception):
    """Raised when an edge would introduce a cycle into a DependencyGraph."""

    def __init__(self, source: str, target: str) -> None:
        super().__init__(f"Edge {source} -> {target} would introduce a cycle")
        self.source = source
        self.target = target


class DependencyCycleError(Exception):
    """Raised when a cycle between modules is not tolerated by the policy."""

    def __init__(self, source: str, target: str) -> None:
        super().__init__(
            f"Cycle from {source} to {target}. Please modularize this better!"
        )
        self.source = source
        self.target = target


class DependencyGraph:
    """Directed acyclic graph over module paths.

    Vertices keep insertion order so iteration (and everything computed from
    it) is deterministic.
    """

    def __init__(self) -> None:
        self._successors: dict[str, dict[str, None]] = {}

    def __contains__(self, vertex: object) -> bool:
        return vertex in self._successors

    def __len__(self) -> int:
        return len(self._successors)

    @property
    def vertices(self) -> list[str]:
        return list(self._successors)

    def edges(self) -> Iterator[tuple[str, str]]:
        for source, targets in self._successors.items():
            for target in targets:
                yield source, target

    def successors(self, vertex: str) -> list[str]:
        return list(self._successors[vertex])

    def add_vertex(self, vertex: str) -> None:
        self._successors.setdefault(vertex, {})

    def has_path(self, source: str, target: str) -> bool:
        """Return True when ``target`` is reachable from ``source``."""
        if source == target:
            return True
        seen = {source}
        stack = [source]
        while stack:
            vertex = stack.pop()
            for successor in self._successors.get(vertex, {}):
                if successor == target:
                    return True
                if successor not in seen:
                    seen.add(successor)
                    stack.append(successor)
        return False

    def add_edge(self, source: str, target: str) -> None:
        """Add ``source -> target``, creating missing vertices.

        Raises:
            CycleProhibitedError: If the edge is a self loop or ``source`` is
                already reachable from ``target``.
        """
        self.add_vertex(source)
        self.add_vertex(target)
        if target in self._successors[source]:
            return
        if self.has_path(target, source):
            raise CycleProhibitedError(source, target)
        self._successors[source][target] = None


@dataclass(frozen=True)
class CyclePolicy:
    """Which cycle-closing edges are silently dropped.

    Only one case is tolerated: exactly one endpoint is a test-fixtures
    project and neither endpoint lies in the always-allowed layer (e.g.
    ``model`` projects). Every other cycle is fatal.
    """

    always_allowed_marker: str = "model"
    test_fixtures_marker: str = "test-fixtures"

    def is_tolerated(self, source: str, target: str) -> bool:
        marker = self.always_allowed_marker
        if marker and (marker in source or marker in target):
            return False
        fixtures = self.test_fixtures_marker
        return (fixtures in source) != (fixtures in target)


def build_dependency_graph(
    shallow_deps: Mapping[str, Sequence[str]],
    policy: CyclePolicy | None = None,
) -> DependencyGraph:
    """Build the module dependency graph.

    Args:
        shallow_deps: Module path -> direct dependency module paths, in the
            order edges should be added
        policy: Cycle tolerance policy (default: ``CyclePolicy()``)

    Raises:
        DependencyCycleError: If an edge closes a cycle the policy does not
            tolerate.
    """
    if policy is None:
        policy = CyclePolicy()

    graph = DependencyGraph()
    for module_path, dependencies in shallow_deps.items():
        graph.add_vertex(module_path)
        for dependency in dependencies:
            graph.add_vertex(dependency)
            try:
                graph.add_edge(module_path, dependency)
            except CycleProhibitedError as exc:
                if not policy.is_tolerated(module_path, dependency):
                    raise DependencyCycleError(module_path, dependency) from exc
                LOGGER.debug(
                    "Dropping tolerated cycle edge %s -> %s", module_path, dependency
                )
    return graph


__all__ = [
    "CyclePolicy",
    "CycleProhibitedError",
    "DependencyCycleError",
    "DependencyGraph",
    "build_dependency_graph",
]
