"""DependencyGraph: NetworkX DiGraph of ``dependent -> dependency`` edges.

Rebuilt per invocation, no cross-invocation cache. Edges are only ever
inserted through :meth:`DependencyGraph.add_dependency`, which refuses any
edge that would close a cycle before touching the graph, so the graph is
acyclic at all times.

Like a pure dependency graph, only libraries that take part in at least
one edge are nodes. Isolated libraries are recovered from the adjacency
map when ordering (see :func:`topo_sort`).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import networkx as nx

from libforge.domain.coordinates import LibraryId
from libforge.errors import CyclicDependencyError

type _Graph = nx.DiGraph


class DependencyGraph:
    """Acyclic directed graph of library dependencies."""

    def __init__(self) -> None:
        self._graph: _Graph = nx.DiGraph()

    @property
    def graph(self) -> _Graph:
        """Read-only view of the underlying NetworkX graph."""
        return self._graph.copy(as_view=True)

    def __contains__(self, library: object) -> bool:
        return library in self._graph

    def add_dependency(self, dependent: LibraryId, dependency: LibraryId) -> None:
        """Record that *dependent* depends on *dependency*.

        Raises:
            CyclicDependencyError: the edge is a self-dependency, or
                *dependency* already reaches *dependent*.
        """
        if dependent == dependency:
            raise CyclicDependencyError(dependent, dependency, [dependent, dependent])
        if dependency in self._graph and dependent in self._graph:
            try:
                back = nx.shortest_path(self._graph, dependency, dependent)
            except nx.NetworkXNoPath:
                back = None
            if back is not None:
                raise CyclicDependencyError(dependent, dependency, [dependent, *back])
        self._graph.add_edge(dependent, dependency)

    def dependencies(self, library: LibraryId) -> set[LibraryId]:
        """Direct dependencies of *library*."""
        if library not in self._graph:
            return set()
        return set(self._graph.successors(library))

    def transitive_dependencies(self, library: LibraryId) -> set[LibraryId]:
        """Everything *library* depends on, directly or indirectly.

        Follows edges outward only; dependents of *library* are never
        included, and neither is *library* itself.
        """
        if library not in self._graph:
            return set()
        return nx.descendants(self._graph, library)

    def sorted_nodes(self) -> list[LibraryId]:
        """Graph nodes with every dependency before its dependents.

        Ties are broken lexicographically so output is deterministic.
        """
        return list(nx.lexicographical_topological_sort(self._graph.reverse(copy=False)))

    def number_of_edges(self) -> int:
        return self._graph.number_of_edges()


@dataclass(frozen=True)
class GraphBuild:
    """Result of graph construction: the graph plus the adjacency it came from."""

    graph: DependencyGraph
    adjacency: Mapping[LibraryId, frozenset[LibraryId]]


def build_graph(adjacency: Mapping[LibraryId, Iterable[LibraryId]]) -> GraphBuild:
    """Insert one edge per ``(dependent, dependency)`` pair of *adjacency*.

    Any cycle aborts construction entirely; no partial graph escapes.
    """
    graph = DependencyGraph()
    frozen = {lib: frozenset(deps) for lib, deps in adjacency.items()}
    for dependent in sorted(frozen):
        for dependency in sorted(frozen[dependent]):
            graph.add_dependency(dependent, dependency)
    return GraphBuild(graph=graph, adjacency=frozen)


def topo_sort(build: GraphBuild) -> list[LibraryId]:
    """All libraries of *build*, each after every library it depends on.

    Sorted graph nodes come first; libraries with no edges at all are
    appended afterwards in name order (set difference against the
    adjacency keys).
    """
    ordered = build.graph.sorted_nodes()
    isolated = set(build.adjacency) - set(ordered)
    return [*ordered, *sorted(isolated)]


def build_order(build: GraphBuild, libraries: Iterable[LibraryId]) -> list[LibraryId]:
    """Restrict :func:`topo_sort` to *libraries*, keeping the order."""
    wanted = set(libraries)
    return [lib for lib in topo_sort(build) if lib in wanted]
