# -*- coding: utf-8 -*-
"""Contains the `NeighborIndex` class, a cache of the neighbors of each vertex of a graph.

The index is registered as a listener on a :class:`~graphmatch.graph.Graph` and keeps its cached neighborhoods in
sync with the graph through the ``edge_added``, ``edge_removed``, ``vertex_added`` and ``vertex_removed`` callbacks:

>>> graph = Graph({(1, 2): 1.0})
>>> index = NeighborIndex(graph)
>>> graph.add_listener(index)
>>> graph[1, 3] = 1.0
>>> sorted(index.neighbors_of(1))
[2, 3]

None of the matching algorithms use this index.
"""
from typing import Dict, Generic, List, Set

from multiset import Multiset

from .graph import Edge, GraphView, TVertex, neighbor_list_of

__all__ = ['NeighborIndex']


class NeighborIndex(Generic[TVertex]):
    """Maintains the neighbors of each vertex, built lazily on first access.

    Neighbors are stored in a :class:`~multiset.Multiset`, so a vertex connected by several edges (e.g. in both
    directions of a directed graph) is counted once per edge.
    """

    def __init__(self, graph: GraphView[TVertex]) -> None:
        self._graph = graph
        self._neighbors = {}  # type: Dict[TVertex, Multiset]

    def neighbors_of(self, vertex: TVertex) -> Set[TVertex]:
        """Returns the set of distinct neighbors of *vertex*."""
        return set(self._get_neighbors(vertex).distinct_elements())

    def neighbor_list_of(self, vertex: TVertex) -> List[TVertex]:
        """Returns the neighbors of *vertex*, each repeated once per connecting edge."""
        return list(self._get_neighbors(vertex))

    def edge_added(self, edge: Edge) -> None:
        source, target = self._graph.endpoints(edge)
        # An entry created here already includes the new edge
        if source in self._neighbors:
            self._neighbors[source].add(target)
        else:
            self._get_neighbors(source)
        if target in self._neighbors:
            self._neighbors[target].add(source)
        else:
            self._get_neighbors(target)

    def edge_removed(self, edge: Edge) -> None:
        source, target = edge
        if source in self._neighbors:
            self._remove_neighbor(source, target)
        if target in self._neighbors:
            self._remove_neighbor(target, source)

    def vertex_added(self, vertex: TVertex) -> None:
        pass

    def vertex_removed(self, vertex: TVertex) -> None:
        self._neighbors.pop(vertex, None)

    def _remove_neighbor(self, vertex, neighbor):
        neighbors = self._neighbors[vertex]
        if neighbor not in neighbors:
            raise ValueError(
                "Attempting to remove the neighbor {!r} of {!r} that was not present".format(neighbor, vertex))
        neighbors.remove(neighbor, 1)

    def _get_neighbors(self, vertex):
        neighbors = self._neighbors.get(vertex)
        if neighbors is None:
            neighbors = Multiset(neighbor_list_of(self._graph, vertex))
            self._neighbors[vertex] = neighbors
        return neighbors
