# -*- coding: utf-8 -*-
"""Contains Edmonds' blossom shrinking algorithm for maximum cardinality matchings in general graphs.

In a bipartite graph, a maximum matching can be found by repeatedly searching for augmenting paths in an alternating
tree. In a general graph, this search can run into odd cycles (*blossoms*). Here, every blossom found is contracted
into its base vertex and the search continues on the contracted graph. The search is restarted for every exposed
vertex, which results in a running time of O(V^4) for the whole algorithm.

Use `maximum_cardinality_matching` for a single call or the `GeneralMaximumMatcher` class directly.
"""
from collections import deque
from typing import Deque, Dict, Generic, List, Optional

from loguru import logger

from ..graph import GraphView, TVertex
from ._common import Matching, TypeMismatchError

__all__ = ['GeneralMaximumMatcher', 'maximum_cardinality_matching']

NONE = -1


class GeneralMaximumMatcher(Generic[TVertex]):
    """Finds a maximum cardinality matching in an undirected simple graph.

    >>> cycle = Graph({(0, 1): 1, (1, 2): 1, (2, 3): 1, (3, 4): 1, (4, 0): 1})
    >>> GeneralMaximumMatcher(cycle).compute_matching().value()
    2

    The edge weights are ignored.
    """

    def __init__(self, graph: GraphView[TVertex]) -> None:
        """Create a GeneralMaximumMatcher.

        Args:
            graph:
                The undirected simple graph.

        Raises:
            TypeMismatchError:
                If the graph is directed or not simple.
        """
        if graph.directed:
            raise TypeMismatchError("Only undirected graphs are supported")
        if not graph.simple:
            raise TypeMismatchError("Only simple graphs are supported")
        self.graph = graph

    def compute_matching(self) -> Matching[TVertex]:
        """Computes a maximum cardinality matching.

        Returns:
            The matching with the number of its edges as value.
        """
        vertices = list(self.graph.vertices())
        if not vertices:
            return Matching((), 0)
        match = _BlossomSearch(self.graph, vertices).run()

        edges = []
        for index, mate in enumerate(match):
            if mate != NONE and index < mate:
                edges.append(self.graph.edge(vertices[index], vertices[mate]))
        logger.info("Found maximum matching of size {} among {} vertices", len(edges), len(vertices))
        return Matching(edges, len(edges), self.graph.endpoints)


def maximum_cardinality_matching(graph: GraphView[TVertex]) -> Matching[TVertex]:
    """Returns a maximum cardinality matching of the undirected simple *graph*.

    See :class:`GeneralMaximumMatcher` for details.
    """
    return GeneralMaximumMatcher(graph).compute_matching()


class _BlossomSearch(object):
    """The state of the algorithm, with the vertices replaced by their index.

    Attributes:
        neighbors (List[List[int]]):
            The adjacency lists.
        match (List[int]):
            The matched vertex of each vertex or ``-1`` if the vertex is exposed.
        path (List[int]):
            The parent of each vertex in the current alternating tree or ``-1``.
        contracted (List[int]):
            The base of the blossom containing each vertex. Vertices outside of a blossom are their own base.
    """

    def __init__(self, graph: GraphView[TVertex], vertices: List[TVertex]) -> None:
        indices = {vertex: index for index, vertex in enumerate(vertices)}  # type: Dict[TVertex, int]
        self.size = len(vertices)
        self.neighbors = [
            [indices[graph.opposite(edge, vertex)] for edge in graph.incident_edges(vertex)] for vertex in vertices
        ]
        self.match = [NONE] * self.size
        self.path = [NONE] * self.size
        self.contracted = list(range(self.size))

    def run(self) -> List[int]:
        """Returns the matched vertex of each vertex after augmenting from every exposed vertex."""
        augmentations = 0
        for root in range(self.size):
            # A vertex once matched stays matched, so only exposed vertices can start augmenting paths
            if self.match[root] != NONE:
                continue
            vertex = self.find_path(root)
            if vertex is None:
                continue
            augmentations += 1
            while vertex != NONE:
                parent = self.path[vertex]
                next_vertex = self.match[parent]
                self.match[vertex] = parent
                self.match[parent] = vertex
                vertex = next_vertex
        logger.debug("Performed {} augmentations", augmentations)
        return self.match

    def find_path(self, root: int) -> Optional[int]:
        """Searches an augmenting path starting in the exposed *root*.

        Returns:
            The exposed vertex at the end of the path or ``None`` if there is no augmenting path. The path itself
            can be followed backwards with :attr:`path` and :attr:`match`.
        """
        match = self.match
        path = self.path
        contracted = self.contracted

        # Expand the graph back from its contracted state
        for vertex in range(self.size):
            path[vertex] = NONE
            contracted[vertex] = vertex

        used = [False] * self.size
        used[root] = True
        queue = deque([root])  # type: Deque[int]

        while queue:
            vertex = queue.popleft()
            for to in self.neighbors[vertex]:
                if contracted[vertex] == contracted[to] or match[vertex] == to:
                    continue
                if to == root or (match[to] != NONE and path[match[to]] != NONE):
                    self._contract_blossom(vertex, to, used, queue)
                elif path[to] == NONE:
                    path[to] = vertex
                    if match[to] == NONE:
                        return to
                    to = match[to]
                    used[to] = True
                    queue.append(to)

        return None

    def _contract_blossom(self, vertex: int, to: int, used: List[bool], queue: Deque[int]) -> None:
        stem = self._lowest_common_ancestor(vertex, to)
        blossom = [False] * self.size
        self._mark_path(vertex, to, stem, blossom)
        self._mark_path(to, vertex, stem, blossom)
        contracted = self.contracted
        for i in range(self.size):
            if blossom[contracted[i]]:
                contracted[i] = stem
                if not used[i]:
                    used[i] = True
                    queue.append(i)
        logger.debug("Contracted blossom with base {}", stem)

    def _mark_path(self, vertex: int, child: int, stem: int, blossom: List[bool]) -> None:
        match = self.match
        contracted = self.contracted
        while contracted[vertex] != stem:
            blossom[contracted[vertex]] = True
            blossom[contracted[match[vertex]]] = True
            self.path[vertex] = child
            child = match[vertex]
            vertex = self.path[match[vertex]]

    def _lowest_common_ancestor(self, first: int, second: int) -> int:
        match = self.match
        contracted = self.contracted
        seen = [False] * self.size
        while True:
            first = contracted[first]
            seen[first] = True
            if match[first] == NONE:
                break
            first = self.path[match[first]]
        while True:
            second = contracted[second]
            if seen[second]:
                return second
            second = self.path[match[second]]
