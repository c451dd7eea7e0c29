# -*- coding: utf-8 -*-
"""Contains the Kuhn-Munkres algorithm for minimum weight perfect matchings in complete bipartite graphs.

The assignment problem is set as follows: Given a complete bipartite graph G = (S, T; E) with |S| = |T| where each
edge has a non-negative weight, find a perfect matching of minimal total weight.

The `BipartiteWeightedMatcher` class solves this problem with the so called hungarian method in O(n^3) where n is the
size of a partition. `minimum_weight_perfect_matching` is a shortcut for a single call.

The algorithm works on an excess matrix obtained from the cost matrix by subtracting row and column minima. The zero
cells of that matrix form the equality (or tight) subgraph. In every iteration a maximum matching of the tight
subgraph is built. If it is perfect, it is an optimal assignment. Otherwise, a minimum vertex cover of the tight
subgraph is derived from the matching (König's theorem) and the smallest uncovered excess is moved from the uncovered
columns to the covered rows, which creates at least one new tight cell.
"""
import math
from typing import Generic, List, Sequence

from loguru import logger

from ..graph import GraphView, TVertex
from ._common import InvalidInputError, Matching

__all__ = ['BipartiteWeightedMatcher', 'minimum_weight_perfect_matching']

UNMATCHED = -1


class BipartiteWeightedMatcher(Generic[TVertex]):
    """Finds a minimum weight perfect matching in a complete bipartite graph.

    >>> graph = Graph({('s1', 't1'): 1, ('s1', 't2'): 2, ('s2', 't1'): 2, ('s2', 't2'): 1})
    >>> matcher = BipartiteWeightedMatcher(graph, ['s1', 's2'], ['t1', 't2'])
    >>> matching = matcher.compute_matching()
    >>> sorted(matching.edges()), matching.value()
    ([('s1', 't1'), ('s2', 't2')], 2)

    The input is validated when the matcher is created, so any error is raised before the computation starts.
    """

    def __init__(self, graph: GraphView[TVertex], first_partition: Sequence[TVertex],
                 second_partition: Sequence[TVertex]) -> None:
        """Create a BipartiteWeightedMatcher.

        Args:
            graph:
                The complete bipartite graph with non-negative edge weights.
            first_partition:
                The vertices of the first partition. They correspond to the rows of the cost matrix.
            second_partition:
                The vertices of the second partition. They correspond to the columns of the cost matrix.

        Raises:
            InvalidInputError:
                If the partitions differ in size, repeat a vertex or share a vertex, the graph does not have
                exactly one edge for every pair of vertices from the two partitions or an edge has a weight that is
                negative, infinite or NaN.
        """
        self.graph = graph
        self.first_partition = list(first_partition)
        self.second_partition = list(second_partition)

        size = len(self.first_partition)
        if size != len(self.second_partition):
            raise InvalidInputError("Graph supplied isn't complete bipartite with equally sized partitions!")
        first_vertices = set(self.first_partition)
        second_vertices = set(self.second_partition)
        if len(first_vertices) != size or len(second_vertices) != size:
            raise InvalidInputError("The vertices of a partition must be distinct")
        if not first_vertices.isdisjoint(second_vertices):
            raise InvalidInputError("The partitions must not share vertices")
        edge_count = sum(1 for _ in graph.edges())
        if edge_count != size * size:
            raise InvalidInputError(
                "Graph supplied isn't complete bipartite: expected {:d} edges but got {:d}".format(
                    size * size, edge_count)
            )

        self._edges = []  # type: List[List[object]]
        for source in self.first_partition:
            row = []
            for target in self.second_partition:
                edge = graph.edge(source, target)
                if edge is None:
                    raise InvalidInputError("There is no edge between {!r} and {!r}".format(source, target))
                weight = graph.weight(edge)
                if not 0 <= weight < math.inf:
                    raise InvalidInputError(
                        "The edge {!r} must have a finite non-negative weight, got {!r}".format(edge, weight)
                    )
                row.append(edge)
            self._edges.append(row)

    def compute_matching(self) -> Matching[TVertex]:
        """Computes the minimum weight perfect matching.

        Returns:
            The perfect matching with the total weight of its edges as value.
        """
        if not self.first_partition:
            return Matching((), 0)
        cost_matrix = [[self.graph.weight(edge) for edge in row] for row in self._edges]
        assignment = _KuhnMunkresMatrix(cost_matrix).build_matching()
        edges = [self._edges[row][column] for row, column in enumerate(assignment)]
        weight = sum(self.graph.weight(edge) for edge in edges)
        logger.info("Found perfect matching of size {} with weight {}", len(edges), weight)
        return Matching(edges, weight, self.graph.endpoints)


def minimum_weight_perfect_matching(graph: GraphView[TVertex], first_partition: Sequence[TVertex],
                                    second_partition: Sequence[TVertex]) -> Matching[TVertex]:
    """Returns a minimum weight perfect matching of the complete bipartite *graph*.

    See :class:`BipartiteWeightedMatcher` for details.
    """
    return BipartiteWeightedMatcher(graph, first_partition, second_partition).compute_matching()


class _KuhnMunkresMatrix(object):
    """The matrix representation of the hungarian method.

    Rows are the workers and columns the tasks. The result assigns a column to every row so that the total cost is
    minimal.

    Attributes:
        excess (List[List[float]]):
            The excess matrix. All entries are non-negative and the zero entries are the tight cells.
        rows_covered (List[bool]):
            The rows in the current vertex cover of the tight cells.
        columns_covered (List[bool]):
            The columns in the current vertex cover of the tight cells.
        column_matched (List[int]):
            ``column_matched[i]`` is the column of the tight cell matched in row ``i`` or ``-1``.
        row_matched (List[int]):
            ``row_matched[j]`` is the row of the tight cell matched in column ``j`` or ``-1``.
    """

    def __init__(self, cost_matrix: List[List[float]]) -> None:
        self.size = len(cost_matrix)
        self.excess = self._make_excess_matrix(cost_matrix)
        self.rows_covered = [False] * self.size
        self.columns_covered = [False] * self.size
        self.column_matched = [UNMATCHED] * self.size
        self.row_matched = [UNMATCHED] * self.size

    @staticmethod
    def _make_excess_matrix(cost_matrix):
        excess = [list(row) for row in cost_matrix]

        for row in excess:
            cheapest = min(row)
            for j in range(len(row)):
                row[j] -= cheapest

        # Subtracting the column minimum only changes something if no row has a zero in this column yet
        for j in range(len(excess)):
            cheapest = min(row[j] for row in excess)
            if cheapest:
                for row in excess:
                    row[j] -= cheapest

        return excess

    def build_matching(self) -> List[int]:
        """Returns the column assigned to each row."""
        logger.debug("Solving assignment problem of size {}", self.size)
        phase = 0
        while self.build_maximum_matching() < self.size:
            phase += 1
            self.build_vertex_cover()
            self.extend_equality_graph()
        logger.debug("Assignment found after {} dual adjustments", phase)
        return list(self.column_matched)

    def build_maximum_matching(self) -> int:
        """Extends the current matching to a maximum matching of the tight cells.

        Returns:
            The size of the maximum matching.
        """
        excess = self.excess
        column_matched = self.column_matched
        row_matched = self.row_matched

        matching_size = sum(1 for column in column_matched if column != UNMATCHED)

        # First approximation: match zeros in a greedy fashion
        for j in range(self.size):
            if row_matched[j] == UNMATCHED:
                for i in range(self.size):
                    if excess[i][j] == 0 and column_matched[i] == UNMATCHED:
                        column_matched[i] = j
                        row_matched[j] = i
                        matching_size += 1
                        break

        # A matching is maximum iff there is no augmenting path
        extending = True
        while extending and matching_size < self.size:
            rows_visited = [False] * self.size
            columns_visited = [False] * self.size
            extending = False
            for j in range(self.size):
                if row_matched[j] == UNMATCHED and not columns_visited[j]:
                    if self._augment_from(j, rows_visited, columns_visited):
                        matching_size += 1
                        extending = True

        return matching_size

    def _augment_from(self, initial_column: int, rows_visited: List[bool], columns_visited: List[bool]) -> bool:
        """Searches an augmenting path over the tight cells starting in the unmatched *initial_column*.

        The path alternates between unmatched and matched tight cells. If it ends in an unmatched row, the cells
        along the path are flipped.
        """
        excess = self.excess
        column_matched = self.column_matched
        row_matched = self.row_matched

        # Each stack entry holds a column of the path and the next row to try in it.
        # path_rows[k] is the row leaving the column stack[k], so len(path_rows) == len(stack) - 1 between steps.
        columns_visited[initial_column] = True
        stack = [[initial_column, 0]]
        path_rows = []  # type: List[int]

        while stack:
            frame = stack[-1]
            column, next_row = frame
            for i in range(next_row, self.size):
                if excess[i][column] != 0 or rows_visited[i]:
                    continue
                if column_matched[i] == UNMATCHED:
                    path_rows.append(i)
                    for (path_column, _), row in zip(stack, path_rows):
                        column_matched[row] = path_column
                        row_matched[path_column] = row
                    return True
                rows_visited[i] = True
                partner = column_matched[i]
                if not columns_visited[partner]:
                    columns_visited[partner] = True
                    frame[1] = i + 1
                    path_rows.append(i)
                    stack.append([partner, 0])
                    break
            else:
                stack.pop()
                if path_rows:
                    path_rows.pop()

        return False

    def build_vertex_cover(self) -> None:
        """Builds a minimum vertex cover of the tight cells from the maximum matching.

        Rows and columns reachable from an unmatched row via alternating paths are marked. The cover consists of
        the unmarked rows and the marked columns.
        """
        excess = self.excess
        row_matched = self.row_matched

        rows_reached = [column == UNMATCHED for column in self.column_matched]
        columns_reached = [False] * self.size
        pending = [i for i in range(self.size) if rows_reached[i]]

        while pending:
            i = pending.pop()
            for j in range(self.size):
                if excess[i][j] == 0 and not columns_reached[j]:
                    columns_reached[j] = True
                    partner = row_matched[j]
                    if partner != UNMATCHED and not rows_reached[partner]:
                        rows_reached[partner] = True
                        pending.append(partner)

        self.rows_covered = [not reached for reached in rows_reached]
        self.columns_covered = columns_reached

        assert self._uncovered_zeros() == 0
        assert sum(self.rows_covered) + sum(self.columns_covered) == \
            sum(1 for row in row_matched if row != UNMATCHED)

    def extend_equality_graph(self) -> None:
        """Subtracts the minimal uncovered excess from the uncovered columns and adds it to the covered rows."""
        excess = self.excess
        delta = min(
            excess[i][j] for i in range(self.size) if not self.rows_covered[i]
            for j in range(self.size) if not self.columns_covered[j]
        )
        logger.debug("Adjusting dual variables by {}", delta)

        for i in range(self.size):
            if self.rows_covered[i]:
                row = excess[i]
                for j in range(self.size):
                    row[j] += delta

        for j in range(self.size):
            if not self.columns_covered[j]:
                for row in excess:
                    row[j] -= delta

    def _uncovered_zeros(self) -> int:
        return sum(
            1 for i in range(self.size) if not self.rows_covered[i]
            for j in range(self.size) if not self.columns_covered[j] and self.excess[i][j] == 0
        )
