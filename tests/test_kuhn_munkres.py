# -*- coding: utf-8 -*-
import itertools
import random

import hypothesis.strategies as st
from hypothesis import given
import pytest

from graphmatch.graph import AsWeightedGraph, Graph
from graphmatch.matching.kuhn_munkres import (BipartiteWeightedMatcher, _KuhnMunkresMatrix,
                                              minimum_weight_perfect_matching)
from graphmatch.matching._common import InvalidInputError, Matching


def make_complete_bipartite(weights):
    n = len(weights)
    left = ['s{}'.format(i) for i in range(n)]
    right = ['t{}'.format(j) for j in range(n)]
    graph = Graph()
    for i, j in itertools.product(range(n), range(n)):
        graph[left[i], right[j]] = weights[i][j]
    return graph, left, right


def brute_force_minimum(weights):
    n = len(weights)
    return min(sum(weights[i][p[i]] for i in range(n)) for p in itertools.permutations(range(n)))


@st.composite
def cost_matrix(draw, max_size=5, max_weight=20):
    n = draw(st.integers(min_value=1, max_value=max_size))
    return [[draw(st.integers(min_value=0, max_value=max_weight)) for _ in range(n)] for _ in range(n)]


def assert_is_perfect(matching, graph, left, right):
    assert len(matching) == len(left)
    matched_left = set()
    matched_right = set()
    for edge in matching.edges():
        assert edge in graph.edges(), "Matching contains an edge that was not in the graph"
        source, target = edge
        assert source in left and target in right
        matched_left.add(source)
        matched_right.add(target)
    assert matched_left == set(left)
    assert matched_right == set(right)


@given(cost_matrix())
def test_minimum_weight_is_optimal(weights):
    graph, left, right = make_complete_bipartite(weights)
    matching = minimum_weight_perfect_matching(graph, left, right)
    assert_is_perfect(matching, graph, left, right)
    assert matching.value() == brute_force_minimum(weights)
    assert matching.value() == sum(graph.weight(edge) for edge in matching.edges())


@given(cost_matrix(max_size=4, max_weight=3))
def test_many_ties(weights):
    graph, left, right = make_complete_bipartite(weights)
    matching = minimum_weight_perfect_matching(graph, left, right)
    assert_is_perfect(matching, graph, left, right)
    assert matching.value() == brute_force_minimum(weights)


@pytest.mark.parametrize('seed', range(10))
def test_size_six(seed):
    rng = random.Random(seed)
    weights = [[rng.randint(0, 100) for _ in range(6)] for _ in range(6)]
    graph, left, right = make_complete_bipartite(weights)
    matching = minimum_weight_perfect_matching(graph, left, right)
    assert_is_perfect(matching, graph, left, right)
    assert matching.value() == brute_force_minimum(weights)


@pytest.mark.parametrize('seed', range(5))
def test_float_weights(seed):
    rng = random.Random(seed)
    weights = [[rng.uniform(0, 10) for _ in range(5)] for _ in range(5)]
    graph, left, right = make_complete_bipartite(weights)
    matching = minimum_weight_perfect_matching(graph, left, right)
    assert_is_perfect(matching, graph, left, right)
    assert matching.value() == pytest.approx(brute_force_minimum(weights))


@pytest.mark.parametrize(
    '   weights,                                    expected_value',
    [
        ([[7]],                                     7),
        ([[0]],                                     0),
        ([[1, 2], [2, 1]],                          2),
        ([[2, 1], [1, 2]],                          2),
        ([[4, 1, 3], [2, 0, 5], [3, 2, 2]],         5),
        ([[1, 1, 1], [1, 1, 1], [1, 1, 1]],         3),
        ([[0, 0, 0], [0, 0, 0], [0, 0, 0]],         0),
        ([[9, 2, 7, 8], [6, 4, 3, 7], [5, 8, 1, 8], [7, 6, 9, 4]], 13),
    ]
)  # yapf: disable
def test_known_values(weights, expected_value):
    graph, left, right = make_complete_bipartite(weights)
    matching = minimum_weight_perfect_matching(graph, left, right)
    assert matching.value() == expected_value


def test_two_by_two_example():
    graph = Graph({('s1', 't1'): 1, ('s1', 't2'): 2, ('s2', 't1'): 2, ('s2', 't2'): 1})
    matching = BipartiteWeightedMatcher(graph, ['s1', 's2'], ['t1', 't2']).compute_matching()
    assert matching.edges() == {('s1', 't1'), ('s2', 't2')}
    assert matching.value() == 2


def test_single_pair():
    graph = Graph({('s', 't'): 3.5})
    matching = minimum_weight_perfect_matching(graph, ['s'], ['t'])
    assert matching == Matching({('s', 't')}, 3.5)


def test_empty():
    matching = minimum_weight_perfect_matching(Graph(), [], [])
    assert len(matching) == 0
    assert matching.value() == 0


def test_edges_stored_in_other_orientation():
    graph = Graph({('t1', 's1'): 5, ('t2', 's1'): 1, ('t1', 's2'): 1, ('t2', 's2'): 5})
    matching = minimum_weight_perfect_matching(graph, ['s1', 's2'], ['t1', 't2'])
    assert matching.edges() == {('t2', 's1'), ('t1', 's2')}
    assert matching.mate('s1') == 't2'
    assert matching.value() == 2


def test_weighted_view():
    graph, left, right = make_complete_bipartite([[1, 2], [2, 1]])
    view = AsWeightedGraph(graph, {('s0', 't0'): 10, ('s1', 't1'): 10})
    matching = minimum_weight_perfect_matching(view, left, right)
    assert matching.edges() == {('s0', 't1'), ('s1', 't0')}
    assert matching.value() == 4


@given(cost_matrix())
def test_value_is_deterministic(weights):
    graph, left, right = make_complete_bipartite(weights)
    matcher = BipartiteWeightedMatcher(graph, left, right)
    assert matcher.compute_matching().value() == matcher.compute_matching().value()


def test_graph_is_not_modified():
    weights = [[4, 1, 3], [2, 0, 5], [3, 2, 2]]
    graph, left, right = make_complete_bipartite(weights)
    before = dict(graph.edges_with_weights())
    minimum_weight_perfect_matching(graph, left, right)
    assert dict(graph.edges_with_weights()) == before


class TestInvalidInput:
    def test_unequal_partitions(self):
        graph = Graph({('s1', 't1'): 1, ('s2', 't1'): 1})
        with pytest.raises(InvalidInputError):
            BipartiteWeightedMatcher(graph, ['s1', 's2'], ['t1'])

    def test_missing_edge(self):
        graph = Graph({('s1', 't1'): 1, ('s1', 't2'): 1, ('s2', 't1'): 1})
        with pytest.raises(InvalidInputError):
            BipartiteWeightedMatcher(graph, ['s1', 's2'], ['t1', 't2'])

    def test_too_many_edges(self):
        graph = Graph({('s1', 't1'): 1, ('s1', 't2'): 1, ('s2', 't1'): 1, ('s2', 't2'): 1, ('s1', 's2'): 1})
        with pytest.raises(InvalidInputError):
            BipartiteWeightedMatcher(graph, ['s1', 's2'], ['t1', 't2'])

    def test_edge_inside_partition(self):
        graph = Graph({('s1', 't1'): 1, ('s1', 't2'): 1, ('s2', 't1'): 1, ('s1', 's2'): 1})
        with pytest.raises(InvalidInputError):
            BipartiteWeightedMatcher(graph, ['s1', 's2'], ['t1', 't2'])

    def test_negative_weight(self):
        graph = Graph({('s1', 't1'): -1})
        with pytest.raises(InvalidInputError):
            BipartiteWeightedMatcher(graph, ['s1'], ['t1'])

    @pytest.mark.parametrize('weight', [float('nan'), float('inf'), -float('inf')])
    def test_non_finite_weight(self, weight):
        graph = Graph({('s1', 't1'): weight, ('s1', 't2'): 1, ('s2', 't1'): 2, ('s2', 't2'): 1})
        with pytest.raises(InvalidInputError):
            BipartiteWeightedMatcher(graph, ['s1', 's2'], ['t1', 't2'])

    def test_non_finite_weight_in_view(self):
        graph = Graph({('s1', 't1'): 1})
        view = AsWeightedGraph(graph, {('s1', 't1'): float('nan')})
        with pytest.raises(InvalidInputError):
            minimum_weight_perfect_matching(view, ['s1'], ['t1'])

    def test_repeated_partition_vertex(self):
        graph = Graph({('a', 'x'): 1, ('a', 'y'): 1, ('c', 'd'): 1, ('e', 'f'): 1})
        with pytest.raises(InvalidInputError):
            BipartiteWeightedMatcher(graph, ['a', 'a'], ['x', 'y'])
        with pytest.raises(InvalidInputError):
            BipartiteWeightedMatcher(graph, ['x', 'y'], ['a', 'a'])

    def test_partitions_share_vertex(self):
        graph = Graph({('a', 'b'): 1, ('a', 'c'): 1, ('b', 'c'): 1, ('d', 'e'): 1})
        with pytest.raises(InvalidInputError):
            BipartiteWeightedMatcher(graph, ['a', 'b'], ['b', 'c'])

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            minimum_weight_perfect_matching(Graph({('s1', 't1'): 1}), ['s1'], [])


class TestKuhnMunkresMatrix:
    def test_excess_matrix(self):
        matrix = _KuhnMunkresMatrix([[4, 1, 3], [2, 0, 5], [3, 2, 2]])
        assert matrix.excess == [[2, 0, 2], [1, 0, 5], [0, 0, 0]]

    def test_excess_matrix_has_zero_in_every_line(self):
        matrix = _KuhnMunkresMatrix([[5, 6, 7], [8, 9, 10], [6, 4, 9]])
        for row in matrix.excess:
            assert 0 in row
        for j in range(3):
            assert any(row[j] == 0 for row in matrix.excess)
        assert all(value >= 0 for row in matrix.excess for value in row)

    def test_vertex_cover_size_equals_matching_size(self):
        matrix = _KuhnMunkresMatrix([[4, 1, 3], [2, 0, 5], [3, 2, 2]])
        size = matrix.build_maximum_matching()
        assert size == 2
        matrix.build_vertex_cover()
        assert sum(matrix.rows_covered) + sum(matrix.columns_covered) == size
        for i, j in itertools.product(range(3), range(3)):
            if matrix.excess[i][j] == 0:
                assert matrix.rows_covered[i] or matrix.columns_covered[j]

    def test_extend_equality_graph_keeps_excess_non_negative(self):
        matrix = _KuhnMunkresMatrix([[4, 1, 3], [2, 0, 5], [3, 2, 2]])
        matrix.build_maximum_matching()
        matrix.build_vertex_cover()
        matrix.extend_equality_graph()
        assert all(value >= 0 for row in matrix.excess for value in row)
        assert matrix.build_maximum_matching() == 3

    def test_matching_arrays_are_consistent(self):
        matrix = _KuhnMunkresMatrix([[9, 2, 7, 8], [6, 4, 3, 7], [5, 8, 1, 8], [7, 6, 9, 4]])
        assignment = matrix.build_matching()
        assert sorted(assignment) == [0, 1, 2, 3]
        for i, j in enumerate(assignment):
            assert matrix.row_matched[j] == i
