# -*- coding: utf-8 -*-
"""This module contains the `Matching` result type and the errors shared by the matching algorithms."""
from typing import Callable, Dict, FrozenSet, Generic, Hashable, Iterable, Iterator, Optional, Tuple, TypeVar, Union

__all__ = ['Matching', 'InvalidInputError', 'TypeMismatchError']

TVertex = TypeVar('TVertex', bound=Hashable)
Edge = Tuple[TVertex, TVertex]


class InvalidInputError(ValueError):
    """Raised when the input of a matcher does not satisfy its preconditions."""


class TypeMismatchError(TypeError):
    """Raised when a matcher is given a kind of graph it does not support."""


class Matching(Generic[TVertex]):
    """A set of vertex-disjoint edges together with its value.

    The value is the total weight of the edges for weighted matchings and the number of edges for cardinality
    matchings.

    This data structure is meant to be immutable, so do not change any of its attributes!

    >>> matching = Matching({('a', 'b'), ('c', 'd')}, 2)
    >>> len(matching), matching.value()
    (2, 2)
    >>> matching.mate('b')
    'a'
    """

    __slots__ = ('_edges', '_value', '_mates')

    def __init__(self, edges: Iterable[Edge], value: Union[int, float],
                 endpoints: Optional[Callable[[Edge], Tuple[TVertex, TVertex]]]=None) -> None:
        """Create a Matching.

        Args:
            edges:
                The edges of the matching.
            value:
                The weight or cardinality of the matching.
            endpoints:
                Optional function returning the end points of an edge, e.g. :meth:`.GraphView.endpoints`.
                By default, edges are expected to be 2-tuples of vertices.

        Raises:
            ValueError:
                If two of the edges share a vertex.
        """
        self._edges = frozenset(edges)  # type: FrozenSet[Edge]
        self._value = value
        self._mates = {}  # type: Dict[TVertex, TVertex]
        for edge in self._edges:
            source, target = endpoints(edge) if endpoints is not None else edge
            if source in self._mates or target in self._mates:
                raise ValueError("The edges of a matching must be vertex-disjoint")
            self._mates[source] = target
            self._mates[target] = source

    def edges(self) -> FrozenSet[Edge]:
        """Returns the edges of the matching."""
        return self._edges

    def value(self) -> Union[int, float]:
        """Returns the total weight or the cardinality of the matching."""
        return self._value

    def is_matched(self, vertex: TVertex) -> bool:
        """Checks whether the *vertex* is covered by an edge of the matching."""
        return vertex in self._mates

    def mate(self, vertex: TVertex) -> Optional[TVertex]:
        """Returns the vertex matched with *vertex* or ``None`` if it is exposed."""
        return self._mates.get(vertex)

    def __len__(self):
        return len(self._edges)

    def __iter__(self) -> Iterator[Edge]:
        return iter(self._edges)

    def __contains__(self, edge):
        return edge in self._edges

    def __eq__(self, other):
        if not isinstance(other, Matching):
            return NotImplemented
        return self._edges == other._edges and self._value == other._value

    def __hash__(self):
        return hash((self._edges, self._value))

    def __repr__(self):
        return '{}({!r}, {!r})'.format(type(self).__name__, set(self._edges), self._value)
