# -*- coding: utf-8 -*-
"""Contains the graph contract consumed by the matching algorithms and a simple in-memory implementation.

The `GraphView` class describes the read-only interface that every matcher expects. The `Graph` class is
a specialized dictionary implementing it, where each edge is represented by a 2-tuple key and the value is
the weight of the edge. `DiGraph` is its directed counterpart and `AsWeightedGraph` overlays different
weights on an existing graph.
"""
import abc
from typing import Dict, Generic, Hashable, Iterable, List, Mapping, MutableMapping, Optional, Tuple, TypeVar

try:
    from graphviz import Digraph, Graph as _DotGraph
except ImportError:
    Digraph = _DotGraph = None

__all__ = ['GraphView', 'Graph', 'DiGraph', 'AsWeightedGraph', 'neighbor_list_of']

TVertex = TypeVar('TVertex', bound=Hashable)

Edge = Tuple[TVertex, TVertex]

DEFAULT_WEIGHT = 1.0


class GraphView(Generic[TVertex], metaclass=abc.ABCMeta):
    """Read-only view of a graph.

    Edges are opaque hashable objects; their end points are obtained with :meth:`endpoints`.
    Matchers only ever call these methods and never modify the graph.
    """

    __slots__ = ()

    directed = False
    simple = True

    @abc.abstractmethod
    def vertices(self) -> Iterable[TVertex]:
        """Returns the vertices of the graph in a stable order."""

    @abc.abstractmethod
    def edges(self) -> Iterable[Edge]:
        """Returns the edges of the graph."""

    @abc.abstractmethod
    def edge(self, source: TVertex, target: TVertex) -> Optional[Edge]:
        """Returns the edge connecting *source* and *target* or ``None`` if there is none."""

    @abc.abstractmethod
    def endpoints(self, edge: Edge) -> Tuple[TVertex, TVertex]:
        """Returns the two end points of the given *edge*."""

    @abc.abstractmethod
    def incident_edges(self, vertex: TVertex) -> Iterable[Edge]:
        """Returns all the edges touching *vertex*."""

    @abc.abstractmethod
    def weight(self, edge: Edge) -> float:
        """Returns the weight of the given *edge*."""

    def opposite(self, edge: Edge, vertex: TVertex) -> TVertex:
        """Returns the end point of *edge* that is not *vertex*."""
        source, target = self.endpoints(edge)
        if source == vertex:
            return target
        if target == vertex:
            return source
        raise ValueError("{!r} is not an end point of {!r}".format(vertex, edge))


def neighbor_list_of(graph: GraphView[TVertex], vertex: TVertex) -> List[TVertex]:
    """Returns the opposite end points of all the edges incident to *vertex*.

    A neighbor shows up once per connecting edge, so in a directed graph with edges in both directions it is
    listed twice.
    """
    return [graph.opposite(edge, vertex) for edge in graph.incident_edges(vertex)]


class Graph(GraphView[TVertex], MutableMapping[Edge, float]):
    """An undirected simple graph with weighted edges.

    This class is a specialized dictionary, where each edge is represented by a 2-tuple that is used as a key in the
    dictionary. The value is the weight of the edge. Since the graph is undirected, both orientations of the tuple
    refer to the same edge and the edge keeps the orientation it was first inserted with:

    >>> graph = Graph()
    >>> graph['a', 'b'] = 3
    >>> graph['b', 'a']
    3
    >>> list(graph.edges())
    [('a', 'b')]

    Vertices are added implicitly by their edges or explicitly with :meth:`add_vertex`. Listeners registered with
    :meth:`add_listener` are notified after every change.
    """

    __slots__ = ('_edges', '_adjacency', '_incident', '_listeners')

    def __init__(self, *args, **kwargs):
        self._edges = {}  # type: Dict[Edge, float]
        self._adjacency = {}  # type: Dict[TVertex, Dict[TVertex, Edge]]
        self._incident = {}  # type: Dict[TVertex, Dict[Edge, None]]
        self._listeners = []  # type: List[object]
        self.update(*args, **kwargs)

    @staticmethod
    def _check_key(key):
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("The edge must be a 2-tuple")

    def __setitem__(self, key: Edge, value: float) -> None:
        self._check_key(key)
        existing = self.edge(*key)
        if existing is not None:
            self._edges[existing] = value
            return
        source, target = key
        if source == target:
            raise ValueError("Loops are not allowed: {!r}".format(key))
        self.add_vertex(source)
        self.add_vertex(target)
        self._edges[key] = value
        self._adjacency[source][target] = key
        if not self.directed:
            self._adjacency[target][source] = key
        self._incident[source][key] = None
        self._incident[target][key] = None
        self._notify('edge_added', key)

    def __getitem__(self, key: Edge) -> float:
        self._check_key(key)
        existing = self.edge(*key)
        if existing is None:
            raise KeyError(key)
        return self._edges[existing]

    def __delitem__(self, key: Edge) -> None:
        self._check_key(key)
        existing = self.edge(*key)
        if existing is None:
            raise KeyError(key)
        source, target = existing
        del self._edges[existing]
        del self._adjacency[source][target]
        if not self.directed:
            del self._adjacency[target][source]
        del self._incident[source][existing]
        del self._incident[target][existing]
        self._notify('edge_removed', existing)

    def __iter__(self):
        return self._edges.__iter__()

    def __len__(self):
        return self._edges.__len__()

    def __contains__(self, key):
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        return self.edge(*key) is not None

    def __eq__(self, other):
        if isinstance(other, dict):
            return self._edges == other
        elif isinstance(self, type(other)):
            return (
                self.directed == other.directed and self._edges == other._edges and
                self._adjacency.keys() == other._adjacency.keys()
            )
        else:
            return NotImplemented

    def __repr__(self):
        return '{}({!r})'.format(type(self).__name__, self._edges)

    def __copy__(self):
        new_graph = type(self)()
        for vertex in self._adjacency:
            new_graph.add_vertex(vertex)
        new_graph.update(self._edges)
        return new_graph

    copy = __copy__

    def add_vertex(self, vertex: TVertex) -> bool:
        """Adds the *vertex* to the graph. Returns ``False`` if it was already present."""
        if vertex in self._adjacency:
            return False
        self._adjacency[vertex] = {}
        self._incident[vertex] = {}
        self._notify('vertex_added', vertex)
        return True

    def remove_vertex(self, vertex: TVertex) -> None:
        """Removes the *vertex* and all its incident edges from the graph.

        Raises:
            KeyError:
                If the vertex is not part of the graph.
        """
        if vertex not in self._adjacency:
            raise KeyError(vertex)
        for edge in list(self._incident[vertex]):
            del self[edge]
        del self._adjacency[vertex]
        del self._incident[vertex]
        self._notify('vertex_removed', vertex)

    def add_listener(self, listener) -> None:
        """Registers a listener that is called after each change of the graph.

        The listener must provide the methods ``edge_added(edge)``, ``edge_removed(edge)``,
        ``vertex_added(vertex)`` and ``vertex_removed(vertex)``.
        """
        self._listeners.append(listener)

    def remove_listener(self, listener) -> None:
        self._listeners.remove(listener)

    def _notify(self, event, item):
        for listener in self._listeners:
            getattr(listener, event)(item)

    def vertices(self):
        return self._adjacency.keys()

    def edges(self):
        return self._edges.keys()

    def edges_with_weights(self):
        """Returns a view on the edges with weights."""
        return self._edges.items()

    def edge(self, source, target):
        neighbors = self._adjacency.get(source)
        if neighbors is None:
            return None
        return neighbors.get(target)

    def endpoints(self, edge):
        if edge not in self._edges:
            raise KeyError(edge)
        return edge

    def incident_edges(self, vertex):
        return list(self._incident[vertex])

    def weight(self, edge):
        return self._edges[edge]

    def add_edge(self, source: TVertex, target: TVertex, weight: float=DEFAULT_WEIGHT) -> Edge:
        """Adds an edge and returns the key it is stored under."""
        self[source, target] = weight
        return self.edge(source, target)

    def as_graph(self, matching=None):  # pragma: no cover
        """Returns a :class:`graphviz.Graph` representation of this graph.

        Edges contained in the optional *matching* are drawn bold.
        """
        if Digraph is None:
            raise ImportError('The graphviz package is required to draw the graph.')
        graph = Digraph() if self.directed else _DotGraph()
        matched = matching.edges() if matching is not None else frozenset()
        names = {}  # type: Dict[TVertex, str]
        for node_id, vertex in enumerate(self._adjacency):
            name = 'node{:d}'.format(node_id)
            names[vertex] = name
            graph.node(name, label=str(vertex))
        for (source, target), weight in self._edges.items():
            style = 'bold' if (source, target) in matched else 'solid'
            edge_label = weight != DEFAULT_WEIGHT and str(weight) or ''
            graph.edge(names[source], names[target], edge_label, style=style)
        return graph


class DiGraph(Graph[TVertex]):
    """A directed graph with weighted edges.

    Here ``(u, v)`` and ``(v, u)`` are distinct edges. :meth:`incident_edges` returns both the incoming and the
    outgoing edges of a vertex.
    """

    __slots__ = ()

    directed = True


class AsWeightedGraph(GraphView[TVertex]):
    """A read-only view of a graph with some of the edge weights replaced.

    Edges missing from *weights* keep the weight of the underlying *graph*:

    >>> graph = Graph({(1, 2): 5, (2, 3): 7})
    >>> view = AsWeightedGraph(graph, {(1, 2): 1})
    >>> view.weight((1, 2)), view.weight((2, 3))
    (1, 7)
    """

    __slots__ = ('_graph', '_weights')

    def __init__(self, graph: GraphView[TVertex], weights: Mapping[Edge, float]) -> None:
        self._graph = graph
        self._weights = dict(weights)

    @property
    def directed(self):
        return self._graph.directed

    @property
    def simple(self):
        return self._graph.simple

    def vertices(self):
        return self._graph.vertices()

    def edges(self):
        return self._graph.edges()

    def edge(self, source, target):
        return self._graph.edge(source, target)

    def endpoints(self, edge):
        return self._graph.endpoints(edge)

    def incident_edges(self, vertex):
        return self._graph.incident_edges(vertex)

    def weight(self, edge):
        if edge in self._weights:
            return self._weights[edge]
        return self._graph.weight(edge)
