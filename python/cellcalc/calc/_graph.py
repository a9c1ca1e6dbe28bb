"""Dependency graph: bidirectional edge index between string keys."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from cellcalc.calc._errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def _require(value: object, argument: str) -> None:
    if value is None:
        raise InvalidArgumentError(argument)


class DependencyGraph:
    """A set of ordered pairs ``(s, t)`` meaning "s depends on t".

    For ``{("a", "b"), ("a", "c"), ("b", "d"), ("d", "d")}``::

        dependents_of("a") == ("b", "c")    dependees_of("a") == ()
        dependents_of("b") == ("d",)        dependees_of("b") == ("a",)
        dependents_of("c") == ()            dependees_of("c") == ("a",)
        dependents_of("d") == ("d",)        dependees_of("d") == ("b", "d")

    Both directions are indexed so either lookup is a dict hit. Cycles,
    including self-loops, are ordinary data; nothing here rejects them.

    Passing ``original`` makes an independent deep copy of that graph.
    """

    __slots__ = ("_dependents", "_dependees", "_size")

    def __init__(self, original: DependencyGraph | None = None) -> None:
        # s -> {t: None} for every recorded (s, t); dicts keep insertion order
        self._dependents: dict[str, dict[str, None]] = {}
        # t -> {s: None} (reverse edges)
        self._dependees: dict[str, dict[str, None]] = {}
        self._size = 0

        if original is not None:
            self._dependents = {k: dict(v) for k, v in original._dependents.items()}
            self._dependees = {k: dict(v) for k, v in original._dependees.items()}
            self._size = original._size

    @classmethod
    def from_edges(cls, edges: Iterable[tuple[str, str]]) -> DependencyGraph:
        """Build a graph from ``(s, t)`` pairs."""
        _require(edges, "edges")
        graph = cls()
        for s, t in edges:
            graph.add_edge(s, t)
        return graph

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        """Number of distinct edges."""
        return self._size

    def has_dependents(self, s: str) -> bool:
        _require(s, "s")
        return s in self._dependents

    def has_dependees(self, t: str) -> bool:
        _require(t, "t")
        return t in self._dependees

    def dependents_of(self, s: str) -> tuple[str, ...]:
        """Keys that *s* depends on, in insertion order."""
        _require(s, "s")
        return tuple(self._dependents.get(s, ()))

    def dependees_of(self, t: str) -> tuple[str, ...]:
        """Keys that depend on *t*, in insertion order."""
        _require(t, "t")
        return tuple(self._dependees.get(t, ()))

    def edges(self) -> Iterator[tuple[str, str]]:
        """Iterate over every ``(s, t)`` pair."""
        for s, targets in self._dependents.items():
            for t in targets:
                yield (s, t)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_edge(self, s: str, t: str) -> None:
        """Record ``(s, t)``. No effect if it is already present."""
        _require(s, "s")
        _require(t, "t")
        self._link(s, t)

    def remove_edge(self, s: str, t: str) -> None:
        """Forget ``(s, t)``. No effect if it is not present."""
        _require(s, "s")
        _require(t, "t")
        self._unlink(s, t)

    def replace_dependents(self, s: str, new_targets: Iterable[str]) -> None:
        """Remove every ``(s, r)``, then add ``(s, t)`` for each t in *new_targets*.

        A None element aborts the call part-way through; edges added before
        it stay in place.
        """
        _require(s, "s")
        _require(new_targets, "new_targets")
        logger.debug("Replacing dependents of %s", s)
        for t in tuple(self._dependents.get(s, ())):
            self._unlink(s, t)
        for t in new_targets:
            _require(t, "new_targets element")
            self._link(s, t)

    def replace_dependees(self, t: str, new_sources: Iterable[str]) -> None:
        """Remove every ``(r, t)``, then add ``(s, t)`` for each s in *new_sources*.

        A None element aborts the call part-way through; edges added before
        it stay in place.
        """
        _require(t, "t")
        _require(new_sources, "new_sources")
        logger.debug("Replacing dependees of %s", t)
        for s in tuple(self._dependees.get(t, ())):
            self._unlink(s, t)
        for s in new_sources:
            _require(s, "new_sources element")
            self._link(s, t)

    # Both maps are only ever written through these two primitives.

    def _link(self, s: str, t: str) -> None:
        targets = self._dependents.setdefault(s, {})
        if t in targets:
            return
        targets[t] = None
        self._dependees.setdefault(t, {})[s] = None
        self._size += 1

    def _unlink(self, s: str, t: str) -> None:
        targets = self._dependents.get(s)
        if targets is None or t not in targets:
            return
        del targets[t]
        if not targets:
            del self._dependents[s]
        sources = self._dependees[t]
        del sources[s]
        if not sources:
            del self._dependees[t]
        self._size -= 1

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def copy(self) -> DependencyGraph:
        """Independent deep copy."""
        return type(self)(self)

    def __copy__(self) -> DependencyGraph:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> DependencyGraph:
        return self.copy()

    def __len__(self) -> int:
        return self._size

    def __contains__(self, edge: object) -> bool:
        if not isinstance(edge, tuple) or len(edge) != 2:
            return False
        s, t = edge
        if not isinstance(s, str) or not isinstance(t, str):
            return False
        return t in self._dependents.get(s, ())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DependencyGraph):
            return self._size == other._size and all(e in other for e in self.edges())
        return NotImplemented

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"DependencyGraph(size={self._size})"
