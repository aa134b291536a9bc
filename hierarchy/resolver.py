"""
hierarchy/resolver.py — publish order for a set of units.

An index depends on every unit it references: each referenced unit has to
be published first so that its event id can be written into the index.
Iterative depth-first search over the "is referenced by" edges; the
reverse finish order puts every unit after everything it references.
Ties keep the input order (content units before indexes).
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum

from data_model.errors import CircularDependencyError, ConfigurationError
from data_model.units import Unit


class _State(IntEnum):
    UNVISITED   = 0
    IN_PROGRESS = 1
    DONE        = 2


def _dependents(units: Sequence[Unit]) -> dict[str, list[str]]:
    """d_tag -> d_tags of the indexes that reference it."""
    graph: dict[str, list[str]] = {}
    for u in units:
        if u.d_tag in graph:
            raise ConfigurationError(f"Duplicate unit identifier '{u.d_tag}'")
        graph[u.d_tag] = []

    for u in units:
        for ref in u.references:
            if ref.d_tag not in graph:
                raise ConfigurationError(
                    f"Unit '{u.d_tag}' references unknown unit '{ref.d_tag}'"
                )
            graph[ref.d_tag].append(u.d_tag)
    return graph


def resolve_publish_order(units: Sequence[Unit]) -> list[Unit]:
    """
    Returns the units in an order where every unit follows all units it
    references.

    Raises:
        CircularDependencyError: the reference graph has a cycle.
        ConfigurationError:      duplicate d-tags or unknown references.
    """
    graph = _dependents(units)
    by_tag = {u.d_tag: u for u in units}
    state = {tag: _State.UNVISITED for tag in graph}
    finished: list[str] = []

    for start in reversed([u.d_tag for u in units]):
        if state[start] is not _State.UNVISITED:
            continue
        state[start] = _State.IN_PROGRESS
        stack = [(start, iter(graph[start]))]

        while stack:
            node, edges = stack[-1]
            nxt = next(edges, None)
            if nxt is None:
                stack.pop()
                state[node] = _State.DONE
                finished.append(node)
                continue
            if state[nxt] is _State.IN_PROGRESS:
                raise CircularDependencyError(nxt)
            if state[nxt] is _State.UNVISITED:
                state[nxt] = _State.IN_PROGRESS
                stack.append((nxt, iter(graph[nxt])))

    finished.reverse()
    return [by_tag[tag] for tag in finished]
