"""Path enumeration between two persons of a ``KinGraph``.

Unlike a shortest-path search, every genealogical route matters here: two
cousins are related through each shared grandparent and, separately, through
the partnership of those grandparents. So all node-simple paths are returned.

API:
    find_all_paths(graph, source, target) -> List[Path]
    path_kinds(path) -> str

A path is a list of ``Hop(node, kind, to)`` from source to target; each
parallel edge between two persons is its own branch. ``source == target``
yields one empty path and unrelated persons yield ``[]``.
"""
from __future__ import annotations
from typing import Iterator, List, Optional
import logging

from .models import Hop, Path, Person


def _is_round_trip(arrived: Optional[Hop], hop: Hop) -> bool:
    """True if ``hop`` just undoes ``arrived`` (e.g. Parent then Child back)."""
    if arrived is None:
        return False
    return hop.to == arrived.node and hop.kind is arrived.kind.inverse


def find_all_paths(graph, source: Person, target: Person) -> List[Path]:
    """Return every simple path from source to target, bounded to |V|-1 hops.

    Depth-first search with an explicit stack of out-edge iterators; the
    visited list holds the persons of the path being explored.
    """
    if source == target:
        return [[]]

    max_hops = len(graph) - 1
    found: List[Path] = []
    visited: List[Person] = [source]
    trail: List[Hop] = []
    stack: List[Iterator[Hop]] = [graph.out_hops(source)]

    while stack:
        hop = next(stack[-1], None)
        if hop is None:
            # all out-edges of visited[-1] explored: backtrack
            stack.pop()
            visited.pop()
            if trail:
                trail.pop()
            continue
        if _is_round_trip(trail[-1] if trail else None, hop):
            continue
        if hop.to == target:
            found.append(trail + [hop])
            continue
        if hop.to in visited or len(trail) + 1 >= max_hops:
            continue
        visited.append(hop.to)
        trail.append(hop)
        stack.append(graph.out_hops(hop.to))

    logging.debug("kingraph: %d path(s) from %s to %s", len(found), source.label(), target.label())
    return found


def path_kinds(path: Path) -> str:
    """Compact kind string of a path, e.g. ``"CSP"`` for child, sibling, parent."""
    return "".join(h.kind.symbol for h in path)
