"""Blood-relation oracle.

Decides whether two persons are joined by a pure ancestor/descendant chain.
Each hop of a simple path is weighted by a large prime keyed on its kind
(Sibling weighs nothing) and the path is a pure chain iff its total is a
multiple of the Parent prime or of the Child prime:

    sum = a * PARENT_PRIME + b * CHILD_PRIME + c * PARTNER_PRIME

is divisible by PARENT_PRIME only when b and c are multiples of it, which no
path of a graph of realistic size can reach. A path made only of sibling hops
sums to 0 and therefore counts as blood.

API:
    is_blood_related(graph, p1, p2) -> bool
"""
from __future__ import annotations
from typing import Iterable, List, Sequence

import networkx as nx

from .models import Person, RelationKind

PARENT_PRIME = 2_000_003
CHILD_PRIME = 2_000_029
PARTNER_PRIME = 2_000_039

_PRIMES = {
    RelationKind.PARENT: PARENT_PRIME,
    RelationKind.CHILD: CHILD_PRIME,
    RelationKind.SIBLING: 0,
    RelationKind.REPRODUCTIVE_PARTNER: PARTNER_PRIME,
}


def prime_of(kind: RelationKind) -> int:
    return _PRIMES[kind]


def hop_weight(kinds: Iterable[RelationKind]) -> int:
    """Weight of one hop given all edge kinds joining the two persons."""
    for kind in kinds:
        if kind is not RelationKind.REPRODUCTIVE_PARTNER:
            return _PRIMES[kind]
    return PARTNER_PRIME


def path_weight(graph, nodes: Sequence[Person]) -> int:
    total = 0
    for a, b in zip(nodes, nodes[1:]):
        total += hop_weight(graph.kinds_between(a, b))
    return total


def is_pure_chain(total: int) -> bool:
    return total % PARENT_PRIME == 0 or total % CHILD_PRIME == 0


def is_blood_related(graph, p1: Person, p2: Person) -> bool:
    """Return True if any simple path between p1 and p2 is a pure chain."""
    if p1 == p2:
        return True
    # node paths may repeat once per parallel edge; harmless for any()
    node_paths: Iterable[List[Person]] = nx.all_simple_paths(graph.multigraph, p1, p2)
    return any(is_pure_chain(path_weight(graph, nodes)) for nodes in node_paths)
