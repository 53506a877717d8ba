"""Relationship aggregation between two persons.

Every path found by ``paths.find_all_paths`` is run through a fresh state
machine and the terminal states are collected in a set, so two routes ending
in the same structural state give one answer.

API:
    get_canonical_relationships(graph, p1, p2) -> Set[RelationshipState]
    kinship_terms(graph, p1, p2) -> List[str]
    render_terms(p1, p2, states) -> List[str]
    explain(graph, p1, p2) -> List[dict]

``get_canonical_relationships`` returns ``{Stop()}`` both for the same person
and for unrelated persons; ``kinship_terms`` tells the two apart
(``["self"]`` vs ``[]``).
"""
from __future__ import annotations
from typing import Any, Dict, List, Set
import logging

from .machine import STOP, evaluate_path
from .models import Person
from .paths import find_all_paths, path_kinds
from .states import RelationshipState, Stop


def get_canonical_relationships(graph, p1: Person, p2: Person) -> Set[RelationshipState]:
    graph._require(p1)
    graph._require(p2)
    if p1 == p2:
        return {STOP}
    found = find_all_paths(graph, p1, p2)
    if not found:
        logging.debug("kingraph: %s and %s are unrelated", p1.label(), p2.label())
        return {STOP}
    states = {evaluate_path(graph, p1, path) for path in found}
    return {s for s in states if not isinstance(s, Stop)}


def kinship_terms(graph, p1: Person, p2: Person) -> List[str]:
    """Rendered terms for what p1 is to p2, sorted; ``["self"]`` for the same person."""
    return render_terms(p1, p2, get_canonical_relationships(graph, p1, p2))


def render_terms(p1: Person, p2: Person, states: Set[RelationshipState]) -> List[str]:
    """Terms for a ``get_canonical_relationships`` result between p1 and p2."""
    if p1 == p2:
        return [STOP.term()]
    return sorted({s.term() for s in states if not isinstance(s, Stop)})


def explain(graph, p1: Person, p2: Person) -> List[Dict[str, Any]]:
    """Per path detail: the kind string and the state it ends in."""
    graph._require(p1)
    graph._require(p2)
    out: List[Dict[str, Any]] = []
    for path in find_all_paths(graph, p1, p2):
        state = evaluate_path(graph, p1, path)
        out.append({
            "kinds": path_kinds(path),
            "persons": [h.node.label() for h in path] + ([path[-1].to.label()] if path else []),
            "state": state,
        })
    return out
