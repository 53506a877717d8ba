"""Canonical relationship state machine.

The machine walks a path hop by hop. Its state always answers "what is the
first person of the path to the person reached so far"; each hop
``(node, kind, to)`` moves that answer from ``node`` to ``to``.

The first hop picks a base state from its kind (``base_state``). Every later
hop goes through ``transition``, which is total over the closed state family
and the four relation kinds. A few rules need more than the state and the
hop, and read the graph through a ``Trail``:

- half relations: two persons are full siblings only when they share both
  recorded parents (``shares_parents``), checked against ``trail.lineage``,
  the person on the first person's line directly below the current ancestor;
- partner hops from a descendant state continue only when the partner is the
  other parent of that lineage person, otherwise the route is a step relation
  with no term;
- an aunt/uncle-in-law chain remembers how it was entered (``trail.entry``):
  through the partner of a niece it may climb back into blood (her child),
  which consults the blood-relation oracle; through the first person's own
  partner it stays in-law all the way down.

``Stop`` is absorbing: once reached the rest of the path is not consumed.
"""
from __future__ import annotations
from typing import Callable, Dict, NamedTuple, Optional, Type
import logging

from .errors import UndefinedTransitionError
from .models import Hop, Path, Person, RelationKind, Sex
from .states import (
    NthAuntUncle,
    NthAuntUncleInLaw,
    NthChild,
    NthChildInLaw,
    NthCousinKRemoved,
    NthNieceNephew,
    NthNieceNephewInLaw,
    NthParent,
    NthParentInLaw,
    RelationshipState,
    ReproductivePartner,
    Sibling,
    SiblingInLaw,
    Stop,
)
from . import blood

P = RelationKind.PARENT
C = RelationKind.CHILD
S = RelationKind.SIBLING
R = RelationKind.REPRODUCTIVE_PARTNER

STOP = Stop()


class Trail(NamedTuple):
    origin: Person
    # person visited before hop.node, None on the first hop
    previous: Optional[Person]
    # source of the latest Child hop (the origin until one is taken)
    lineage: Person
    # kind of the hop that produced the current state
    entry: Optional[RelationKind] = None


def base_state(kind: RelationKind, sex: Sex) -> RelationshipState:
    if kind is P:
        return NthParent(0, sex)
    if kind is C:
        return NthChild(0, sex)
    if kind is S:
        return Sibling(False, sex)
    if kind is R:
        return ReproductivePartner(sex)
    raise UndefinedTransitionError(None, kind)


def _from_nth_parent(st: NthParent, hop: Hop, graph, trail: Trail) -> RelationshipState:
    if hop.kind is P:
        return NthParent(st.n + 1, st.sex)
    if hop.kind is C:
        # hop.to is the other parent of a descendant
        if st.n == 0:
            return ReproductivePartner(st.sex)
        return NthParentInLaw(st.n - 1, st.sex)
    if hop.kind is S:
        return NthParent(st.n, st.sex)
    return NthParentInLaw(st.n, st.sex)


def _from_nth_parent_in_law(st: NthParentInLaw, hop: Hop, graph, trail: Trail) -> RelationshipState:
    if hop.kind is P:
        # a child of the in-law is a descendant only if it is also of our blood
        if blood.is_blood_related(graph, trail.origin, hop.to):
            return NthParent(st.n + 1, st.sex)
        return STOP
    return STOP


def _from_nth_child(st: NthChild, hop: Hop, graph, trail: Trail) -> RelationshipState:
    if hop.kind is C:
        return NthChild(st.n + 1, st.sex)
    if hop.kind is P:
        # hop.node is a common ancestor, hop.to another of its children
        is_half = not graph.shares_parents(trail.lineage, hop.to)
        if st.n == 0:
            return Sibling(is_half, st.sex)
        return NthNieceNephew(st.n - 1, is_half, st.sex)
    if hop.kind is S:
        return NthNieceNephew(st.n, False, st.sex)
    if graph.is_parent(hop.to, trail.lineage):
        return NthChild(st.n, st.sex)
    return STOP


def _from_nth_child_in_law(st: NthChildInLaw, hop: Hop, graph, trail: Trail) -> RelationshipState:
    if hop.kind is C:
        return NthChildInLaw(st.n + 1, st.sex)
    if hop.kind is P:
        is_half = not graph.shares_parents(trail.lineage, hop.to)
        if st.n == 0:
            return SiblingInLaw(is_half, st.sex)
        return NthNieceNephewInLaw(st.n - 1, is_half, st.sex)
    if hop.kind is S:
        return NthNieceNephewInLaw(st.n, False, st.sex)
    if graph.is_reproductive_partner(hop.node, hop.to) and graph.is_parent(hop.to, trail.lineage):
        return NthChildInLaw(st.n, st.sex)
    return STOP


def _from_sibling(st: Sibling, hop: Hop, graph, trail: Trail) -> RelationshipState:
    if hop.kind is P:
        return NthAuntUncle(0, st.is_half, st.sex)
    if hop.kind is C:
        if not st.is_half or graph.is_parent(hop.to, trail.origin):
            return NthChild(0, st.sex)
        return STOP
    if hop.kind is S:
        return Sibling(st.is_half, st.sex)
    return SiblingInLaw(st.is_half, st.sex)


def _from_sibling_in_law(st: SiblingInLaw, hop: Hop, graph, trail: Trail) -> RelationshipState:
    if hop.kind is P:
        # the child of a sibling's partner is usually the sibling's own child,
        # which the blood route already names
        if graph.is_parent(trail.previous, hop.to):
            return STOP
        return NthAuntUncleInLaw(0, st.is_half, st.sex)
    if hop.kind is S:
        return SiblingInLaw(st.is_half, st.sex)
    return STOP


def _from_partner(st: ReproductivePartner, hop: Hop, graph, trail: Trail) -> RelationshipState:
    if hop.kind is P:
        if graph.is_parent(trail.origin, hop.to):
            return NthParent(0, st.sex)
        return STOP
    if hop.kind is C:
        return NthChildInLaw(0, st.sex)
    if hop.kind is S:
        return SiblingInLaw(False, st.sex)
    return STOP


def _from_niece_nephew(st: NthNieceNephew, hop: Hop, graph, trail: Trail) -> RelationshipState:
    if hop.kind is P:
        return NthCousinKRemoved(st.n + 1, 1, st.is_half, st.sex)
    if hop.kind is C:
        # hop.to is the common ancestor when the relation is full
        if not st.is_half or graph.is_parent(hop.to, trail.lineage):
            return NthChild(st.n + 1, st.sex)
        return STOP
    if hop.kind is S:
        return NthNieceNephew(st.n, st.is_half, st.sex)
    return NthNieceNephewInLaw(st.n, st.is_half, st.sex)


def _from_niece_nephew_in_law(st: NthNieceNephewInLaw, hop: Hop, graph, trail: Trail) -> RelationshipState:
    if hop.kind is S:
        return NthNieceNephewInLaw(st.n, st.is_half, st.sex)
    return STOP


def _from_aunt_uncle(st: NthAuntUncle, hop: Hop, graph, trail: Trail) -> RelationshipState:
    if hop.kind is P:
        return NthAuntUncle(st.n + 1, st.is_half, st.sex)
    if hop.kind is C:
        # hop.to is the parent of the niece/nephew that is not on the path
        if st.n == 0:
            return SiblingInLaw(st.is_half, st.sex)
        return NthAuntUncleInLaw(st.n - 1, st.is_half, st.sex)
    if hop.kind is S:
        return NthAuntUncle(st.n, st.is_half, st.sex)
    return NthAuntUncleInLaw(st.n, st.is_half, st.sex)


def _from_aunt_uncle_in_law(st: NthAuntUncleInLaw, hop: Hop, graph, trail: Trail) -> RelationshipState:
    if hop.kind is P:
        if trail.entry is R:
            # partner of a blood niece/nephew: back into blood only through
            # that niece/nephew's own descendants
            if graph.is_reproductive_partner(trail.previous, hop.node) and blood.is_blood_related(
                graph, trail.previous, hop.to
            ):
                return NthAuntUncle(st.n + 1, st.is_half, st.sex)
            return STOP
        if trail.entry is P:
            # the first person married in, hop.to descends from hop.node
            return NthAuntUncleInLaw(st.n + 1, st.is_half, st.sex)
        return STOP
    if hop.kind is S:
        return NthAuntUncleInLaw(st.n, st.is_half, st.sex)
    return STOP


def _from_cousin(st: NthCousinKRemoved, hop: Hop, graph, trail: Trail) -> RelationshipState:
    if hop.kind is P:
        return NthCousinKRemoved(st.n, st.k + 1, st.is_half, st.sex)
    if hop.kind is C:
        # only a step back up the line we came down on has a name
        if not graph.is_parent(hop.to, trail.previous):
            return STOP
        if st.k > 1:
            return NthCousinKRemoved(st.n, st.k - 1, st.is_half, st.sex)
        return NthNieceNephew(st.n - 1, st.is_half, st.sex)
    if hop.kind is S:
        return NthCousinKRemoved(st.n, st.k, st.is_half, st.sex)
    return STOP


def _from_stop(st: Stop, hop: Hop, graph, trail: Trail) -> RelationshipState:
    return STOP


_TRANSITIONS: Dict[Type, Callable[..., RelationshipState]] = {
    NthParent: _from_nth_parent,
    NthParentInLaw: _from_nth_parent_in_law,
    NthChild: _from_nth_child,
    NthChildInLaw: _from_nth_child_in_law,
    Sibling: _from_sibling,
    SiblingInLaw: _from_sibling_in_law,
    ReproductivePartner: _from_partner,
    NthNieceNephew: _from_niece_nephew,
    NthNieceNephewInLaw: _from_niece_nephew_in_law,
    NthAuntUncle: _from_aunt_uncle,
    NthAuntUncleInLaw: _from_aunt_uncle_in_law,
    NthCousinKRemoved: _from_cousin,
    Stop: _from_stop,
}


def transition(state: RelationshipState, hop: Hop, graph, trail: Trail) -> RelationshipState:
    handler = _TRANSITIONS.get(type(state))
    if handler is None or not isinstance(hop.kind, RelationKind):
        raise UndefinedTransitionError(state, hop.kind)
    return handler(state, hop, graph, trail)


class StateMachine:
    """Consumes the hops of one path, in order, starting from ``origin``."""

    def __init__(self, graph, origin: Person) -> None:
        self.graph = graph
        self.origin = origin
        self.state: Optional[RelationshipState] = None
        self.previous: Optional[Person] = None
        self.lineage = origin
        self.entry: Optional[RelationKind] = None
        self.steps = 0

    @property
    def halted(self) -> bool:
        return isinstance(self.state, Stop)

    def feed(self, hop: Hop) -> RelationshipState:
        if self.state is None:
            self.state = base_state(hop.kind, self.origin.sex)
            self.entry = hop.kind
        elif not self.halted:
            trail = Trail(self.origin, self.previous, self.lineage, self.entry)
            state = transition(self.state, hop, self.graph, trail)
            if state != self.state:
                self.entry = hop.kind
            self.state = state
        if hop.kind is C:
            self.lineage = hop.node
        self.previous = hop.node
        self.steps += 1
        return self.state

    def run(self, path: Path) -> RelationshipState:
        for hop in path:
            self.feed(hop)
            if self.halted:
                break
        return self.state if self.state is not None else STOP


def evaluate_path(graph, origin: Person, path: Path) -> RelationshipState:
    """Run a fresh machine over ``path``; an empty path is the identity (``Stop``)."""
    state = StateMachine(graph, origin).run(path)
    logging.debug("kingraph: path %s -> %r", "".join(h.kind.symbol for h in path), state)
    return state
