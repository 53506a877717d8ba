"""The relation graph.

``KinGraph`` stores persons as nodes of a ``networkx.MultiDiGraph``. Every
semantic relation is kept as a pair of mutually inverse edges whose key is the
``RelationKind``: ``add_relation(a, b, PARENT)`` stores ``a -PARENT-> b`` and
``b -CHILD-> a``. Parallel edges of different kinds between two persons are
allowed (siblings who are also partners); a second edge of the same kind is a
silent no-op.

The graph does no locking. Callers sharing one instance across threads must
serialize access themselves (the web layer holds a lock around its session).
"""
from __future__ import annotations
from collections import deque
from typing import Dict, Iterator, List, Optional, Set
import logging

import networkx as nx

from .errors import (
    AlreadyTwoParentsError,
    InvalidRelationError,
    PersonNotFoundError,
    SelfCycleError,
    UnknownKinError,
)
from .models import Hop, Path, Person, RelationKind, Sex, _new_id
from . import blood, export, paths, relationship


class KinGraph:
    def __init__(self, full_cycle_check: bool = True) -> None:
        self._graph = nx.MultiDiGraph()
        # person id -> insertion position
        self._positions: Dict[int, int] = {}
        self._order: List[Person] = []
        self.full_cycle_check = full_cycle_check

    # persons

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, person: object) -> bool:
        return isinstance(person, Person) and person.id in self._positions

    @property
    def multigraph(self) -> nx.MultiDiGraph:
        return self._graph

    def create_person(self, sex: Sex, name: Optional[str] = None) -> Person:
        pid = _new_id()
        while pid in self._positions:
            pid = _new_id()
        return self.add_person(Person(id=pid, sex=Sex.parse(sex), name=name))

    def create_person_with_name(self, sex: Sex, name: str) -> Person:
        """Create a name-keyed person whose id is its position in the graph."""
        pid = len(self._order)
        if pid in self._positions:
            raise UnknownKinError(f"id {pid} already taken")
        return self.add_person(Person(id=pid, sex=Sex.parse(sex), name=name))

    def add_person(self, person: Person) -> Person:
        if person.id in self._positions:
            return self._order[self._positions[person.id]]
        self._positions[person.id] = len(self._order)
        self._order.append(person)
        self._graph.add_node(person)
        logging.debug("kingraph: added person %s at position %d", person.label(), self._positions[person.id])
        return person

    def person(self, pid: int) -> Person:
        pos = self._positions.get(pid)
        if pos is None:
            raise PersonNotFoundError(pid)
        return self._order[pos]

    def lookup_person_by_insertion_index(self, index: int) -> Person:
        if index < 0 or index >= len(self._order):
            raise PersonNotFoundError(f"at index {index}")
        return self._order[index]

    def persons(self) -> List[Person]:
        return list(self._order)

    def position(self, person: Person) -> int:
        self._require(person)
        return self._positions[person.id]

    def _require(self, person: Person) -> None:
        if person not in self:
            raise PersonNotFoundError(getattr(person, "id", person))

    # relations

    def _insert_pair(self, a: Person, b: Person, kind: RelationKind) -> bool:
        """Insert ``a -kind-> b`` and its inverse; False if already present."""
        if a == b:
            raise SelfCycleError(a.label())
        if self._graph.has_edge(a, b, key=kind):
            return False
        self._graph.add_edge(a, b, key=kind)
        self._graph.add_edge(b, a, key=kind.inverse)
        return True

    def add_relation(self, p1: Person, p2: Person, kind: RelationKind) -> None:
        """Record that ``p1`` is the ``kind`` of ``p2``.

        Raises a ``KinError`` subclass when the relation is rejected; in that
        case the graph is left untouched.
        """
        kind = RelationKind.parse(kind)
        self._require(p1)
        self._require(p2)
        if p1 == p2:
            logging.info("kingraph: rejected self relation %s on %s", kind.value, p1.label())
            raise SelfCycleError(p1.label())
        if kind is RelationKind.PARENT:
            self.add_parent(p1, p2)
        elif kind is RelationKind.CHILD:
            self.add_parent(p2, p1)
        elif self._insert_pair(p1, p2, kind):
            logging.debug("kingraph: %s %s %s", p1.label(), kind.value, p2.label())

    def add_parent(self, parent: Person, child: Person) -> None:
        self._require(parent)
        self._require(child)
        if parent == child:
            raise SelfCycleError(parent.label())
        if self._graph.has_edge(parent, child, key=RelationKind.PARENT):
            return
        if self._is_ancestor(child, parent):
            logging.info("kingraph: rejected %s as parent of its ancestor %s", parent.label(), child.label())
            raise InvalidRelationError(parent.label(), child.label(), "would create an ancestor cycle")
        parents = self.parents_of(child)
        if len(parents) >= 2:
            logging.info("kingraph: rejected third parent %s for %s", parent.label(), child.label())
            raise AlreadyTwoParentsError(child.label())
        if len(parents) == 1:
            # two parents of one child are taken to be partners
            self._insert_pair(parent, parents[0], RelationKind.REPRODUCTIVE_PARTNER)
        self._insert_pair(parent, child, RelationKind.PARENT)
        logging.debug("kingraph: %s PARENT %s", parent.label(), child.label())

    def make_child(self, child: Person, parent1: Person, parent2: Person) -> None:
        """Make ``child`` the child of both parents (two parent insertions)."""
        self.add_relation(parent1, child, RelationKind.PARENT)
        self.add_relation(parent2, child, RelationKind.PARENT)

    def _is_ancestor(self, candidate: Person, person: Person) -> bool:
        """True if ``candidate`` is a parent (or, with the full check, any ancestor) of ``person``."""
        if not self.full_cycle_check:
            return candidate in self.parents_of(person)
        seen: Set[Person] = {person}
        q = deque([person])
        while q:
            cur = q.popleft()
            for p in self.parents_of(cur):
                if p == candidate:
                    return True
                if p not in seen:
                    seen.add(p)
                    q.append(p)
        return False

    # queries

    def out_hops(self, person: Person) -> Iterator[Hop]:
        for _, to, kind in self._graph.out_edges(person, keys=True):
            yield Hop(person, kind, to)

    def edges(self) -> Iterator[Hop]:
        for a, b, kind in self._graph.edges(keys=True):
            yield Hop(a, kind, b)

    def kinds_between(self, a: Person, b: Person) -> List[RelationKind]:
        if not self._graph.has_edge(a, b):
            return []
        return list(self._graph[a][b])

    def parents_of(self, person: Person) -> List[Person]:
        return [to for _, to, kind in self._graph.out_edges(person, keys=True) if kind is RelationKind.CHILD]

    def children_of(self, person: Person) -> List[Person]:
        return [to for _, to, kind in self._graph.out_edges(person, keys=True) if kind is RelationKind.PARENT]

    def is_parent(self, parent: Optional[Person], child: Optional[Person]) -> bool:
        if parent is None or child is None:
            return False
        return self._graph.has_edge(parent, child, key=RelationKind.PARENT)

    def is_reproductive_partner(self, a: Person, b: Person) -> bool:
        return self._graph.has_edge(a, b, key=RelationKind.REPRODUCTIVE_PARTNER)

    def shares_parents(self, a: Optional[Person], b: Optional[Person]) -> bool:
        """True when both persons have two recorded parents and they are the same two."""
        if a is None or b is None:
            return False
        pa = set(self.parents_of(a))
        pb = set(self.parents_of(b))
        return len(pa) == 2 and pa == pb

    # facade over the path, oracle and aggregation modules

    def find_all_paths(self, source: Person, target: Person) -> List[Path]:
        self._require(source)
        self._require(target)
        return paths.find_all_paths(self, source, target)

    def is_blood_related(self, p1: Person, p2: Person) -> bool:
        self._require(p1)
        self._require(p2)
        return blood.is_blood_related(self, p1, p2)

    def get_canonical_relationships(self, p1: Person, p2: Person) -> set:
        return relationship.get_canonical_relationships(self, p1, p2)

    def kinship_terms(self, p1: Person, p2: Person) -> List[str]:
        return relationship.kinship_terms(self, p1, p2)

    def to_dict(self) -> dict:
        return export.graph_to_dict(self)

    def to_dot(self, templates_dir=None) -> str:
        return export.graph_to_dot(self, templates_dir=templates_dir)
