"""A small line-based text format for relation facts and queries.

Relation lines read ``NAME SEX KIND NAME SEX``, e.g.::

    Me M CHILD Sean M
    John M SIBLING Sean M
    Quinn M CHILD John M
    :QUERY
    Me TO Quinn

``SEX`` is ``M`` or ``F``; ``KIND`` is one of ``PARENT``, ``CHILD``,
``SIBLING``, ``RP``. Query lines read ``NAME TO NAME``. The ``:QUERY`` marker
is optional, blank lines and ``#`` comments are skipped. A name is created the
first time it appears; later occurrences reuse it and their sex is ignored.

This is a parser, not a validator: it rejects lines it cannot read and
relations the graph rejects, nothing more.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple
import logging

from .errors import DslError, KinError
from .graph import KinGraph
from .models import Person, RelationKind, Sex
from .states import RelationshipState

QUERY_MARKER = ":QUERY"


@dataclass
class DslResult:
    graph: KinGraph
    persons: Dict[str, Person] = field(default_factory=dict)
    queries: List[Tuple[str, str]] = field(default_factory=list)
    # (line number, raw line) of each query, parallel to ``queries``
    query_lines: List[Tuple[int, str]] = field(default_factory=list)

    def person(self, name: str) -> Person:
        return self.persons[name]


def _person(result: DslResult, name: str, sex: Sex) -> Person:
    p = result.persons.get(name)
    if p is None:
        p = result.graph.create_person_with_name(sex, name)
        result.persons[name] = p
    return p


def _parse_sex(token: str, line_no: int, line: str) -> Sex:
    try:
        return Sex.parse(token)
    except ValueError:
        raise DslError(line_no, line, f"invalid sex {token!r}") from None


def parse_relations(text: str, graph: Optional[KinGraph] = None) -> DslResult:
    """Insert every relation of ``text`` into ``graph`` (a new one by default)."""
    result = DslResult(graph=graph if graph is not None else KinGraph())
    # names already present in a reused graph
    for p in result.graph.persons():
        if p.name:
            result.persons.setdefault(p.name, p)

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line or line.upper() == QUERY_MARKER:
            continue
        words = line.split()
        if len(words) == 3 and words[1].upper() == "TO":
            result.queries.append((words[0], words[2]))
            result.query_lines.append((line_no, raw))
            continue
        if len(words) != 5:
            raise DslError(line_no, raw, "expected 'NAME SEX KIND NAME SEX' or 'NAME TO NAME'")
        name1, sex1, kind, name2, sex2 = words
        try:
            rel = RelationKind.parse(kind)
        except ValueError:
            raise DslError(line_no, raw, f"invalid relationship {kind!r}") from None
        p1 = _person(result, name1, _parse_sex(sex1, line_no, raw))
        p2 = _person(result, name2, _parse_sex(sex2, line_no, raw))
        try:
            result.graph.add_relation(p1, p2, rel)
        except KinError as e:
            logging.info("kingraph dsl: line %d rejected: %s", line_no, e)
            raise

    for (a, b), (line_no, raw) in zip(result.queries, result.query_lines):
        for name in (a, b):
            if name not in result.persons:
                raise DslError(line_no, raw, f"unknown person {name!r}")
    return result


def query_kin(text: str, graph: Optional[KinGraph] = None) -> List[Tuple[str, str, Set[RelationshipState]]]:
    """Parse ``text`` and answer each of its queries."""
    result = parse_relations(text, graph)
    answers = []
    for a, b in result.queries:
        states = result.graph.get_canonical_relationships(result.persons[a], result.persons[b])
        answers.append((a, b, states))
    return answers
