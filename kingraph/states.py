"""Relationship states and their English rendering.

A relationship state describes what the first person of a path is to the
person the path has reached so far. The family is closed: each state is a
frozen dataclass, so equality and hashing are structural (state type plus all
fields) and two paths ending in the same state collapse into one answer.

Counting conventions (``n`` is always 0-based):
    NthParent(0) parent, (1) grandparent, (2) great-grandparent ...
    NthChild(0) child, (1) grandchild ...
    NthAuntUncle(0) aunt/uncle, (1) great-aunt/uncle ...
    NthNieceNephew(0) niece/nephew, (1) great-niece/nephew ...
    NthCousinKRemoved(n, k): n+1 generations up from the first person to the
        common ancestor, k+1 generations down to the second. The cousin degree
        is min(n, |k|) and the removal |n - |k||, so (1, 1) is a 1st cousin and
        (1, 2) a 1st cousin once removed.

``sex`` is always the sex of the first person; it picks the gendered term.
"""
from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple, Union

from .models import Sex

# neutral -> (male, female)
_GENDERED: Dict[str, Tuple[str, str]] = {
    "parent": ("father", "mother"),
    "child": ("son", "daughter"),
    "sibling": ("brother", "sister"),
    "aunt/uncle": ("uncle", "aunt"),
    "niece/nephew": ("nephew", "niece"),
}


def _word(base: str, sex: Sex) -> str:
    male, female = _GENDERED[base]
    return female if sex is Sex.FEMALE else male


def _ordinal(n: int) -> str:
    if 10 <= (n % 100) <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _grand_prefix(n: int) -> str:
    """'' for n=0, 'grand' for 1, 'great-grand' for 2, 'great-great-grand' for 3 ..."""
    if n <= 0:
        return ""
    return "great-" * (n - 1) + "grand"


def _great_prefix(n: int) -> str:
    return "great-" * max(n, 0)


def _half(is_half: bool) -> str:
    return "half-" if is_half else ""


def _removed(r: int) -> str:
    if r == 0:
        return ""
    if r == 1:
        return " once removed"
    if r == 2:
        return " twice removed"
    return f" {r} times removed"


class _State:
    def term(self) -> str:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        d = {"state": type(self).__name__, "term": self.term()}
        for k, v in asdict(self).items():
            d[k] = v.value if isinstance(v, Sex) else v
        return d

    def __str__(self) -> str:
        return self.term()


@dataclass(frozen=True)
class NthParent(_State):
    n: int
    sex: Sex

    def term(self) -> str:
        return _grand_prefix(self.n) + _word("parent", self.sex)


@dataclass(frozen=True)
class NthParentInLaw(_State):
    """Reached through a partner of a descendant: parent-in-law and up."""

    n: int
    sex: Sex

    def term(self) -> str:
        return _grand_prefix(self.n) + _word("parent", self.sex) + "-in-law"


@dataclass(frozen=True)
class NthChild(_State):
    n: int
    sex: Sex

    def term(self) -> str:
        return _grand_prefix(self.n) + _word("child", self.sex)


@dataclass(frozen=True)
class NthChildInLaw(_State):
    n: int
    sex: Sex

    def term(self) -> str:
        return _grand_prefix(self.n) + _word("child", self.sex) + "-in-law"


@dataclass(frozen=True)
class Sibling(_State):
    is_half: bool
    sex: Sex

    def term(self) -> str:
        return _half(self.is_half) + _word("sibling", self.sex)


@dataclass(frozen=True)
class SiblingInLaw(_State):
    is_half: bool
    sex: Sex

    def term(self) -> str:
        return _half(self.is_half) + _word("sibling", self.sex) + "-in-law"


@dataclass(frozen=True)
class ReproductivePartner(_State):
    sex: Sex

    def term(self) -> str:
        return "partner"


@dataclass(frozen=True)
class NthNieceNephew(_State):
    n: int
    is_half: bool
    sex: Sex

    def term(self) -> str:
        return _great_prefix(self.n) + _half(self.is_half) + _word("niece/nephew", self.sex)


@dataclass(frozen=True)
class NthNieceNephewInLaw(_State):
    n: int
    is_half: bool
    sex: Sex

    def term(self) -> str:
        return _great_prefix(self.n) + _half(self.is_half) + _word("niece/nephew", self.sex) + "-in-law"


@dataclass(frozen=True)
class NthAuntUncle(_State):
    n: int
    is_half: bool
    sex: Sex

    def term(self) -> str:
        return _great_prefix(self.n) + _half(self.is_half) + _word("aunt/uncle", self.sex)


@dataclass(frozen=True)
class NthAuntUncleInLaw(_State):
    n: int
    is_half: bool
    sex: Sex

    def term(self) -> str:
        return _great_prefix(self.n) + _half(self.is_half) + _word("aunt/uncle", self.sex) + "-in-law"


@dataclass(frozen=True)
class NthCousinKRemoved(_State):
    n: int
    k: int
    is_half: bool
    sex: Sex

    @property
    def degree(self) -> int:
        return min(self.n, abs(self.k))

    @property
    def removal(self) -> int:
        return abs(self.n - abs(self.k))

    def term(self) -> str:
        return f"{_ordinal(self.degree)} {_half(self.is_half)}cousin{_removed(self.removal)}"


@dataclass(frozen=True)
class Stop(_State):
    """No further defined relationship; also stands for "same person"."""

    def term(self) -> str:
        return "self"


RelationshipState = Union[
    NthParent,
    NthParentInLaw,
    NthChild,
    NthChildInLaw,
    Sibling,
    SiblingInLaw,
    ReproductivePartner,
    NthNieceNephew,
    NthNieceNephewInLaw,
    NthAuntUncle,
    NthAuntUncleInLaw,
    NthCousinKRemoved,
    Stop,
]

ALL_STATES = RelationshipState.__args__
