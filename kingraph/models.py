from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional
import uuid


def _new_id() -> int:
    # 64-bit slice of a uuid4, same spirit as the string ids used elsewhere
    return uuid.uuid4().int & ((1 << 64) - 1)


class Sex(str, Enum):
    MALE = "M"
    FEMALE = "F"

    @staticmethod
    def parse(s: Any) -> "Sex":
        if isinstance(s, Sex):
            return s
        txt = str(s or "").strip().upper()
        if txt in ("M", "MALE"):
            return Sex.MALE
        if txt in ("F", "FEMALE"):
            return Sex.FEMALE
        raise ValueError(f"invalid sex: {s!r}")


class RelationKind(str, Enum):
    """Fundamental relation kinds; every other kinship is a walk over these.

    An edge ``A -K-> B`` reads "A is the K of B".
    """

    PARENT = "PARENT"
    CHILD = "CHILD"
    SIBLING = "SIBLING"
    REPRODUCTIVE_PARTNER = "RP"

    @property
    def inverse(self) -> "RelationKind":
        if self is RelationKind.PARENT:
            return RelationKind.CHILD
        if self is RelationKind.CHILD:
            return RelationKind.PARENT
        return self

    @property
    def is_blood(self) -> bool:
        return self is not RelationKind.REPRODUCTIVE_PARTNER

    @property
    def symbol(self) -> str:
        return {"PARENT": "P", "CHILD": "C", "SIBLING": "S", "RP": "R"}[self.value]

    @staticmethod
    def parse(s: Any) -> "RelationKind":
        if isinstance(s, RelationKind):
            return s
        txt = str(s or "").strip().upper()
        aliases = {
            "PARENT": RelationKind.PARENT,
            "CHILD": RelationKind.CHILD,
            "SIBLING": RelationKind.SIBLING,
            "RP": RelationKind.REPRODUCTIVE_PARTNER,
            "PARTNER": RelationKind.REPRODUCTIVE_PARTNER,
            "REPRODUCTIVE_PARTNER": RelationKind.REPRODUCTIVE_PARTNER,
        }
        if txt not in aliases:
            raise ValueError(f"invalid relation kind: {s!r}")
        return aliases[txt]


@dataclass(frozen=True)
class Person:
    id: int = field(default_factory=_new_id)
    sex: Sex = field(default=Sex.MALE, compare=False)
    name: Optional[str] = field(default=None, compare=False)
    # placeholder persons for a future sanitizing pass; inert for now
    is_shadow: bool = field(default=False, compare=False)

    def label(self) -> str:
        return self.name if self.name else f"#{self.id}"

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "sex": self.sex.value, "name": self.name, "is_shadow": self.is_shadow}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Person":
        return Person(
            id=int(d["id"]) if d.get("id") is not None else _new_id(),
            sex=Sex.parse(d.get("sex", "M")),
            name=d.get("name"),
            is_shadow=bool(d.get("is_shadow", False)),
        )


class Hop(NamedTuple):
    """One traversed edge: ``node`` is ``kind`` of ``to``."""

    node: Person
    kind: RelationKind
    to: Person


Path = List[Hop]
