"""Error kinds raised by the kinship graph.

Structural errors (``KinError`` subclasses) are raised synchronously by
relation insertion and leave the graph unchanged. ``PersonNotFoundError`` is
the query-side condition. ``UndefinedTransitionError`` is not a runtime
condition: it means the relationship state machine met a combination it has
no rule for, and is left to propagate.
"""
from __future__ import annotations
from typing import Any, Optional


class KinError(Exception):
    """Base class of all kinship graph errors."""


class SelfCycleError(KinError):
    def __init__(self, person: Any) -> None:
        self.person = person
        super().__init__(f"Person {person} can not be related to themselves")


class InvalidRelationError(KinError):
    def __init__(self, p1: Any, p2: Any, reason: Optional[str] = None) -> None:
        self.p1 = p1
        self.p2 = p2
        msg = f"Person {p1} and person {p2} have an invalid parent/child relation"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class SameSexError(KinError):
    # reserved: partner sexes are not checked
    def __init__(self, p1: Any, p2: Any) -> None:
        self.p1 = p1
        self.p2 = p2
        super().__init__(f"Person {p1} and person {p2} are reproductive partners of the same sex")


class AlreadyTwoParentsError(KinError):
    def __init__(self, child: Any) -> None:
        self.child = child
        super().__init__(f"Parent not added: person {child} already has two parents")


class UnknownKinError(KinError):
    def __init__(self, detail: str = "An unknown error occurred") -> None:
        super().__init__(detail)


class PersonNotFoundError(KinError, LookupError):
    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"Person {key} not found")


class UndefinedTransitionError(RuntimeError):
    def __init__(self, state: Any, kind: Any) -> None:
        self.state = state
        self.kind = kind
        super().__init__(f"No transition defined from {state!r} via {kind}")


class DslError(ValueError):
    def __init__(self, line_no: int, line: str, reason: str) -> None:
        self.line_no = line_no
        self.line = line
        super().__init__(f"line {line_no}: {reason}: {line.strip()!r}")
