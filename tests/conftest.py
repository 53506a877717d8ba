import sys
from pathlib import Path

import pytest

# Ensure repo root is on sys.path so tests can import the package directly
root = Path(__file__).resolve().parent.parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from kingraph.graph import KinGraph
from kingraph.models import RelationKind, Sex


@pytest.fixture
def graph():
    return KinGraph()


@pytest.fixture
def cousins():
    """Two brothers with their parents, wives and one child each.

    G1+G2 -> Sean, John; Sean+Mary -> Me; John+Ann -> Quinn
    """
    g = KinGraph()
    people = {}
    for name, sex in (
        ("G1", Sex.MALE), ("G2", Sex.FEMALE), ("Sean", Sex.MALE), ("John", Sex.MALE),
        ("Mary", Sex.FEMALE), ("Ann", Sex.FEMALE), ("Me", Sex.MALE), ("Quinn", Sex.FEMALE),
    ):
        people[name] = g.create_person_with_name(sex, name)
    g.make_child(people["Sean"], people["G1"], people["G2"])
    g.make_child(people["John"], people["G1"], people["G2"])
    g.make_child(people["Me"], people["Sean"], people["Mary"])
    g.make_child(people["Quinn"], people["John"], people["Ann"])
    return g, people


@pytest.fixture
def nieces():
    """G1+G2 -> A, B; B+Bp -> C; C+Cp -> D."""
    g = KinGraph()
    people = {}
    for name, sex in (
        ("G1", Sex.MALE), ("G2", Sex.FEMALE), ("A", Sex.FEMALE), ("B", Sex.MALE),
        ("Bp", Sex.FEMALE), ("C", Sex.FEMALE), ("Cp", Sex.MALE), ("D", Sex.MALE),
    ):
        people[name] = g.create_person_with_name(sex, name)
    g.make_child(people["A"], people["G1"], people["G2"])
    g.make_child(people["B"], people["G1"], people["G2"])
    g.make_child(people["C"], people["B"], people["Bp"])
    g.make_child(people["D"], people["C"], people["Cp"])
    return g, people


@pytest.fixture
def married_in():
    """G1+G2 -> Par, Aunt; Aunt+Unc; Par -> X; X+W -> Kid; W+O -> StepKid."""
    g = KinGraph()
    people = {}
    for name, sex in (
        ("G1", Sex.MALE), ("G2", Sex.FEMALE), ("Par", Sex.MALE), ("Aunt", Sex.FEMALE), ("Unc", Sex.MALE),
        ("X", Sex.MALE), ("W", Sex.FEMALE), ("Kid", Sex.MALE), ("O", Sex.MALE), ("StepKid", Sex.FEMALE),
    ):
        people[name] = g.create_person_with_name(sex, name)
    g.make_child(people["Par"], people["G1"], people["G2"])
    g.make_child(people["Aunt"], people["G1"], people["G2"])
    g.add_relation(people["Aunt"], people["Unc"], RelationKind.REPRODUCTIVE_PARTNER)
    g.add_relation(people["Par"], people["X"], RelationKind.PARENT)
    g.make_child(people["Kid"], people["X"], people["W"])
    g.make_child(people["StepKid"], people["W"], people["O"])
    return g, people


@pytest.fixture
def half_family():
    """G1+G2 -> Par, G1+G3 -> Half; Par -> X -> Kid; Half -> Y; Half+Sp."""
    g = KinGraph()
    people = {}
    for name, sex in (
        ("G1", Sex.MALE), ("G2", Sex.FEMALE), ("G3", Sex.FEMALE), ("Par", Sex.MALE), ("Half", Sex.FEMALE),
        ("X", Sex.MALE), ("Y", Sex.FEMALE), ("Kid", Sex.MALE), ("Sp", Sex.MALE),
    ):
        people[name] = g.create_person_with_name(sex, name)
    g.make_child(people["Par"], people["G1"], people["G2"])
    g.make_child(people["Half"], people["G1"], people["G3"])
    g.add_relation(people["Par"], people["X"], RelationKind.PARENT)
    g.add_relation(people["X"], people["Kid"], RelationKind.PARENT)
    g.add_relation(people["Half"], people["Y"], RelationKind.PARENT)
    g.add_relation(people["Half"], people["Sp"], RelationKind.REPRODUCTIVE_PARTNER)
    return g, people
