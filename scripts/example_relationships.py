"""Small example script that demonstrates kinship queries.

Builds a three-generation family in memory and prints:
 - the kinship terms between a few pairs
 - every path between two cousins with the state it ends in
 - whether two persons are blood relatives

Run:
    python scripts/example_relationships.py
"""
from pathlib import Path
from pprint import pprint
import sys

# Ensure repo root is on sys.path when running this script directly
repo_root = Path(__file__).resolve().parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from kingraph.graph import KinGraph
from kingraph.models import RelationKind, Sex
from kingraph.relationship import explain


def build_demo(graph: KinGraph):
    # Grandparents G1+G2 have Sean and John; Sean+Mary have Me, John+Ann have Quinn
    G1 = graph.create_person_with_name(Sex.MALE, "G1")
    G2 = graph.create_person_with_name(Sex.FEMALE, "G2")
    Sean = graph.create_person_with_name(Sex.MALE, "Sean")
    John = graph.create_person_with_name(Sex.MALE, "John")
    Mary = graph.create_person_with_name(Sex.FEMALE, "Mary")
    Ann = graph.create_person_with_name(Sex.FEMALE, "Ann")
    Me = graph.create_person_with_name(Sex.MALE, "Me")
    Quinn = graph.create_person_with_name(Sex.FEMALE, "Quinn")

    graph.make_child(Sean, G1, G2)
    graph.make_child(John, G1, G2)
    graph.make_child(Me, Sean, Mary)
    graph.make_child(Quinn, John, Ann)
    graph.add_relation(Mary, Ann, RelationKind.SIBLING)
    return G1, G2, Sean, John, Mary, Ann, Me, Quinn


def main():
    graph = KinGraph()
    G1, G2, Sean, John, Mary, Ann, Me, Quinn = build_demo(graph)

    print("Kinship terms:")
    for a, b in ((Me, G1), (G1, Quinn), (John, Me), (Me, Quinn), (Mary, John)):
        print(f"  {a.label()} is {', '.join(graph.kinship_terms(a, b)) or 'unrelated'} of {b.label()}")

    print()
    print("Paths from Me to Quinn:")
    pprint([(e["kinds"], repr(e["state"])) for e in explain(graph, Me, Quinn)])

    print()
    print("Blood related:")
    print(f"  Me and G1: {graph.is_blood_related(Me, G1)}")
    print(f"  Mary and John: {graph.is_blood_related(Mary, John)}")


if __name__ == "__main__":
    main()
