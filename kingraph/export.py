"""Read-only projections of a ``KinGraph`` for visualization clients.

API:
    graph_to_dict(graph) -> dict
        ``{"nodes": [{"id", "position", "sex", "name", "relations": [{"id", "kind"}]}]}``
        where ``relations`` lists every outgoing edge of the person.
    graph_to_dot(graph, templates_dir=None, graph_id="kingraph") -> str
        Graphviz source rendered from ``kingraph.dot.j2``. Each relation is
        drawn once: Parent edges point from parent to child, symmetric
        relations are drawn as a single two-headed edge.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import RelationKind
from .templating import get_env

DOT_TEMPLATE = "kingraph.dot.j2"


def _dot_escape(s: Any) -> str:
    return str(s).replace("\\", "\\\\").replace('"', '\\"')


def graph_to_dict(graph) -> Dict[str, Any]:
    nodes: List[Dict[str, Any]] = []
    for person in graph.persons():
        nodes.append({
            "id": person.id,
            "position": graph.position(person),
            "sex": person.sex.value,
            "name": person.name,
            "is_shadow": person.is_shadow,
            "relations": [{"id": hop.to.id, "kind": hop.kind.value} for hop in graph.out_hops(person)],
        })
    return {"nodes": nodes}


def _drawn_edges(graph) -> List[Dict[str, Any]]:
    edges: List[Dict[str, Any]] = []
    for hop in graph.edges():
        if hop.kind is RelationKind.CHILD:
            continue
        source = graph.position(hop.node)
        target = graph.position(hop.to)
        symmetric = hop.kind is not RelationKind.PARENT
        if symmetric and source > target:
            continue
        edges.append({"source": source, "target": target, "symbol": hop.kind.symbol, "symmetric": symmetric})
    return edges


def graph_to_dot(graph, templates_dir: Optional[str | Path] = None, graph_id: str = "kingraph") -> str:
    env = get_env(templates_dir)
    env.filters["dot"] = _dot_escape
    nodes = [
        {"position": graph.position(p), "label": p.label(), "sex": p.sex.value, "is_shadow": p.is_shadow}
        for p in graph.persons()
    ]
    return env.get_template(DOT_TEMPLATE).render(graph_id=graph_id, nodes=nodes, edges=_drawn_edges(graph))
