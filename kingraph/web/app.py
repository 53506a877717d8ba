from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
import copy
import logging
import threading

from ..config import Config, load_config
from ..dsl import parse_relations
from ..errors import DslError, KinError, PersonNotFoundError
from ..graph import KinGraph
from ..models import Person, RelationKind, Sex
from ..relationship import get_canonical_relationships, kinship_terms, render_terms

# Ensure basic logging is configured so server logs at INFO are visible
logging.basicConfig(level=logging.INFO)

PersonRef = Union[int, str]


@dataclass
class KinSession:
    """The graph served by one app, its name index and the lock guarding both.

    The graph itself does no locking; every route touching it holds ``lock``.
    """

    graph: KinGraph
    names: Dict[str, Person] = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock)

    def resolve(self, ref: Optional[PersonRef]) -> Person:
        """A person by insertion index (int or digit string) or by name."""
        if ref is None or ref == "":
            raise HTTPException(status_code=400, detail="Missing person reference")
        if isinstance(ref, int) or (isinstance(ref, str) and ref.isdigit()):
            return self.graph.lookup_person_by_insertion_index(int(ref))
        p = self.names.get(str(ref))
        if p is None:
            raise PersonNotFoundError(ref)
        return p

    def reindex(self) -> None:
        self.names = {p.name: p for p in self.graph.persons() if p.name}


def _person_payload(session: KinSession, p: Person) -> Dict[str, Any]:
    d = p.to_dict()
    d["position"] = session.graph.position(p)
    return d


def _check_capacity(session: KinSession, cfg: Config, extra: int = 1) -> None:
    if len(session.graph) + extra > cfg.max_persons:
        raise HTTPException(status_code=409, detail=f"Graph is limited to {cfg.max_persons} persons")


def create_app(cfg: Optional[Config] = None) -> FastAPI:
    cfg = cfg or load_config()
    logging.getLogger().setLevel(cfg.log_level)
    app = FastAPI(title="kingraph")
    app.state.config = cfg
    app.state.session = KinSession(graph=KinGraph(full_cycle_check=cfg.full_cycle_check))

    def session() -> KinSession:
        return app.state.session

    @app.exception_handler(PersonNotFoundError)
    async def _not_found(request: Request, exc: PersonNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(KinError)
    async def _kin_error(request: Request, exc: KinError):
        return JSONResponse(status_code=400, content={"detail": str(exc), "error": type(exc).__name__})

    @app.exception_handler(DslError)
    async def _dsl_error(request: Request, exc: DslError):
        return JSONResponse(status_code=400, content={"detail": str(exc), "line": exc.line_no})

    @app.post("/api/person", status_code=201)
    def api_create_person(data: Dict[str, Any]):
        s = session()
        try:
            sex = Sex.parse(data.get("sex"))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        name = data.get("name") or None
        with s.lock:
            _check_capacity(s, cfg)
            if name is not None and name in s.names:
                raise HTTPException(status_code=400, detail=f"Name {name!r} already taken")
            if name is None:
                p = s.graph.create_person(sex)
            else:
                p = s.graph.create_person_with_name(sex, name)
                s.names[name] = p
            logging.info("Created person %s", p.label())
            return _person_payload(s, p)

    @app.get("/api/person/{ref}")
    def api_person(ref: str):
        s = session()
        with s.lock:
            p = s.resolve(ref)
            out = _person_payload(s, p)
            out["parents"] = [s.graph.position(x) for x in s.graph.parents_of(p)]
            out["children"] = [s.graph.position(x) for x in s.graph.children_of(p)]
            return out

    @app.post("/api/relation", status_code=201)
    def api_add_relation(data: Dict[str, Any]):
        s = session()
        try:
            kind = RelationKind.parse(data.get("kind"))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        with s.lock:
            p1 = s.resolve(data.get("p1"))
            p2 = s.resolve(data.get("p2"))
            s.graph.add_relation(p1, p2, kind)
            logging.info("Added relation %s %s %s", p1.label(), kind.value, p2.label())
            return {"p1": s.graph.position(p1), "p2": s.graph.position(p2), "kind": kind.value}

    @app.post("/api/child", status_code=201)
    def api_make_child(data: Dict[str, Any]):
        s = session()
        parents = data.get("parents") or []
        if len(parents) != 2:
            raise HTTPException(status_code=400, detail="Exactly two parents are required")
        with s.lock:
            child = s.resolve(data.get("child"))
            p1, p2 = (s.resolve(r) for r in parents)
            s.graph.make_child(child, p1, p2)
            logging.info("Made %s the child of %s and %s", child.label(), p1.label(), p2.label())
            return {"child": s.graph.position(child), "parents": [s.graph.position(p1), s.graph.position(p2)]}

    @app.get("/api/relationship")
    def api_relationship(p1: str, p2: str):
        s = session()
        with s.lock:
            a = s.resolve(p1)
            b = s.resolve(p2)
            states = get_canonical_relationships(s.graph, a, b)
            terms = render_terms(a, b, states)
        relationships: List[Dict[str, Any]] = sorted((st.to_dict() for st in states), key=lambda d: d["term"])
        return {"p1": a.label(), "p2": b.label(), "relationships": relationships, "terms": terms}

    @app.get("/api/graph")
    def api_graph():
        s = session()
        with s.lock:
            return s.graph.to_dict()

    @app.get("/api/graph.dot", response_class=PlainTextResponse)
    def api_graph_dot():
        s = session()
        with s.lock:
            return s.graph.to_dot(templates_dir=cfg.templates_dir)

    @app.post("/api/dsl")
    def api_load_dsl(data: Dict[str, Any]):
        """Load relation text into the session; all or nothing."""
        s = session()
        text = data.get("text")
        if not isinstance(text, str):
            raise HTTPException(status_code=400, detail="Field 'text' is required")
        with s.lock:
            staged = copy.deepcopy(s.graph)
            result = parse_relations(text, staged)
            if len(staged) > cfg.max_persons:
                raise HTTPException(status_code=409, detail=f"Graph is limited to {cfg.max_persons} persons")
            s.graph = staged
            s.reindex()
            answers = []
            for a, b in result.queries:
                pa, pb = result.person(a), result.person(b)
                answers.append({"p1": a, "p2": b, "terms": kinship_terms(staged, pa, pb)})
            logging.info("Loaded relation text: %d persons, %d queries", len(staged), len(result.queries))
            return {"persons": len(staged), "answers": answers}

    @app.post("/api/reset")
    def api_reset():
        s = session()
        with s.lock:
            s.graph = KinGraph(full_cycle_check=cfg.full_cycle_check)
            s.names = {}
        logging.info("Session reset")
        return {"persons": 0}

    return app


app = create_app()
