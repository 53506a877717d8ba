import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import load_config
from .dsl import parse_relations
from .errors import DslError, KinError
from .graph import KinGraph
from .relationship import explain, kinship_terms


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _load(args: argparse.Namespace):
    cfg = load_config(args.config)
    if not args.verbose:
        logging.getLogger().setLevel(cfg.log_level)
    return cfg, parse_relations(_read_text(args.file), KinGraph(full_cycle_check=cfg.full_cycle_check))


def _run_query(args: argparse.Namespace) -> int:
    _, result = _load(args)
    if not result.queries:
        print("No queries.")
        return 0
    for a, b in result.queries:
        pa, pb = result.person(a), result.person(b)
        terms = kinship_terms(result.graph, pa, pb)
        print(f"{a} to {b}: {', '.join(terms) if terms else 'unrelated'}")
        if args.explain:
            for item in explain(result.graph, pa, pb):
                print(f"  {item['kinds']:<10} {' > '.join(item['persons'])}  => {item['state']!r}")
    return 0


def _run_export(args: argparse.Namespace) -> int:
    cfg, result = _load(args)
    if args.format == "dot":
        out = result.graph.to_dot(templates_dir=cfg.templates_dir)
    else:
        out = json.dumps(result.graph.to_dict(), indent=2)
    if args.output == "-":
        print(out)
    else:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(out)
    return 0


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn
    from .web.app import create_app

    uvicorn.run(create_app(load_config(args.config)), host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kingraph",
        description="Compute kinship terms over a relation graph",
    )
    parser.add_argument("--config", default=None, help="Path to a JSON config file")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    query = subparsers.add_parser("query", help="Answer the queries of a relation file")
    query.add_argument("file", help="Relation file, or '-' for stdin")
    query.add_argument("--explain", action="store_true", help="Print every path and the state it ends in")
    query.set_defaults(func=_run_query)

    export = subparsers.add_parser("export", help="Export the graph of a relation file")
    export.add_argument("file", help="Relation file, or '-' for stdin")
    export.add_argument("--format", choices=["json", "dot"], default="json", help="Output format")
    export.add_argument("-o", "--output", default="-", help="Output file path or '-' for stdout")
    export.set_defaults(func=_run_export)

    serve = subparsers.add_parser("serve", help="Serve the JSON API over HTTP")
    serve.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Port to bind (default: 8000)")
    serve.set_defaults(func=_run_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    if not getattr(args, "func", None):
        parser.print_help()
        return 1
    try:
        return args.func(args)
    except (DslError, KinError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
