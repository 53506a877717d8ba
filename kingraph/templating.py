from jinja2 import Environment, FileSystemLoader, select_autoescape
from pathlib import Path
from typing import Optional

from .config import DEFAULT_TEMPLATES_DIR


def get_env(templates_dir: Optional[str | Path] = None) -> Environment:
    templates_dir = str(templates_dir or DEFAULT_TEMPLATES_DIR)
    return Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
