from __future__ import annotations

from datetime import date
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

_env = Environment(
    loader=FileSystemLoader(str(Path(__file__).resolve().parent / "templates")),
    autoescape=select_autoescape(["html"]),
)


def render_email(template_name: str, **context) -> str:
    context.setdefault("year", date.today().year)
    return _env.get_template(template_name).render(**context)
