"""Markdown table rendering for report notes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

_TEMPLATES_DIR = Path(__file__).parent / "templates"


def md_cell(value: Any) -> str:
    """Escape a value for use inside a markdown table cell."""
    if value is None:
        return ""
    text = str(value).replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    return text.replace("|", "\\|")


def _build_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["md_cell"] = md_cell
    return env


_env = _build_env()


def dict_to_markdown_table(rows: Sequence[Mapping[str, Any]]) -> str:
    """Render an ordered list of uniform dicts as a markdown table.

    Column order follows the keys of the first row. Keys missing from later
    rows render as empty cells. Returns an empty string for no rows.
    """
    if not rows:
        return ""
    headers = list(rows[0].keys())
    body = [[row.get(h) for h in headers] for row in rows]
    template = _env.get_template("table.md.j2")
    return template.render(
        headers=headers,
        separator=["---"] * len(headers),
        rows=body,
    )


def insert_column(
    rows: Sequence[Mapping[str, Any]],
    name: str,
    values: Sequence[Any],
    index: int = 0,
) -> list[dict[str, Any]]:
    """Return copies of ``rows`` with column ``name`` inserted at position ``index``.

    Raises:
        ValueError: If ``values`` does not hold exactly one value per row
    """
    if len(values) != len(rows):
        raise ValueError(
            f"Column '{name}' has {len(values)} values for {len(rows)} rows"
        )
    result = []
    for row, value in zip(rows, values, strict=True):
        items = [(k, v) for k, v in row.items() if k != name]
        position = max(0, min(index, len(items)))
        items.insert(position, (name, value))
        result.append(dict(items))
    return result
