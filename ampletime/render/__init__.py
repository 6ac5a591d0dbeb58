"""Markdown and note report rendering."""

from .markdown import dict_to_markdown_table, insert_column
from .reports import ReportGenerator, ReportSection

__all__ = ["ReportGenerator", "ReportSection", "dict_to_markdown_table", "insert_column"]
