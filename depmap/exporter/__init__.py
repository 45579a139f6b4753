"""Exporter layer."""

from depmap.exporter.dot_exporter import classify_node, export_dot, render_dot
from depmap.exporter.report_formatter import format_size, render_report
from depmap.exporter.tree_printer import print_tree, render_tree

__all__ = [
    "classify_node",
    "export_dot",
    "format_size",
    "print_tree",
    "render_dot",
    "render_report",
    "render_tree",
]
