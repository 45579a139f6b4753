"""Tests for DOT export, tree rendering and the text report."""

import re
from pathlib import Path

import pytest

from depmap.analysis import (
    DependencyGraphBuilder,
    EnrichmentResult,
    analyze,
    annotate_depths,
)
from depmap.analysis.graph_models import SecurityIssue
from depmap.exporter import (
    classify_node,
    export_dot,
    format_size,
    print_tree,
    render_dot,
    render_report,
    render_tree,
)
from depmap.exporter.dot_exporter import NodeClass
from depmap.metadata import load_metadata_file
from depmap.models import DeclaredDependency, DependencyKind, MetadataSnapshot, PackageMetadata

FIXTURES = Path(__file__).parent / "fixtures"

NODE_STATEMENT = re.compile(r'^    "([^"]+)" \[label="[^"]+\\nv[^"]+", color="(\w+)"\];$')
EDGE_STATEMENT = re.compile(r'^    "([^"]+)" -> "([^"]+)" \[style="(\w+)"\];$')


def _fixture_graph():
    graph = DependencyGraphBuilder().build(load_metadata_file(FIXTURES / "cargo_metadata.json"))
    annotate_depths(graph)
    return graph


def _pkg(name, deps=(), source="registry"):
    declared = []
    for dep in deps:
        dep_name, kind = dep if isinstance(dep, tuple) else (dep, DependencyKind.NORMAL)
        declared.append(DeclaredDependency(name=dep_name, kind=kind))
    return PackageMetadata(id=name, name=name, version="1.0.0", source=source,
                           dependencies=declared)


def _build(*packages):
    graph = DependencyGraphBuilder().build(
        MetadataSnapshot(packages=list(packages), root_id=packages[0].id))
    annotate_depths(graph)
    return graph


def _assert_valid_digraph(text):
    lines = text.rstrip("\n").splitlines()
    assert lines[0] == "digraph dependencies {"
    assert lines[-1] == "}"
    assert text.count("{") == text.count("}")
    for line in lines[1:-1]:
        assert line == "" or line.endswith(";"), line


# ── Classification ────────────────────────────────────────────

class TestClassifyNode:
    def test_classes(self):
        graph = _build(
            _pkg("app", deps=[("t", DependencyKind.DEVELOPMENT), ("b", DependencyKind.BUILD), "n1"],
                 source=None),
            _pkg("t"), _pkg("b"),
            _pkg("n1", deps=["n2"]), _pkg("n2", deps=["n3"]), _pkg("n3", deps=["n4"]), _pkg("n4"),
        )
        classes = {n.name: classify_node(n) for n in graph.nodes}
        assert classes["app"] is NodeClass.ROOT
        assert classes["t"] is NodeClass.DEV
        assert classes["b"] is NodeClass.BUILD
        assert classes["n3"] is NodeClass.NORMAL  # depth 3
        assert classes["n4"] is NodeClass.DEEP    # depth 4

    def test_root_wins_over_dev(self):
        graph = _build(_pkg("app", deps=[("app", DependencyKind.DEVELOPMENT)], source=None))
        assert classify_node(graph.nodes[0]) is NodeClass.ROOT


# ── DOT ───────────────────────────────────────────────────────

class TestRenderDot:
    def test_header_and_shape(self):
        text = render_dot(_fixture_graph())
        assert text.startswith("digraph dependencies {\n    rankdir=LR;\n    node [shape=box];\n")
        _assert_valid_digraph(text)

    def test_one_statement_per_node_and_edge(self):
        graph = _fixture_graph()
        lines = render_dot(graph).splitlines()
        node_lines = [line for line in lines if NODE_STATEMENT.match(line)]
        edge_lines = [line for line in lines if EDGE_STATEMENT.match(line)]
        assert len(node_lines) == len(graph.nodes)
        assert len(edge_lines) == len(graph.edges)

    def test_node_label_and_colors(self):
        text = render_dot(_fixture_graph())
        assert '    "myapp" [label="myapp\\nv0.1.0", color="green"];' in text
        assert '"tempfile" [label="tempfile\\nv3.8.1", color="blue"];' in text
        assert '"cc" [label="cc\\nv1.0.83", color="red"];' in text
        assert '"serde" [label="serde\\nv1.0.190", color="yellow"];' in text

    def test_edge_styles(self):
        text = render_dot(_fixture_graph())
        assert '    "myapp" -> "tempfile" [style="dashed"];' in text
        assert '    "myapp" -> "cc" [style="dotted"];' in text
        assert '    "myapp" -> "serde" [style="solid"];' in text

    def test_empty_graph(self):
        graph = DependencyGraphBuilder().build(MetadataSnapshot())
        _assert_valid_digraph(render_dot(graph))

    def test_quotes_escaped(self):
        graph = _build(_pkg('we"ird'))
        assert '"we\\"ird"' in render_dot(graph)

    def test_export_writes_file(self, tmp_path):
        out = export_dot(_fixture_graph(), tmp_path / "deps.dot")
        assert out.read_text() == render_dot(_fixture_graph())

    def test_export_write_failure_propagates(self, tmp_path):
        with pytest.raises(OSError):
            export_dot(_fixture_graph(), tmp_path / "missing-dir" / "deps.dot")


# ── Tree ──────────────────────────────────────────────────────

class TestRenderTree:
    def test_fixture_tree(self):
        assert render_tree(_fixture_graph()) == [
            "└── 📦 myapp v0.1.0",
            "    ├── 🔨 cc v1.0.83",
            "    ├── 📚 rand v0.8.5",
            "    │   ├── 📚 libc v0.2.150",
            "    │   └── 📚 rand_core v0.6.4",
            "    ├── 📚 serde v1.0.190",
            "    └── 🔧 tempfile v3.8.1",
            "        ├── 📚 fastrand v2.0.1",
            "        └── 📚 rand v0.8.5 [circular]",
        ]

    def test_cycle_marked_not_expanded(self):
        graph = _build(_pkg("A", deps=["D"], source=None), _pkg("D", deps=["A"]))
        assert render_tree(graph) == [
            "└── 📦 A v1.0.0",
            "    └── 📚 D v1.0.0",
            "        └── 📦 A v1.0.0 [circular]",
        ]

    def test_no_root(self):
        graph = DependencyGraphBuilder().build(MetadataSnapshot(packages=[_pkg("a")]))
        assert render_tree(graph) == []

    def test_explicit_root(self):
        graph = _fixture_graph()
        lines = render_tree(graph, root=graph.index["tempfile 3.8.1 (registry+https://github.com/rust-lang/crates.io-index)"])
        assert lines[0] == "└── 🔧 tempfile v3.8.1"
        assert len(lines) == 5

    def test_color_adds_ansi(self):
        lines = render_tree(_fixture_graph(), color=True)
        assert "\x1b[" in lines[0]

    def test_print_tree(self, capsys):
        print_tree(_fixture_graph(), color=False)
        out = capsys.readouterr().out
        assert "📦 myapp v0.1.0" in out
        assert "[circular]" in out

    def test_deep_chain_does_not_recurse(self):
        chain = [_pkg(f"p{i}", deps=[f"p{i + 1}"]) for i in range(3000)] + [_pkg("p3000")]
        lines = render_tree(_build(*chain))
        assert len(lines) == 3001


# ── Report ────────────────────────────────────────────────────

class TestReport:
    def test_format_size(self):
        assert format_size(0) == "0.00 B"
        assert format_size(1536) == "1.50 KB"
        assert format_size(1024 * 1024) == "1.00 MB"
        assert format_size(5 * 1024 ** 4) == "5120.00 GB"

    def test_render_report_sections(self):
        lines = render_report(analyze(_fixture_graph()))
        assert lines[0] == "=== Dependency Analysis ==="
        assert "Total dependencies: 9" in lines
        assert "   Direct: 4" in lines
        assert "1 duplicate dependencies found:" in lines
        assert "   rand has versions: 0.8.5, 0.7.3" in lines

    def test_not_checked_is_visible(self):
        lines = render_report(analyze(_fixture_graph()))
        assert "Security advisories: not checked" in lines
        assert "Outdated dependencies: not checked" in lines

    def test_checked_empty_is_visible(self):
        report = analyze(_fixture_graph())
        report.security = EnrichmentResult.checked([])
        report.outdated = EnrichmentResult.not_checked("exit status 1")
        lines = render_report(report)
        assert "Security advisories: checked, none found" in lines
        assert "Outdated dependencies: not checked (exit status 1)" in lines

    def test_security_issues_listed(self):
        report = analyze(_fixture_graph())
        report.security = EnrichmentResult.checked([
            SecurityIssue(package="time", advisory="RUSTSEC-2020-0071: segfault", severity="high"),
        ])
        lines = render_report(report)
        assert "Security advisories: 1 found" in lines
        assert "   time - RUSTSEC-2020-0071: segfault" in lines

    def test_cycles_and_sizes(self):
        graph = _build(_pkg("A", deps=["D"]), _pkg("D", deps=["A"]))
        graph.nodes[0].size_bytes = 2048
        report = analyze(graph)
        lines = render_report(report)
        assert "1 circular dependencies found:" in lines
        assert "   A → D" in lines
        assert "Total size: 2.00 KB" in lines
        assert "   A v1.0.0 - 2.00 KB" in lines
