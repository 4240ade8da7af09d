"""Graphviz DOT export of the co-change graph or a file's neighbourhood."""

from typing import Optional, TextIO

from ..graph.models import CochangeGraph


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def format_dot(graph: CochangeGraph, name: Optional[str] = None) -> str:
    """Undirected DOT description; node ids are handles, labels are paths."""
    lines = [f"graph {_quote(name)} {{" if name else "graph {"]
    for idx, node in enumerate(graph.nodes()):
        lines.append(f'  "n{idx}" [label={_quote(node.path)} fixedsize=true fontsize=7]')
    for (a, b), weight in graph.edge_items():
        lines.append(f'  "n{a}" -- "n{b}" [weight={weight}]')
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_dot(graph: CochangeGraph, writer: TextIO, name: Optional[str] = None) -> None:
    writer.write(format_dot(graph, name))


def neighbourhood_dot(graph: CochangeGraph, path: str, depth: int = 1) -> str:
    """DOT of the subgraph induced by everything within ``depth`` hops of ``path``.

    Raises:
        NodeNotFoundError: If ``path`` is not in the graph
    """
    return format_dot(graph.subgraph(graph.neighbourhood(path, depth)), name=path)
