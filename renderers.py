#!/usr/bin/env python3
"""
Renderers for a built call hierarchy.

- json:    nested Name/Position/CalledBy document, tab indented
- mermaid: top-down flowchart, one edge per caller -> callee
- dot:     Graphviz digraph of the same edges

The diagram renderers walk the tree depth-first and never expand the same
position twice, so repeated or cyclic positions produce each edge once.
"""

import json
from typing import Any, Callable, Dict, List, Set, Tuple

from hierarchy_builder import ERROR_POSITION, Function


def to_dict(function: Function) -> Dict[str, Any]:
    """Convert a hierarchy into plain dicts using the document's key names"""
    return {
        "Name": function.name,
        "Position": function.position,
        "CalledBy": [to_dict(caller) for caller in function.called_by],
    }


def from_dict(data: Dict[str, Any]) -> Function:
    """Rebuild a hierarchy from the dicts produced by to_dict"""
    try:
        name = data["Name"]
        position = data["Position"]
        called_by = data.get("CalledBy") or []
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed hierarchy document: {e}") from e

    return Function(
        name=name,
        position=position,
        called_by=[from_dict(caller) for caller in called_by],
    )


def render_json(root: Function) -> str:
    return json.dumps(to_dict(root), indent="\t", ensure_ascii=False)


def load_json(text: str) -> Function:
    """Parse a document written by render_json back into a hierarchy"""
    return from_dict(json.loads(text))


def walk_edges(root: Function) -> List[Tuple[Function, Function]]:
    """
    Collect (caller, callee) pairs in discovery order.

    A position is expanded only the first time it is reached; later
    occurrences still contribute the edge leading to them but nothing below.
    """
    edges: List[Tuple[Function, Function]] = []
    visited: Set[str] = set()

    def visit(function: Function):
        if function.position in visited:
            return
        visited.add(function.position)

        for caller in function.called_by:
            edges.append((caller, function))
            visit(caller)

    visit(root)
    return edges


def _mermaid_label(text: str) -> str:
    return " ".join(text.split()).replace('"', "#quot;")


def render_mermaid(root: Function) -> str:
    lines = ["graph TD"]
    edges = walk_edges(root)

    for caller, callee in edges:
        lines.append(
            f'    {caller.position}["{_mermaid_label(caller.name)}"]'
            f'-->{callee.position}["{_mermaid_label(callee.name)}"]'
        )

    if not edges:
        lines.append(f'    {root.position}["{_mermaid_label(root.name)}"]')

    lines.append(f"    style {ERROR_POSITION} fill:#f66,stroke:#900,color:#fff")
    return "\n".join(lines)


def _dot_escape(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return " ".join(escaped.split())


def _dot_quote(text: str) -> str:
    return f'"{_dot_escape(text)}"'


def render_dot(root: Function) -> str:
    edges = walk_edges(root)

    # node declarations in first-seen order
    nodes: Dict[str, str] = {root.position: root.name}
    for caller, callee in edges:
        nodes.setdefault(callee.position, callee.name)
        nodes.setdefault(caller.position, caller.name)

    lines = [
        "digraph CallHierarchy {",
        "  rankdir=TB;",
        "  node [shape=box, style=rounded];",
        "",
    ]

    for position, name in nodes.items():
        if position == ERROR_POSITION:
            lines.append(
                f"  {_dot_quote(position)} [label={_dot_quote(position)}, "
                f"fillcolor=red, fontcolor=white, style=filled];"
            )
        else:
            label = f'"{_dot_escape(name)}\\n{_dot_escape(position)}"'
            lines.append(f"  {_dot_quote(position)} [label={label}];")

    lines.append("")

    for caller, callee in edges:
        lines.append(f"  {_dot_quote(caller.position)} -> {_dot_quote(callee.position)};")

    lines.append("}")
    return "\n".join(lines)


RENDERERS: Dict[str, Callable[[Function], str]] = {
    "json": render_json,
    "mermaid": render_mermaid,
    "dot": render_dot,
}


def render(root: Function, output_format: str) -> str:
    """Render root with the renderer registered for output_format"""
    renderer = RENDERERS.get(output_format)
    if renderer is None:
        raise ValueError(
            f"Unknown output format '{output_format}', expected one of {sorted(RENDERERS)}"
        )
    return renderer(root)
