"""
Traversal and text rendering of call-flow trees.

Traversal is pre-order over an explicit stack with a depth counter, so a very
deep (or, for hand-built trees, cyclic) call chain costs bounded work per node
and never grows the Python call stack. Order within ``calls`` is kept exactly
as the Gateway returned it.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from codedocgen.common.config.config import FLOW_MAX_DEPTH
from codedocgen.models.flows import CallFlowEntry, CallNode, MethodParameter

ARROW = "→"


@dataclass(frozen=True)
class TraversalStep:
    depth: int
    node: CallNode
    # True when the node has calls that were not visited because of the depth limit
    truncated: bool = False


def walk_call_tree(
    roots: Sequence[CallNode],
    max_depth: Optional[int] = None,
) -> Iterator[TraversalStep]:
    """Yield every node under ``roots`` in pre-order with its depth.

    Roots are at depth 0. Children of a node at ``max_depth`` are not visited;
    the node is reported with ``truncated=True`` instead.
    """
    limit = FLOW_MAX_DEPTH if max_depth is None else max_depth
    stack: List[Tuple[int, CallNode]] = [(0, node) for node in reversed(roots)]
    while stack:
        depth, node = stack.pop()
        truncated = bool(node.calls) and depth >= limit
        yield TraversalStep(depth=depth, node=node, truncated=truncated)
        if truncated:
            continue
        for child in reversed(node.calls):
            stack.append((depth + 1, child))


def format_parameters(parameters: Sequence[MethodParameter]) -> str:
    if not parameters:
        return "()"
    return "(" + ", ".join(f"{p.type} {p.name}" for p in parameters) + ")"


def format_call(node: CallNode) -> str:
    text = f"{node.class_name}.{node.method}{format_parameters(node.parameters)}"
    if node.return_type:
        text += f" returns {node.return_type}"
    return text


def render_call_tree(
    roots: Sequence[CallNode],
    max_depth: Optional[int] = None,
    indent: str = "  ",
) -> List[str]:
    """Render a call tree as indented lines; nested calls are prefixed with an arrow."""
    lines = []
    for step in walk_call_tree(roots, max_depth=max_depth):
        prefix = indent * step.depth
        if step.depth:
            prefix += f"{ARROW} "
        lines.append(prefix + format_call(step.node))
        if step.truncated:
            lines.append(
                indent * (step.depth + 1)
                + f"... {len(step.node.calls)} nested call(s) beyond depth {step.depth} not shown"
            )
    return lines


def render_flow_entry(
    entry: CallFlowEntry,
    max_depth: Optional[int] = None,
) -> List[str]:
    lines = [
        f"{entry.http_method} {entry.endpoint}",
        f"Controller: {entry.controller}",
        "Call Flow:",
    ]
    lines.extend("  " + line for line in render_call_tree(entry.flow, max_depth=max_depth))
    return lines


def flow_to_rows(
    entry: CallFlowEntry,
    max_depth: Optional[int] = None,
) -> List[dict]:
    """Flatten an entry's tree into rows a front end can draw without recursion."""
    return [
        {
            "depth": step.depth,
            "class_name": step.node.class_name,
            "class_type": step.node.class_type.value,
            "method": step.node.method,
            "parameters": format_parameters(step.node.parameters),
            "return_type": step.node.return_type,
            "truncated": step.truncated,
        }
        for step in walk_call_tree(entry.flow, max_depth=max_depth)
    ]
