"""Call-flow tree model and traversal."""

from codedocgen.services.flows.model import FlowTreeModel
from codedocgen.services.flows.tree import (
    TraversalStep,
    format_call,
    format_parameters,
    render_call_tree,
    render_flow_entry,
    walk_call_tree,
)

__all__ = [
    "FlowTreeModel",
    "TraversalStep",
    "format_call",
    "format_parameters",
    "render_call_tree",
    "render_flow_entry",
    "walk_call_tree",
]
