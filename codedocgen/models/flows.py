"""
Call-flow data models.

A call-flow entry is one endpoint's trace: the ordered invocations reachable
from its controller method. ``CallNode.calls`` nests to arbitrary depth, so
both parsing and traversal are done with explicit stacks.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ClassType(str, Enum):
    CONTROLLER = "controller"
    SERVICE = "service"
    REPOSITORY = "repository"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> "ClassType":
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.OTHER


@dataclass
class MethodParameter:
    name: str
    type: str


@dataclass
class CallNode:
    """One method invocation and the invocations it makes in turn."""

    class_name: str
    method: str
    class_type: ClassType = ClassType.OTHER
    parameters: List[MethodParameter] = field(default_factory=list)
    return_type: Optional[str] = None
    calls: List["CallNode"] = field(default_factory=list)

    @classmethod
    def _from_fields(cls, data: Dict[str, Any]) -> "CallNode":
        return cls(
            class_name=str(data.get("class_name") or ""),
            method=str(data.get("method") or ""),
            class_type=ClassType.parse(data.get("class_type")),
            parameters=[
                MethodParameter(name=str(p.get("name", "")), type=str(p.get("type", "")))
                for p in (data.get("parameters") or [])
                if isinstance(p, dict)
            ],
            return_type=data.get("return_type"),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CallNode":
        """Build a node tree from Gateway JSON without recursing."""
        root = cls._from_fields(data)
        pending = [(root, data.get("calls") or [])]
        while pending:
            parent, raw_calls = pending.pop()
            for raw in raw_calls:
                if not isinstance(raw, dict):
                    continue
                child = cls._from_fields(raw)
                parent.calls.append(child)
                pending.append((child, raw.get("calls") or []))
        return root


@dataclass
class CallFlowEntry:
    http_method: str
    endpoint: str
    controller: str
    flow: List[CallNode] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CallFlowEntry":
        return cls(
            http_method=str(data.get("http_method") or ""),
            endpoint=str(data.get("endpoint") or ""),
            controller=str(data.get("controller") or ""),
            flow=[
                CallNode.from_dict(node)
                for node in (data.get("flow") or [])
                if isinstance(node, dict)
            ],
        )
