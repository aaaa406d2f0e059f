# migraflow/types.py
"""
Shapes of the n8n export (source) and the Sim export (target).

Everything is plain JSON-compatible dicts at runtime; the TypedDicts below
only document and type-check the keys.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, NotRequired, Tuple, TypedDict


# ---------- n8n (source) ----------

class N8NConnection(TypedDict):
    node: str
    type: str
    index: int


class N8NConnectionGroup(TypedDict):
    main: List[List[N8NConnection]]


class N8NCredential(TypedDict):
    id: str
    name: str


class N8NNode(TypedDict):
    name: str
    type: str
    position: Tuple[float, float]
    parameters: Dict[str, Any]
    typeVersion: int
    credentials: NotRequired[Dict[str, N8NCredential]]


class N8NWorkflow(TypedDict):
    name: NotRequired[str]
    nodes: List[N8NNode]
    connections: Dict[str, N8NConnectionGroup]


# ---------- Sim (target) ----------

class SimSubBlock(TypedDict):
    id: str
    type: str
    value: Any


class SimOutput(TypedDict):
    type: str
    description: str


class SimPosition(TypedDict):
    x: float
    y: float


class SimLayout(TypedDict):
    measuredWidth: int
    measuredHeight: int


class SimBlock(TypedDict):
    id: str
    type: str
    name: str
    position: SimPosition
    enabled: bool
    horizontalHandles: bool
    advancedMode: bool
    triggerMode: bool
    height: int
    subBlocks: Dict[str, SimSubBlock]
    outputs: Dict[str, SimOutput]
    data: Dict[str, Any]
    layout: SimLayout


class SimEdge(TypedDict):
    id: str
    source: str
    target: str
    sourceHandle: str
    targetHandle: str
    type: str
    data: Dict[str, Any]


class SimMetadata(TypedDict):
    name: str
    description: str
    exportedAt: str


class SimState(TypedDict):
    blocks: Dict[str, SimBlock]
    edges: List[SimEdge]
    loops: Dict[str, Any]
    parallels: Dict[str, Any]
    metadata: SimMetadata
    variables: List[Any]


class SimWorkflow(TypedDict):
    version: str
    exportedAt: str
    state: SimState


class MigrationResult(TypedDict):
    success: bool
    workflow: NotRequired[SimWorkflow]
    error: NotRequired[str]
    warnings: NotRequired[List[str]]


class ValidationResult(TypedDict):
    valid: bool
    error: NotRequired[str]


# ---------- Parameter values ----------

class ParamKind(str, Enum):
    """Closed set of JSON value kinds found in an n8n parameter bag."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"


def param_kind(value: Any) -> ParamKind:
    # bool first: bool is a subclass of int
    if value is None:
        return ParamKind.NULL
    if isinstance(value, bool):
        return ParamKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ParamKind.NUMBER
    if isinstance(value, str):
        return ParamKind.STRING
    if isinstance(value, dict):
        return ParamKind.OBJECT
    if isinstance(value, (list, tuple)):
        return ParamKind.ARRAY
    raise TypeError(f"Unsupported parameter value type: {type(value).__name__}")


def is_present(value: Any) -> bool:
    """
    Whether an alias lookup should accept this value.
    Empty strings, zero, NaN, False and null are skipped; objects and
    arrays are always accepted, even when empty.
    """
    kind = param_kind(value)
    if kind is ParamKind.STRING:
        return value != ""
    if kind is ParamKind.NUMBER:
        return value == value and value != 0
    if kind is ParamKind.BOOLEAN:
        return value
    if kind in (ParamKind.OBJECT, ParamKind.ARRAY):
        return True
    return False

