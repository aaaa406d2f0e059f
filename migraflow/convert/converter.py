# migraflow/convert/converter.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from migraflow.convert.ids import IdFactory, uuid4_factory
from migraflow.convert.outputs import build_outputs
from migraflow.convert.subblocks import build_sub_blocks
from migraflow.mapping.mappings import (
    CONDITION_BLOCK_TYPE,
    DEFAULT_LAYOUT,
    FALLBACK_BLOCK_TYPE,
    FALLBACK_HEIGHT,
    STICKY_NOTE_TYPE,
    is_trigger_node,
    resolve,
)
from migraflow.registry.blocks import BlockDefinition, BlockRegistry, default_registry
from migraflow.types import (
    MigrationResult,
    N8NConnectionGroup,
    N8NNode,
    N8NWorkflow,
    SimBlock,
    SimEdge,
    SimWorkflow,
)
from migraflow.utils.logger import get_logger

logger = get_logger("convert")

WORKFLOW_VERSION = "1.0"
DEFAULT_WORKFLOW_NAME = "Migrated from n8n"
WORKFLOW_DESCRIPTION = "Workflow migrated from n8n automation platform"

GENERIC_SOURCE_HANDLE = "source"
CONDITION_TRUE_HANDLE = "condition-cond-true"
CONDITION_ELSE_HANDLE = "condition-cond-else"
TARGET_HANDLE = "target"
EDGE_TYPE = "default"


# ---------- Public API ----------

def convert_n8n_to_sim(
    workflow: N8NWorkflow,
    registry: Optional[BlockRegistry] = None,
    id_factory: Optional[IdFactory] = None,
    now: Optional[datetime] = None,
) -> MigrationResult:
    """
    Convert a (structurally validated) n8n workflow into a Sim workflow.

    Returns {"success": True, "workflow": ..., "warnings"?: [...]} or
    {"success": False, "error": ...}. Never raises: any fault in any phase
    turns into an error result and no partial workflow is returned.

    registry:   anything with lookup(type) / exists(type); defaults to the
                built-in Sim catalog
    id_factory: zero-argument callable producing fresh block/edge ids
    now:        export timestamp (defaults to the current UTC time)
    """
    try:
        registry = registry if registry is not None else default_registry()
        new_id = id_factory or uuid4_factory()
        warnings: List[str] = []

        # 1) nodes -> blocks
        blocks, node_ids = _convert_nodes(workflow.get("nodes") or [], registry, new_id, warnings)

        # 2) connections -> edges
        edges = _convert_connections(workflow.get("connections", {}), blocks, node_ids, new_id, warnings)

        # 3) assemble
        sim = _assemble(workflow, blocks, edges, now)
    except Exception as e:
        logger.exception("conversion failed")
        return {"success": False, "error": str(e) or "Unknown error during migration"}

    logger.info(
        "converted %d nodes into %d blocks and %d edges (%d warnings)",
        len(workflow.get("nodes") or []), len(blocks), len(edges), len(warnings),
    )
    result: MigrationResult = {"success": True, "workflow": sim}
    if warnings:
        result["warnings"] = warnings
    return result


# ---------- Helpers ----------

def _warn(warnings: List[str], msg: str) -> None:
    logger.debug(msg)
    warnings.append(msg)


# ---------- Phase 1: nodes ----------

def _convert_nodes(
    nodes: List[N8NNode],
    registry: BlockRegistry,
    new_id: IdFactory,
    warnings: List[str],
) -> Tuple[Dict[str, SimBlock], Dict[str, str]]:
    blocks: Dict[str, SimBlock] = {}
    node_ids: Dict[str, str] = {}

    for index, node in enumerate(nodes):
        if node.get("type") == STICKY_NOTE_TYPE:
            logger.debug("skipping sticky note %r", node.get("name"))
            continue

        block_id = new_id()
        node_ids[node["name"]] = block_id

        sim_type, height, resolved_by = resolve(node["type"])
        if resolved_by == "fallback":
            msg = (
                f'[BLOCK] Unrecognized node type "{node["type"]}". '
                f'Node "{node["name"]}" converted to {FALLBACK_BLOCK_TYPE} block.'
            )
            _warn(warnings, msg)
        elif not _block_type_available(registry, sim_type, node, warnings):
            sim_type, height = FALLBACK_BLOCK_TYPE, FALLBACK_HEIGHT

        definition = _lookup_definition(registry, sim_type, node, warnings)

        block: SimBlock = {
            "id": block_id,
            "type": sim_type,
            "name": node["name"],
            "position": {"x": node["position"][0], "y": node["position"][1]},
            "enabled": True,
            "horizontalHandles": True,
            "advancedMode": False,
            "triggerMode": is_trigger_node(node, index == 0),
            "height": height,
            "subBlocks": build_sub_blocks(node, sim_type, definition),
            "outputs": build_outputs(definition),
            "data": {},
            "layout": {
                "measuredWidth": DEFAULT_LAYOUT["measuredWidth"],
                "measuredHeight": height,
            },
        }
        blocks[block_id] = block
        logger.debug("node %r (%s) -> %s block %s", node["name"], node["type"], sim_type, block_id)

    return blocks, node_ids


def _block_type_available(
    registry: BlockRegistry,
    sim_type: str,
    node: N8NNode,
    warnings: List[str],
) -> bool:
    """Ask the registry whether sim_type exists; a failing check counts as 'no'."""
    try:
        if registry.exists(sim_type):
            return True
        reason = "not available in Sim"
    except Exception as e:
        reason = f"could not be checked ({e})"

    msg = (
        f'[BLOCK] Block type "{sim_type}" {reason}. '
        f'Node "{node["name"]}" ({node["type"]}) converted to {FALLBACK_BLOCK_TYPE} block.'
    )
    _warn(warnings, msg)
    return False


def _lookup_definition(
    registry: BlockRegistry,
    sim_type: str,
    node: N8NNode,
    warnings: List[str],
) -> Optional[BlockDefinition]:
    try:
        return registry.lookup(sim_type)
    except Exception as e:
        msg = (
            f'[BLOCK] Definition lookup for block type "{sim_type}" failed ({e}). '
            f'Node "{node["name"]}" keeps its raw parameters.'
        )
        _warn(warnings, msg)
        return None


# ---------- Phase 2: connections ----------

def _source_handle(block_type: str, output_index: int) -> str:
    # Only two branches are distinguishable on a condition block;
    # every branch past the first lands on the else handle.
    if block_type == CONDITION_BLOCK_TYPE:
        return CONDITION_TRUE_HANDLE if output_index == 0 else CONDITION_ELSE_HANDLE
    return GENERIC_SOURCE_HANDLE


def _convert_connections(
    connections: Dict[str, N8NConnectionGroup],
    blocks: Dict[str, SimBlock],
    node_ids: Dict[str, str],
    new_id: IdFactory,
    warnings: List[str],
) -> List[SimEdge]:
    """
    n8n connections look like:
      connections[src]["main"] = [
         [ {"node": "B", "type": "main", "index": 0}, {"node": "C", ...} ],   # output 0
         [ {"node": "D", "type": "main", "index": 0} ]                         # output 1
      ]
    """
    if not isinstance(connections, dict):
        raise TypeError(f"Invalid connections: expected an object, got {type(connections).__name__}")

    edges: List[SimEdge] = []
    for source_name, group in connections.items():
        source_id = node_ids.get(source_name)
        if source_id is None:
            msg = f'[EDGE] Source node "{source_name}" not found in node map'
            _warn(warnings, msg)
            continue

        if not isinstance(group, dict):
            raise TypeError(f'Invalid connections for node "{source_name}": expected an object')
        other = sorted(k for k in group if k != "main")
        if other:
            logger.debug("ignoring %s connections of %r", other, source_name)

        source_type = blocks[source_id]["type"]
        for output_index, targets in enumerate(group.get("main") or []):
            for conn in targets or []:
                target_name = conn.get("node")
                target_id = node_ids.get(target_name)
                if target_id is None:
                    msg = f'[EDGE] Target node "{target_name}" not found in node map'
                    _warn(warnings, msg)
                    continue

                edges.append({
                    "id": new_id(),
                    "source": source_id,
                    "target": target_id,
                    "sourceHandle": _source_handle(source_type, output_index),
                    "targetHandle": TARGET_HANDLE,
                    "type": EDGE_TYPE,
                    "data": {},
                })
    return edges


# ---------- Phase 3: assembly ----------

def _iso_timestamp(now: Optional[datetime]) -> str:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _assemble(
    workflow: N8NWorkflow,
    blocks: Dict[str, SimBlock],
    edges: List[SimEdge],
    now: Optional[datetime],
) -> SimWorkflow:
    exported_at = _iso_timestamp(now)
    return {
        "version": WORKFLOW_VERSION,
        "exportedAt": exported_at,
        "state": {
            "blocks": blocks,
            "edges": edges,
            "loops": {},
            "parallels": {},
            "metadata": {
                "name": workflow.get("name") or DEFAULT_WORKFLOW_NAME,
                "description": WORKFLOW_DESCRIPTION,
                "exportedAt": exported_at,
            },
            "variables": [],
        },
    }
