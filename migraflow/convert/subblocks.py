# migraflow/convert/subblocks.py
"""
n8n parameters -> Sim sub-blocks.

Each declared sub-block of the target block gets its value from the first
strategy in SUB_BLOCK_STRATEGIES that does not return PASS. The order is the
precedence: an exact parameter match always wins, a declared default only
applies when nothing on the node fits.
"""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional, Sequence

from migraflow.mapping.mappings import FALLBACK_BLOCK_TYPE
from migraflow.registry.blocks import BlockDefinition, SubBlockDef
from migraflow.types import N8NNode, ParamKind, SimSubBlock, is_present, param_kind
from migraflow.utils.logger import get_logger

logger = get_logger("convert.subblocks")


class _Pass:
    def __repr__(self) -> str:
        return "PASS"


# Returned by a strategy that has nothing to say about a slot
PASS: Any = _Pass()

Strategy = Callable[[SubBlockDef, Dict[str, Any], str], Any]

CODE_PARAMETER_KEYS = ("jsCode", "functionCode", "code", "script")
MESSAGE_PARAMETER_KEYS = ("text", "body", "message")
RECIPIENT_PARAMETER_KEYS = ("sendTo",)
DEFAULT_FUNCTION_LANGUAGE = "javascript"
LONG_INPUT_THRESHOLD = 100


def _first_present(params: Dict[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if key in params and is_present(params[key]):
            return params[key]
    return PASS


# ---------- Strategies ----------

def direct_parameter(slot: SubBlockDef, params: Dict[str, Any], block_type: str) -> Any:
    """Parameter with the same key as the slot (null counts as a value)."""
    if slot.id in params:
        return params[slot.id]
    return PASS


def code_aliases(slot: SubBlockDef, params: Dict[str, Any], block_type: str) -> Any:
    if slot.id != "code":
        return PASS
    value = _first_present(params, CODE_PARAMETER_KEYS)
    if value is PASS:
        logger.warning("no code parameter for %s block, available params: %s", block_type, sorted(params))
    else:
        logger.debug(
            "found code parameter for %s block (%d chars)",
            block_type, len(value) if isinstance(value, str) else 0,
        )
    return value


def message_aliases(slot: SubBlockDef, params: Dict[str, Any], block_type: str) -> Any:
    if slot.id != "message":
        return PASS
    return _first_present(params, MESSAGE_PARAMETER_KEYS)


def recipient_alias(slot: SubBlockDef, params: Dict[str, Any], block_type: str) -> Any:
    if slot.id != "to":
        return PASS
    return _first_present(params, RECIPIENT_PARAMETER_KEYS)


def function_language(slot: SubBlockDef, params: Dict[str, Any], block_type: str) -> Any:
    if slot.id == "language" and block_type == FALLBACK_BLOCK_TYPE:
        return DEFAULT_FUNCTION_LANGUAGE
    return PASS


def serialized_conditions(slot: SubBlockDef, params: Dict[str, Any], block_type: str) -> Any:
    if slot.id != "condition":
        return PASS
    conditions = params.get("conditions")
    if not is_present(conditions):
        return PASS
    # compact, like JSON.stringify on the Sim side
    return json.dumps(conditions, separators=(",", ":"), ensure_ascii=False)


def declared_default(slot: SubBlockDef, params: Dict[str, Any], block_type: str) -> Any:
    value = slot.default_value()
    return PASS if value is None else value


SUB_BLOCK_STRATEGIES: List[Strategy] = [
    direct_parameter,
    code_aliases,
    message_aliases,
    recipient_alias,
    function_language,
    serialized_conditions,
    declared_default,
]


def resolve_sub_block_value(
    slot: SubBlockDef,
    params: Dict[str, Any],
    block_type: str,
    strategies: Sequence[Strategy] = SUB_BLOCK_STRATEGIES,
) -> Any:
    for strategy in strategies:
        value = strategy(slot, params, block_type)
        if value is not PASS:
            return value
    return None


# ---------- Public API ----------

def node_parameters(node: N8NNode) -> Dict[str, Any]:
    """The node's parameter bag; a missing bag is empty, anything but an object is an error."""
    params = node.get("parameters")
    if params is None:
        return {}
    if not isinstance(params, dict):
        raise TypeError(
            f"Node \"{node.get('name')}\" has invalid parameters: "
            f"expected an object, got {type(params).__name__}"
        )
    return params


def generic_sub_block_type(value: Any) -> str:
    if param_kind(value) is ParamKind.STRING and len(value) > LONG_INPUT_THRESHOLD:
        return "long-input"
    return "short-input"


def build_sub_blocks(
    node: N8NNode,
    block_type: str,
    definition: Optional[BlockDefinition],
) -> Dict[str, SimSubBlock]:
    """
    Sub-blocks for one converted node.

    With a definition, every declared slot is emitted (value may be None).
    Without one, every n8n parameter becomes its own short/long input.
    """
    params = node_parameters(node)
    sub_blocks: Dict[str, SimSubBlock] = {}

    if definition is None:
        for key, value in params.items():
            sub_blocks[key] = {"id": key, "type": generic_sub_block_type(value), "value": value}
        return sub_blocks

    for slot in definition.sub_blocks:
        sub_blocks[slot.id] = {
            "id": slot.id,
            "type": slot.type,
            "value": resolve_sub_block_value(slot, params, block_type),
        }
    return sub_blocks
