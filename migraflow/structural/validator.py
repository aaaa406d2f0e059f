# migraflow/structural/validator.py

from typing import Any, Callable, Dict, List, Tuple

from jsonschema import validate, ValidationError

from .schema import (
    WORKFLOW_OBJECT_SCHEMA,
    NODES_ARRAY_SCHEMA,
    NODES_NON_EMPTY_SCHEMA,
    CONNECTIONS_OBJECT_SCHEMA,
    NODE_NAME_SCHEMA,
    NODE_TYPE_SCHEMA,
    NODE_POSITION_SCHEMA,
)
from migraflow.types import ValidationResult
from migraflow.utils.logger import get_logger

logger = get_logger("structural")

# (schema, message) pairs, checked in order against the whole workflow
WORKFLOW_STAGES: List[Tuple[Dict[str, Any], str]] = [
    (WORKFLOW_OBJECT_SCHEMA, "Invalid workflow data: must be an object"),
    (NODES_ARRAY_SCHEMA, 'Invalid workflow: missing or invalid "nodes" array'),
    (NODES_NON_EMPTY_SCHEMA, "Invalid workflow: must contain at least one node"),
    (CONNECTIONS_OBJECT_SCHEMA, 'Invalid workflow: missing or invalid "connections" object'),
]

# (schema, message builder) pairs, checked in order against every node
NODE_STAGES: List[Tuple[Dict[str, Any], Callable[[Any], str]]] = [
    (NODE_NAME_SCHEMA, lambda name: 'Invalid node: missing or invalid "name" field'),
    (NODE_TYPE_SCHEMA, lambda name: f'Invalid node "{name}": missing or invalid "type" field'),
    (NODE_POSITION_SCHEMA, lambda name: f'Invalid node "{name}": missing or invalid "position" field'),
]


def _conforms(instance: Any, schema: Dict[str, Any]) -> bool:
    try:
        validate(instance=instance, schema=schema)
    except ValidationError as e:
        logger.debug("schema check failed: %s", e.message)
        return False
    return True


def validate_n8n_workflow(data: Any) -> ValidationResult:
    """
    Check that a parsed value has the minimal n8n workflow shape.

    Returns {"valid": True} or {"valid": False, "error": <message>} for the
    first failing check.
    """
    for schema, message in WORKFLOW_STAGES:
        if not _conforms(data, schema):
            return {"valid": False, "error": message}

    for node in data["nodes"]:
        name = node.get("name") if isinstance(node, dict) else None
        for schema, message_for in NODE_STAGES:
            if not _conforms(node, schema):
                return {"valid": False, "error": message_for(name)}

    return {"valid": True}
