#migraflow/structural/schema.py
# Minimal n8n export shape, split into stages so each check can report its own
# message. Deliberately shallow: parameters, typeVersion and connection entries
# are not checked here.

WORKFLOW_OBJECT_SCHEMA = {
    "type": "object",
}

NODES_ARRAY_SCHEMA = {
    "type": "object",
    "required": ["nodes"],
    "properties": {
        "nodes": {"type": "array"},
    },
}

NODES_NON_EMPTY_SCHEMA = {
    "type": "object",
    "properties": {
        "nodes": {"type": "array", "minItems": 1},
    },
}

CONNECTIONS_OBJECT_SCHEMA = {
    "type": "object",
    "required": ["connections"],
    "properties": {
        "connections": {"type": "object"},
    },
}

NODE_NAME_SCHEMA = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
    },
}

NODE_TYPE_SCHEMA = {
    "type": "object",
    "required": ["type"],
    "properties": {
        "type": {"type": "string", "minLength": 1},
    },
}

NODE_POSITION_SCHEMA = {
    "type": "object",
    "required": ["position"],
    "properties": {
        "position": {
            "type": "array",
            "minItems": 2,
            "maxItems": 2,
        },
    },
}
