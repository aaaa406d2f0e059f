# migraflow/mapping/mappings.py

import re
from typing import Any, Dict, List, NamedTuple, Tuple


class BlockTypeMapping(NamedTuple):
    n8n_type: str
    sim_type: str
    default_height: int


FALLBACK_BLOCK_TYPE = "function"
FALLBACK_HEIGHT = 143
HEURISTIC_HEIGHT = 230
CONDITION_BLOCK_TYPE = "condition"
STICKY_NOTE_TYPE = "n8n-nodes-base.stickyNote"

DEFAULT_LAYOUT = {
    "measuredWidth": 250,
    "measuredHeight": 172,
}

BLOCK_TYPE_MAPPINGS: List[BlockTypeMapping] = [
    # Triggers
    BlockTypeMapping("n8n-nodes-base.cron", "schedule", 172),
    BlockTypeMapping("n8n-nodes-base.webhook", "webhook", 172),
    BlockTypeMapping("n8n-nodes-base.manualTrigger", "manual_trigger", 143),
    BlockTypeMapping("n8n-nodes-base.scheduleTrigger", "schedule", 172),

    # Databases
    BlockTypeMapping("n8n-nodes-base.mySql", "mysql", 230),
    BlockTypeMapping("n8n-nodes-base.postgres", "postgresql", 230),
    BlockTypeMapping("n8n-nodes-base.mongodb", "mongodb", 230),
    BlockTypeMapping("n8n-nodes-base.redis", "function", 230),

    # Communication
    BlockTypeMapping("n8n-nodes-base.gmail", "gmail", 288),
    BlockTypeMapping("n8n-nodes-base.slack", "slack", 317),
    BlockTypeMapping("n8n-nodes-base.telegram", "telegram", 259),
    BlockTypeMapping("n8n-nodes-base.discord", "discord", 259),
    BlockTypeMapping("n8n-nodes-base.microsoftTeams", "microsoft_teams", 143),
    BlockTypeMapping("n8n-nodes-base.microsoftOutlook", "outlook", 201),

    # Storage & files
    BlockTypeMapping("n8n-nodes-base.googleSheets", "google_sheets", 259),
    BlockTypeMapping("n8n-nodes-base.googleDrive", "google_drive", 259),
    BlockTypeMapping("n8n-nodes-base.dropbox", "dropbox", 259),
    BlockTypeMapping("n8n-nodes-base.airtable", "airtable", 259),

    # Logic
    BlockTypeMapping("n8n-nodes-base.if", "condition", 259),
    BlockTypeMapping("n8n-nodes-base.switch", "router", 259),
    BlockTypeMapping("n8n-nodes-base.function", "function", 143),
    BlockTypeMapping("n8n-nodes-base.code", "function", 143),

    # HTTP & API
    BlockTypeMapping("n8n-nodes-base.httpRequest", "api", 259),

    # Payment
    BlockTypeMapping("n8n-nodes-base.stripe", "stripe", 143),

    # Misc
    BlockTypeMapping("n8n-nodes-base.wait", "wait", 143),
    BlockTypeMapping("n8n-nodes-base.set", "function", 143),
    BlockTypeMapping("n8n-nodes-base.merge", "function", 143),
]

_MAPPING_INDEX: Dict[str, BlockTypeMapping] = {m.n8n_type: m for m in BLOCK_TYPE_MAPPINGS}

TRIGGER_TYPES = frozenset({
    "n8n-nodes-base.cron",
    "n8n-nodes-base.webhook",
    "n8n-nodes-base.manualTrigger",
    "n8n-nodes-base.scheduleTrigger",
    "n8n-nodes-base.stripe",
    "n8n-nodes-base.telegramTrigger",
    "n8n-nodes-base.slackTrigger",
    "n8n-nodes-base.githubTrigger",
})

_UPPER = re.compile(r"(?<!^)([A-Z])")


def camel_to_snake(name: str) -> str:
    """googleSheets -> google_sheets (every non-leading uppercase letter gets a '_')."""
    return _UPPER.sub(r"_\1", name).lower()


class TypeResolution(NamedTuple):
    sim_type: str
    default_height: int
    # "table" | "heuristic" | "fallback"
    source: str


def resolve(n8n_type: str) -> TypeResolution:
    """
    Map an n8n node type to a Sim block type and default height.

    Order:
      1) exact match in BLOCK_TYPE_MAPPINGS
      2) namespaced type -> snake_case of the last segment, height 230
         e.g. "n8n-nodes-base.googleSheets" -> "google_sheets"
      3) no namespace -> generic function block, height 143
    """
    mapping = _MAPPING_INDEX.get(n8n_type)
    if mapping is not None:
        return TypeResolution(mapping.sim_type, mapping.default_height, "table")

    parts = n8n_type.split(".")
    if len(parts) > 1:
        return TypeResolution(camel_to_snake(parts[-1]), HEURISTIC_HEIGHT, "heuristic")

    return TypeResolution(FALLBACK_BLOCK_TYPE, FALLBACK_HEIGHT, "fallback")


def resolve_block_type(n8n_type: str) -> Tuple[str, int]:
    """(sim_type, default_height) for an n8n node type."""
    resolution = resolve(n8n_type)
    return resolution.sim_type, resolution.default_height


def is_trigger_type(n8n_type: str) -> bool:
    return n8n_type in TRIGGER_TYPES or n8n_type.endswith("Trigger")


def is_trigger_node(node: Dict[str, Any], is_first_node: bool) -> bool:
    """
    Known trigger types and anything ending in 'Trigger' are triggers.
    Otherwise the first node of the workflow is assumed to be the entry point.
    """
    if is_trigger_type(node.get("type", "")):
        return True
    return is_first_node
