# migraflow/registry/blocks.py
"""
Catalog of target (Sim) block definitions.

The converter only needs two questions answered:
  - lookup(block_type) -> BlockDefinition | None
  - exists(block_type) -> bool
Any object with those two methods can stand in for BlockRegistry.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from migraflow.utils.io import PathLike, load_any
from migraflow.utils.logger import get_logger

logger = get_logger("registry")

# A declared output is either a bare type string or {"type", "description"}
OutputDecl = Union[str, Dict[str, str]]


class RegistryError(ValueError):
    """Raised when a registry file cannot be turned into block definitions."""


@dataclass(frozen=True)
class SubBlockDef:
    id: str
    type: str
    # a value, a zero-argument callable producing one, or None when absent
    default: Any = None

    def default_value(self) -> Any:
        if callable(self.default):
            return self.default()
        return self.default


@dataclass(frozen=True)
class BlockDefinition:
    type: str
    name: str = ""
    sub_blocks: List[SubBlockDef] = field(default_factory=list)
    outputs: Dict[str, OutputDecl] = field(default_factory=dict)


class BlockRegistry:
    def __init__(self, definitions: Optional[Iterable[BlockDefinition]] = None):
        self._defs: Dict[str, BlockDefinition] = {}
        for d in definitions or []:
            self.register(d)

    def register(self, definition: BlockDefinition) -> None:
        self._defs[definition.type] = definition

    def lookup(self, block_type: str) -> Optional[BlockDefinition]:
        return self._defs.get(block_type)

    def exists(self, block_type: str) -> bool:
        return block_type in self._defs

    def types(self) -> List[str]:
        return sorted(self._defs)

    def merged(self, other: "BlockRegistry") -> "BlockRegistry":
        """New registry with `other`'s definitions overriding ours."""
        out = BlockRegistry(self._defs.values())
        for t in other.types():
            out.register(other._defs[t])
        return out

    def __contains__(self, block_type: str) -> bool:
        return self.exists(block_type)

    def __len__(self) -> int:
        return len(self._defs)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any], source: str = "<mapping>") -> "BlockRegistry":
        """
        Build a registry from plain data, e.g. a parsed registry file:

          blocks:
            slack:
              name: Slack
              subBlocks:
                - {id: channel, type: short-input}
                - {id: text, type: long-input, value: "hello"}
              outputs:
                ts: string
                channel: {type: string, description: Channel id}
        """
        if not isinstance(data, dict) or not isinstance(data.get("blocks"), dict):
            raise RegistryError(f"{source}: expected a top-level 'blocks' mapping")

        reg = cls()
        for block_type, entry in data["blocks"].items():
            entry = entry or {}
            if not isinstance(entry, dict):
                raise RegistryError(f"{source}: block '{block_type}' must be a mapping")
            sub_blocks = []
            for sb in entry.get("subBlocks") or []:
                if not isinstance(sb, dict) or not sb.get("id") or not sb.get("type"):
                    raise RegistryError(
                        f"{source}: block '{block_type}' has a sub-block without 'id'/'type': {sb!r}"
                    )
                sub_blocks.append(SubBlockDef(id=sb["id"], type=sb["type"], default=sb.get("value")))
            outputs = entry.get("outputs") or {}
            if not isinstance(outputs, dict):
                raise RegistryError(f"{source}: block '{block_type}' outputs must be a mapping")
            for port, decl in outputs.items():
                if isinstance(decl, str):
                    continue
                if not isinstance(decl, dict) or not isinstance(decl.get("type"), str):
                    raise RegistryError(
                        f"{source}: block '{block_type}' output '{port}' needs a type string "
                        f"or a mapping with a string 'type': {decl!r}"
                    )
            reg.register(BlockDefinition(
                type=block_type,
                name=entry.get("name", ""),
                sub_blocks=sub_blocks,
                outputs=outputs,
            ))
        return reg


def load_registry(path: PathLike, base: Optional[BlockRegistry] = None) -> BlockRegistry:
    """
    Load block definitions from a JSON or YAML file.
    When `base` is given, the file's definitions extend/override it.
    """
    p = Path(path)
    try:
        data = load_any(p)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise RegistryError(f"{p}: {e}") from e

    reg = BlockRegistry.from_mapping(data, source=str(p))
    logger.info("loaded %d block definitions from %s", len(reg), p)
    return base.merged(reg) if base is not None else reg


def default_registry() -> BlockRegistry:
    from migraflow.registry.catalog import SIM_BLOCKS

    return BlockRegistry(SIM_BLOCKS)

