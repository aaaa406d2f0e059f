# migraflow/convert/outputs.py

from typing import Dict, Optional

from migraflow.registry.blocks import BlockDefinition
from migraflow.types import SimOutput

GENERIC_OUTPUTS: Dict[str, SimOutput] = {
    "result": {"type": "any", "description": "Output from block execution"},
}


def build_outputs(definition: Optional[BlockDefinition]) -> Dict[str, SimOutput]:
    """
    Output ports for a block type.
    Declared outputs are either a bare type string or {type, description};
    types without declared outputs get a single generic 'result' port.
    """
    if definition is None or not definition.outputs:
        return {k: dict(v) for k, v in GENERIC_OUTPUTS.items()}

    outputs: Dict[str, SimOutput] = {}
    for key, decl in definition.outputs.items():
        if isinstance(decl, str):
            outputs[key] = {"type": decl, "description": f"{key} output"}
        else:
            outputs[key] = {
                "type": decl["type"],
                "description": decl.get("description") or f"{key} output",
            }
    return outputs
