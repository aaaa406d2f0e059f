# utils/graph.py
from typing import Dict, Any
import networkx as nx
from networkx.algorithms.isomorphism import categorical_node_match, categorical_multiedge_match

from migraflow.mapping.mappings import STICKY_NOTE_TYPE


def build_source_graph(workflow: Dict[str, Any]) -> nx.MultiDiGraph:
    """
    Build a graph from n8n native json (nodes + connections), keyed by node name.
    Sticky notes are left out; connections to unknown nodes are skipped.
    Edges carry the output index they leave from.
    """
    G = nx.MultiDiGraph()
    for n in workflow.get("nodes", []) or []:
        name = n.get("name")
        if name is None or n.get("type") == STICKY_NOTE_TYPE:
            continue
        G.add_node(name, type=n.get("type"))

    # connections[<nodeName>]["main"][<outputIndex>] -> list of {node: <name>, type: "main", index: 0}
    for src, outs in (workflow.get("connections") or {}).items():
        if src not in G or not isinstance(outs, dict):
            continue
        for output_index, targets in enumerate(outs.get("main") or []):
            for hop in targets or []:
                dst = hop.get("node") if isinstance(hop, dict) else None
                if dst in G:
                    G.add_edge(src, dst, output=output_index)
    return G


def build_target_graph(sim_workflow: Dict[str, Any]) -> nx.MultiDiGraph:
    """Build a graph from a Sim workflow export, keyed by block id."""
    state = sim_workflow.get("state", {})
    G = nx.MultiDiGraph()
    for bid, block in (state.get("blocks") or {}).items():
        G.add_node(bid, type=block.get("type"), name=block.get("name"))
    for e in state.get("edges") or []:
        G.add_edge(e["source"], e["target"], handle=e.get("sourceHandle"))
    return G


def dangling_edges(sim_workflow: Dict[str, Any]) -> list:
    """Edge ids whose source or target is not a block of the same workflow."""
    state = sim_workflow.get("state", {})
    blocks = state.get("blocks") or {}
    return [
        e.get("id")
        for e in state.get("edges") or []
        if e.get("source") not in blocks or e.get("target") not in blocks
    ]


def dropped_connections(workflow: Dict[str, Any], sim_workflow: Dict[str, Any]) -> int:
    """How many n8n connection entries have no corresponding Sim edge."""
    total = 0
    for outs in (workflow.get("connections") or {}).values():
        if not isinstance(outs, dict):
            continue
        for targets in outs.get("main") or []:
            total += len(targets or [])
    kept = len(sim_workflow.get("state", {}).get("edges") or [])
    return max(total - kept, 0)


def same_topology(a: Dict[str, Any], b: Dict[str, Any]) -> bool:
    """
    True if two Sim workflows are the same graph up to ids: equal block types
    and equal edge handles under some relabeling of blocks.
    """
    return nx.is_isomorphic(
        build_target_graph(a),
        build_target_graph(b),
        node_match=categorical_node_match(["type", "name"], [None, None]),
        edge_match=categorical_multiedge_match("handle", None),
    )
