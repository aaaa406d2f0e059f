import copy

import pytest

from migraflow.convert.converter import convert_n8n_to_sim
from migraflow.utils.graph import build_source_graph, build_target_graph, dangling_edges, same_topology
from migraflow.utils.io import load_any, parse_json_text, write_json

WORKFLOW = {
    "nodes": [
        {"name": "Start", "type": "n8n-nodes-base.manualTrigger", "position": [0, 0], "parameters": {}},
        {"name": "Note", "type": "n8n-nodes-base.stickyNote", "position": [0, 0], "parameters": {}},
        {"name": "Check", "type": "n8n-nodes-base.if", "position": [0, 0], "parameters": {}},
        {"name": "Yes", "type": "n8n-nodes-base.set", "position": [0, 0], "parameters": {}},
        {"name": "No", "type": "n8n-nodes-base.set", "position": [0, 0], "parameters": {}},
    ],
    "connections": {
        "Start": {"main": [[{"node": "Check"}, {"node": "Note"}]]},
        "Check": {"main": [[{"node": "Yes"}], [{"node": "No"}]]},
    },
}


def test_build_source_graph_skips_notes_and_unknown_targets():
    G = build_source_graph(WORKFLOW)
    assert sorted(G.nodes) == ["Check", "No", "Start", "Yes"]
    assert G.number_of_edges() == 3
    assert [d["output"] for _, _, d in G.out_edges("Check", data=True)] == [0, 1]


def test_build_target_graph():
    sim = convert_n8n_to_sim(WORKFLOW)["workflow"]
    G = build_target_graph(sim)
    assert G.number_of_nodes() == 4
    handles = sorted(d["handle"] for _, _, d in G.edges(data=True))
    assert handles == ["condition-cond-else", "condition-cond-true", "source"]


def test_same_topology_detects_swapped_branches():
    a = convert_n8n_to_sim(WORKFLOW)["workflow"]
    swapped = copy.deepcopy(WORKFLOW)
    swapped["connections"]["Check"]["main"] = [[{"node": "No"}], [{"node": "Yes"}]]
    b = convert_n8n_to_sim(swapped)["workflow"]
    assert same_topology(a, convert_n8n_to_sim(WORKFLOW)["workflow"])
    assert not same_topology(a, b)


def test_dangling_edges():
    sim = convert_n8n_to_sim(WORKFLOW)["workflow"]
    assert dangling_edges(sim) == []
    sim["state"]["edges"][0]["target"] = "missing"
    assert dangling_edges(sim) == [sim["state"]["edges"][0]["id"]]


def test_parse_json_text():
    assert parse_json_text('{"a": 1}') == {"a": 1}
    with pytest.raises(ValueError, match="Invalid JSON format"):
        parse_json_text("{")


def test_write_and_load_json(tmp_path):
    fp = write_json(tmp_path / "nested" / "out.json", {"ok": True})
    assert load_any(fp) == {"ok": True}
    assert not (tmp_path / "nested" / "out.json.tmp").exists()


def test_load_yaml(tmp_path):
    fp = tmp_path / "x.yml"
    fp.write_text("a: [1, 2]\n", encoding="utf-8")
    assert load_any(fp) == {"a": [1, 2]}
