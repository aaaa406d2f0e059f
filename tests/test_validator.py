import copy

import pytest

from migraflow.structural.validator import validate_n8n_workflow

VALID = {
    "nodes": [
        {"name": "Start", "type": "n8n-nodes-base.manualTrigger", "position": [0, 0], "parameters": {}},
        {"name": "Mail", "type": "n8n-nodes-base.gmail", "position": [200, 0]},
    ],
    "connections": {},
}


def _with(**changes):
    wf = copy.deepcopy(VALID)
    wf.update(changes)
    return wf


def _with_node(index, **changes):
    wf = copy.deepcopy(VALID)
    node = wf["nodes"][index]
    for k, v in changes.items():
        if v is ...:
            node.pop(k, None)
        else:
            node[k] = v
    return wf


def test_valid_workflow():
    assert validate_n8n_workflow(VALID) == {"valid": True}


def test_parameters_and_connection_shapes_are_not_checked():
    wf = _with(connections={"Start": "not-an-object"})
    wf["nodes"][0]["parameters"] = "oops"
    assert validate_n8n_workflow(wf)["valid"] is True


@pytest.mark.parametrize(
    "data, message",
    [
        (None, "must be an object"),
        ([], "must be an object"),
        ("workflow", "must be an object"),
        ({"connections": {}}, 'missing or invalid "nodes" array'),
        ({"nodes": {}, "connections": {}}, 'missing or invalid "nodes" array'),
        ({"nodes": [], "connections": {}}, "must contain at least one node"),
        ({"nodes": VALID["nodes"]}, 'missing or invalid "connections" object'),
        ({"nodes": VALID["nodes"], "connections": []}, 'missing or invalid "connections" object'),
    ],
)
def test_workflow_level_failures(data, message):
    result = validate_n8n_workflow(data)
    assert result["valid"] is False
    assert message in result["error"]


@pytest.mark.parametrize(
    "changes, message",
    [
        ({"name": ...}, 'Invalid node: missing or invalid "name" field'),
        ({"name": ""}, 'Invalid node: missing or invalid "name" field'),
        ({"name": 42}, 'Invalid node: missing or invalid "name" field'),
        ({"type": ...}, 'Invalid node "Mail": missing or invalid "type" field'),
        ({"type": ""}, 'Invalid node "Mail": missing or invalid "type" field'),
        ({"position": ...}, 'Invalid node "Mail": missing or invalid "position" field'),
        ({"position": [1]}, 'Invalid node "Mail": missing or invalid "position" field'),
        ({"position": [1, 2, 3]}, 'Invalid node "Mail": missing or invalid "position" field'),
        ({"position": {"x": 1, "y": 2}}, 'Invalid node "Mail": missing or invalid "position" field'),
    ],
)
def test_node_level_failures(changes, message):
    result = validate_n8n_workflow(_with_node(1, **changes))
    assert result == {"valid": False, "error": message}


def test_first_failing_check_wins():
    wf = _with_node(0, type="", position=None)
    assert validate_n8n_workflow(wf)["error"] == 'Invalid node "Start": missing or invalid "type" field'


def test_non_object_node():
    wf = _with(nodes=["just a string"])
    assert validate_n8n_workflow(wf)["error"] == 'Invalid node: missing or invalid "name" field'
