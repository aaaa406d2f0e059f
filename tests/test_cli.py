import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from migraflow.cli import app
from migraflow.utils.logger import ROOT_LOGGER, init_logger

runner = CliRunner()

BENCH_DIR = Path(__file__).resolve().parent.parent / "bench" / "conversion"


def test_convert_writes_output(tmp_path):
    out = tmp_path / "sim.json"
    result = runner.invoke(app, ["convert", "-i", str(BENCH_DIR / "C02_if_two_branches" / "workflow.json"), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "[ok] wrote" in result.output
    sim = json.loads(out.read_text(encoding="utf-8"))
    assert len(sim["state"]["blocks"]) == 4
    assert len(sim["state"]["edges"]) == 3


def test_convert_to_stdout_with_seed():
    args = ["convert", "-i", str(BENCH_DIR / "C01_webhook_only" / "workflow.json"), "--seed", "3"]
    first = runner.invoke(app, args)
    second = runner.invoke(app, args)
    assert first.exit_code == 0, first.output
    a = json.loads(first.stdout)
    b = json.loads(second.stdout)
    assert list(a["state"]["blocks"]) == list(b["state"]["blocks"])


def test_convert_reports_warnings(tmp_path):
    out = tmp_path / "sim.json"
    result = runner.invoke(app, ["convert", "-i", str(BENCH_DIR / "C04_sticky_and_dangling" / "workflow.json"), "-o", str(out)])
    assert result.exit_code == 0
    assert out.exists()
    assert "Deleted node" in result.output


def test_convert_invalid_workflow_fails(tmp_path):
    out = tmp_path / "sim.json"
    result = runner.invoke(app, ["convert", "-i", str(BENCH_DIR / "C06_missing_position" / "workflow.json"), "-o", str(out)])
    assert result.exit_code == 1
    assert 'Invalid node "Webhook": missing or invalid "position" field' in result.output
    assert not out.exists()


def test_convert_invalid_json(tmp_path):
    fp = tmp_path / "broken.json"
    fp.write_text("{ nodes: ", encoding="utf-8")
    result = runner.invoke(app, ["convert", "-i", str(fp)])
    assert result.exit_code == 1
    assert "Invalid JSON format" in result.output


def test_convert_reads_stdin(tmp_path):
    text = (BENCH_DIR / "C01_webhook_only" / "workflow.json").read_text(encoding="utf-8")
    out = tmp_path / "sim.json"
    result = runner.invoke(app, ["convert", "-i", "-", "-o", str(out)], input=text)
    assert result.exit_code == 0, result.output
    assert json.loads(out.read_text(encoding="utf-8"))["state"]["metadata"]["name"] == "Inbound webhook"


def test_convert_with_registry_file(tmp_path):
    reg = tmp_path / "registry.yaml"
    reg.write_text("blocks:\n  manual_trigger:\n    outputs:\n      input: json\n", encoding="utf-8")
    out = tmp_path / "sim.json"
    result = runner.invoke(
        app,
        ["convert", "-i", str(BENCH_DIR / "C04_sticky_and_dangling" / "workflow.json"), "-o", str(out), "--registry", str(reg)],
    )
    assert result.exit_code == 0, result.output
    sim = json.loads(out.read_text(encoding="utf-8"))
    types = sorted(b["type"] for b in sim["state"]["blocks"].values())
    assert types == ["api", "manual_trigger"]


def test_bad_registry_file(tmp_path):
    reg = tmp_path / "registry.yaml"
    reg.write_text("not_blocks: {}\n", encoding="utf-8")
    result = runner.invoke(app, ["resolve", "n8n-nodes-base.slack", "--registry", str(reg)])
    assert result.exit_code != 0


def test_validate_command():
    ok = runner.invoke(app, ["validate", "-i", str(BENCH_DIR / "C01_webhook_only" / "workflow.json")])
    assert ok.exit_code == 0
    assert "valid" in ok.output

    bad = runner.invoke(app, ["validate", "-i", str(BENCH_DIR / "C06_missing_position" / "workflow.json")])
    assert bad.exit_code == 1


def test_resolve_command():
    result = runner.invoke(app, ["resolve", "n8n-nodes-base.googleSheets"])
    assert result.exit_code == 0
    assert "google_sheets" in result.output
    assert "259" in result.output

    result = runner.invoke(app, ["resolve", "n8n-nodes-base.slackTrigger"])
    assert "slack_trigger" in result.output
    assert "trigger:   True" in result.output
    assert "available: False" in result.output


def test_bench_command(tmp_path):
    out = tmp_path / "report.csv"
    result = runner.invoke(app, ["bench", "--glob", str(BENCH_DIR / "*" / "workflow.json"), "--out", str(out)])
    assert result.exit_code == 0, result.output
    lines = out.read_text(encoding="utf-8").strip().splitlines()
    assert lines[0].startswith("id,file,valid,success,blocks,edges,warnings,dropped,error")
    assert len(lines) == 1 + len(list(BENCH_DIR.glob("C*")))


@pytest.fixture
def restore_logger():
    yield
    for h in logging.getLogger(ROOT_LOGGER).handlers:
        h.close()
    init_logger()


def test_convert_writes_log_file(tmp_path, restore_logger):
    logs = tmp_path / "logs"
    out = tmp_path / "sim.json"
    result = runner.invoke(
        app,
        ["convert", "-i", str(BENCH_DIR / "C02_if_two_branches" / "workflow.json"), "-o", str(out), "--log-dir", str(logs)],
    )
    assert result.exit_code == 0, result.output
    text = (logs / "migraflow.log").read_text(encoding="utf-8")
    assert "converted 4 nodes into 4 blocks and 3 edges" in text


def test_bench_writes_log_file(tmp_path, restore_logger):
    logs = tmp_path / "logs"
    result = runner.invoke(
        app,
        ["bench", "--glob", str(BENCH_DIR / "C01*" / "workflow.json"), "--out", str(tmp_path / "r.csv"), "--log-dir", str(logs)],
    )
    assert result.exit_code == 0, result.output
    assert "converted" in (logs / "migraflow.log").read_text(encoding="utf-8")


def test_convert_prints_each_warning_once(tmp_path):
    out = tmp_path / "sim.json"
    result = runner.invoke(app, ["convert", "-i", str(BENCH_DIR / "C04_sticky_and_dangling" / "workflow.json"), "-o", str(out)])
    assert result.exit_code == 0
    assert result.output.count('Source node "Deleted node" not found') == 1
