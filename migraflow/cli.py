#!/usr/bin/env python3
# migraflow/cli.py

import logging
import sys
from pathlib import Path
import typer
from typing import Optional

from migraflow.convert.converter import convert_n8n_to_sim
from migraflow.convert.ids import seeded_id_factory
from migraflow.mapping.mappings import is_trigger_type, resolve
from migraflow.registry.blocks import BlockRegistry, RegistryError, default_registry, load_registry
from migraflow.structural.validator import validate_n8n_workflow
from migraflow.utils.graph import build_source_graph, dangling_edges, dropped_connections
from migraflow.utils.io import dump_json, read_json, write_json
from migraflow.utils.logger import init_logger

app = typer.Typer(help="migraflow CLI - Convert n8n workflow exports into Sim workflows")


def _registry(registry_file: Optional[Path]) -> BlockRegistry:
    base = default_registry()
    if registry_file is None:
        return base
    try:
        return load_registry(registry_file, base=base)
    except RegistryError as e:
        raise typer.BadParameter(str(e), param_hint="--registry")


def _setup_logging(verbose: bool, log_dir: Optional[Path]) -> None:
    if verbose or log_dir:
        init_logger(level=logging.DEBUG if verbose else None, log_dir=log_dir)


def _load(input: str):
    try:
        return read_json(input)
    except (OSError, ValueError) as e:
        print(f"[error] {e}")
        raise typer.Exit(code=1)


@app.command()
def convert(
    input: str = typer.Option(..., "--input", "-i", help="Path to n8n workflow JSON ('-' reads stdin)"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write the Sim workflow here instead of stdout"),
    registry_file: Optional[Path] = typer.Option(None, "--registry", exists=True, readable=True, help="Extra Sim block definitions (JSON or YAML)"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Generate reproducible block/edge ids from this seed"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug info"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Also write a rotating log file (migraflow.log) here"),
):
    """
    Validate and convert one n8n workflow. Warnings are printed; any fatal
    problem exits with code 1 and writes nothing.
    """
    _setup_logging(verbose, log_dir)
    registry = _registry(registry_file)
    wf = _load(input)

    validation = validate_n8n_workflow(wf)
    if not validation["valid"]:
        print(f"[error] {validation.get('error', 'Invalid workflow')}")
        raise typer.Exit(code=1)

    id_factory = seeded_id_factory(seed) if seed is not None else None
    result = convert_n8n_to_sim(wf, registry=registry, id_factory=id_factory)
    if not result["success"]:
        print(f"[error] {result.get('error', 'Validation failed')}")
        raise typer.Exit(code=1)

    sim = result["workflow"]
    warnings = result.get("warnings") or []

    if out is None:
        print(dump_json(sim))
    else:
        write_json(out, sim)
        state = sim["state"]
        print(f"[ok] wrote {out} ({len(state['blocks'])} blocks, {len(state['edges'])} edges)")

    if warnings:
        print("Conversion warnings:", file=sys.stderr)
        for w in warnings:
            print(f"- {w}", file=sys.stderr)

    if verbose:
        src = build_source_graph(wf)
        print(f"[debug] source graph: {src.number_of_nodes()} nodes, {src.number_of_edges()} connections", file=sys.stderr)
        print(f"[debug] dropped connections: {dropped_connections(wf, sim)}", file=sys.stderr)
        print(f"[debug] dangling edges: {dangling_edges(sim) or '<none>'}", file=sys.stderr)


@app.command()
def validate(
    input: str = typer.Option(..., "--input", "-i", help="Path to n8n workflow JSON ('-' reads stdin)"),
):
    """Run the structural checks only."""
    validation = validate_n8n_workflow(_load(input))
    if not validation["valid"]:
        print(f"[error] {validation.get('error')}")
        raise typer.Exit(code=1)
    print("[ok] workflow structure is valid")


@app.command("resolve")
def resolve_type(
    node_type: str = typer.Argument(..., help="n8n node type, e.g. n8n-nodes-base.googleSheets"),
    registry_file: Optional[Path] = typer.Option(None, "--registry", exists=True, readable=True, help="Extra Sim block definitions (JSON or YAML)"),
):
    """Show which Sim block an n8n node type maps to."""
    registry = _registry(registry_file)
    sim_type, height, resolved_by = resolve(node_type)
    print(f"sim type:  {sim_type}")
    print(f"height:    {height}")
    print(f"via:       {resolved_by}")
    print(f"available: {registry.exists(sim_type)}")
    print(f"trigger:   {is_trigger_type(node_type)}")


@app.command()
def bench(
    glob: str = typer.Option("bench/conversion/*/workflow.json", "--glob", help="Glob for n8n workflow JSON files"),
    out: Path = typer.Option(Path("experiments/results/conversion.csv"), "--out", help="CSV path to write results"),
    registry_file: Optional[Path] = typer.Option(None, "--registry", exists=True, readable=True, help="Extra Sim block definitions (JSON or YAML)"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Also write a rotating log file (migraflow.log) here"),
):
    """
    Batch convert workflows and export a CSV report.
    """
    import glob as _glob
    import pandas as pd

    _setup_logging(False, log_dir)
    registry = _registry(registry_file)
    rows = []
    for fp_str in sorted(_glob.glob(glob)):
        fp = Path(fp_str)
        try:
            wf = read_json(fp)
        except ValueError as e:
            print(f"[skip] {fp}: {e}")
            continue

        row = {"id": fp.parent.name, "file": str(fp), "valid": True, "success": False,
               "blocks": 0, "edges": 0, "warnings": 0, "dropped": 0, "error": ""}

        validation = validate_n8n_workflow(wf)
        if not validation["valid"]:
            row.update(valid=False, error=validation.get("error", ""))
            rows.append(row)
            continue

        result = convert_n8n_to_sim(wf, registry=registry)
        if result["success"]:
            sim = result["workflow"]
            row.update(
                success=True,
                blocks=len(sim["state"]["blocks"]),
                edges=len(sim["state"]["edges"]),
                warnings=len(result.get("warnings") or []),
                dropped=dropped_connections(wf, sim),
            )
        else:
            row["error"] = result.get("error", "")
        rows.append(row)

    out.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(rows).to_csv(out, index=False)
    print(f"[ok] wrote {out} ({len(rows)} workflows)")


if __name__ == "__main__":
    app()
