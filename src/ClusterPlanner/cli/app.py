"""CLI application entrypoint built with Typer."""

from __future__ import annotations

import json
from pathlib import Path
from random import Random
from typing import Any, Dict, List, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from ClusterPlanner.placement import (
    ClusterPlanner,
    ExistingClusterView,
    NodePlan,
    NodeState,
    PlacementError,
    PlacementPlan,
    StaticZoneDirectory,
    UserIntent,
    load_zone_directory,
)

from .config import ResolvedConfig, load_planner_config
from .logging import configure_logging

CLI_VERSION = "0.1.0"

app = typer.Typer(help="ClusterPlanner command line interface")


def _error(message: object) -> NoReturn:
    typer.echo(f"[error] {message}")
    raise typer.Exit(code=1)


def _resolved(ctx: typer.Context) -> ResolvedConfig:
    resolved = ctx.obj
    if not isinstance(resolved, ResolvedConfig):
        _error("CLI configuration was not initialised")
    return resolved


def _load_directory(resolved: ResolvedConfig, zones: Optional[Path]) -> StaticZoneDirectory:
    path = zones or resolved.zone_directory
    if path is None:
        _error("No zone directory given; pass --zones or set planner.zone_directory")
    try:
        return load_zone_directory(path)
    except FileNotFoundError:
        _error(f"Zone directory not found: {path}")
    except ValueError as exc:
        _error(exc)


def _read_json(path: Path, what: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        _error(f"{what} not found: {path}")
    except ValueError as exc:
        _error(f"Invalid {what.lower()} {path}: {exc}")


def _load_existing(path: Path) -> ExistingClusterView:
    data = _read_json(path, "Existing cluster file")
    if isinstance(data, list):
        data = {"nodes": data}
    try:
        nodes: List[NodePlan] = []
        for entry in data.get("nodes") or []:
            nodes.append(
                NodePlan(
                    tentative_name=str(entry.get("name", entry.get("tentative_name", ""))),
                    index=int(entry["index"]),
                    az_id=str(entry.get("az_id", "")),
                    az_name=str(entry.get("az_name", "")),
                    cloud_name=str(entry.get("cloud_name", "")),
                    region_code=str(entry.get("region_code", "")),
                    subnet_id=str(entry.get("subnet_id", "")),
                    is_consensus_member=bool(entry.get("is_consensus_member", False)),
                    state=NodeState(entry.get("state", NodeState.RUNNING.value)),
                )
            )
        return ExistingClusterView(nodes=tuple(nodes), version=int(data.get("version", 0)))
    except KeyError as exc:
        _error(f"Invalid existing cluster file {path}: node entry is missing {exc}")
    except (AttributeError, TypeError, ValueError) as exc:
        _error(f"Invalid existing cluster file {path}: {exc}")


def _build_intent(intent_path: Optional[Path], overrides: Dict[str, Any]) -> UserIntent:
    """Merge an intent file with the intent flags given on the command line."""

    data: Dict[str, Any] = {}
    if intent_path is not None:
        loaded = _read_json(intent_path, "Intent file")
        if not isinstance(loaded, dict):
            _error(f"Intent file {intent_path} must hold a JSON object")
        data.update(loaded)
    elif overrides.get("is_multi_az") is None:
        overrides["is_multi_az"] = True
    data.update({key: value for key, value in overrides.items() if value is not None})
    try:
        intent = UserIntent.from_mapping(data)
    except (TypeError, ValueError) as exc:
        _error(f"Invalid intent: {exc}")
    if not intent.region_list:
        _error("No regions given; pass --region or --intent")
    return intent


def _render_table(console: Console, result: PlacementPlan) -> None:
    placement = Table(title="Placement")
    for column in ("Cloud", "Region", "AZ", "Subnet", "Replicas"):
        placement.add_column(column)
    for cloud, region, zone in result.tree.leaves():
        placement.add_row(cloud.name, region.code, zone.name, zone.subnet_id, str(zone.replica_count))
    console.print(placement)

    nodes = Table(title="Nodes")
    for column in ("Index", "Name", "Region", "AZ", "Subnet", "Master"):
        nodes.add_column(column)
    for node in result.nodes:
        nodes.add_row(
            str(node.index),
            node.tentative_name,
            node.region_code,
            node.az_name,
            node.subnet_id,
            "yes" if node.is_consensus_member else "",
        )
    console.print(nodes)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help="Path to a TOML or JSON config file."),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="Log format: text or json."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    log_path: Optional[Path] = typer.Option(None, "--log-path", help="Also write logs to this file."),
) -> None:
    """Plan node placement for database clusters."""

    overrides = {"log_format": log_format, "verbose": verbose, "log_path": log_path}
    overrides = {k: v for k, v in overrides.items() if v not in {None, False, ""}}
    try:
        resolved = load_planner_config(config, overrides=overrides)
    except ValueError as exc:
        _error(exc)
    configure_logging(resolved.logging.log_format, resolved.logging.verbose, resolved.logging.log_path)
    ctx.obj = resolved


@app.command("plan")
def plan_command(
    ctx: typer.Context,
    regions: Optional[List[str]] = typer.Option(
        None, "--region", "-r", help="Region identifier; repeat for more regions."
    ),
    intent_file: Optional[Path] = typer.Option(
        None, "--intent", help="JSON user intent (camelCase or snake_case keys); flags override it."
    ),
    zones: Optional[Path] = typer.Option(None, "--zones", help="Zone directory file (YAML or JSON)."),
    multi_az: Optional[bool] = typer.Option(
        None, "--multi-az/--single-az", help="Spread replicas across AZs (default: multi-AZ)."
    ),
    preferred_region: Optional[str] = typer.Option(None, "--preferred-region"),
    replication_factor: Optional[int] = typer.Option(None, "--replication-factor"),
    instance_type: Optional[str] = typer.Option(None, "--instance-type"),
    prefix: str = typer.Option("cluster", "--prefix", help="Node name prefix."),
    customer_id: Optional[str] = typer.Option(None, "--customer-id", help="Emit a full cluster definition."),
    cluster_name: Optional[str] = typer.Option(None, "--cluster-name"),
    server_package: Optional[str] = typer.Option(None, "--server-package"),
    existing: Optional[Path] = typer.Option(None, "--existing", help="JSON file describing existing nodes."),
    node_count: Optional[int] = typer.Option(None, "--node-count"),
    consensus_target: Optional[int] = typer.Option(None, "--masters"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed AZ selection for reproducible plans."),
    output_format: str = typer.Option("json", "--format", help="Output format: json or table."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the JSON result to a file."),
) -> None:
    """Plan the placement tree and new nodes for a cluster."""

    resolved = _resolved(ctx)
    if output_format not in {"json", "table"}:
        _error("--format must be 'json' or 'table'")
    if (customer_id is None) != (cluster_name is None):
        _error("--customer-id and --cluster-name must be given together")

    directory = _load_directory(resolved, zones)
    existing_view = _load_existing(existing) if existing else None
    effective_seed = seed if seed is not None else resolved.planner.seed
    planner = ClusterPlanner(directory, config=resolved.planner, rng=Random(effective_seed))
    intent = _build_intent(
        intent_file,
        {
            "is_multi_az": multi_az,
            "region_list": list(regions) if regions else None,
            "replication_factor": replication_factor,
            "preferred_region": preferred_region,
            "instance_type": instance_type,
        },
    )

    payload: Dict[str, Any]
    try:
        if customer_id is not None and cluster_name is not None:
            definition = planner.build_definition(
                intent,
                customer_id=customer_id,
                cluster_name=cluster_name,
                existing_cluster=existing_view,
                server_package=server_package,
                node_count=node_count,
                consensus_target=consensus_target,
            )
            result = PlacementPlan(tree=definition.placement, nodes=definition.nodes)
            payload = definition.to_dict()
        else:
            result = planner.plan(
                intent,
                existing_view,
                prefix,
                node_count=node_count,
                consensus_target=consensus_target,
            )
            payload = result.to_dict()
    except PlacementError as exc:
        _error(exc)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
    if output_format == "table":
        _render_table(Console(), result)
    else:
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))


@app.command("zones")
def zones_command(
    ctx: typer.Context,
    region: str = typer.Argument(..., help="Region identifier."),
    zones: Optional[Path] = typer.Option(None, "--zones", help="Zone directory file (YAML or JSON)."),
) -> None:
    """List the availability zones of a region."""

    directory = _load_directory(_resolved(ctx), zones)
    try:
        entries = directory.azs_for_region(region)
    except PlacementError as exc:
        _error(exc)
    table = Table(title=f"Zones in {region}")
    for column in ("Id", "Name", "Subnet", "Cloud"):
        table.add_column(column)
    for zone in entries:
        table.add_row(zone.id, zone.name, zone.subnet_id, zone.cloud_name)
    Console().print(table)


@app.command("version")
def version_command() -> None:
    """Print the CLI version."""

    typer.echo(CLI_VERSION)


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
