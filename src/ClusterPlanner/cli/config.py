"""Configuration loading utilities for the ClusterPlanner CLI."""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ClusterPlanner.placement.consensus import MAX_MASTER_SUBNETS
from ClusterPlanner.placement.planner import PlannerConfig

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "cluster_planner" / "planner.toml"


def _expand(path: Optional[str | Path], base: Optional[Path]) -> Optional[Path]:
    if path is None:
        return None
    candidate = Path(path).expanduser()
    if not candidate.is_absolute() and base is not None:
        candidate = (base / candidate).resolve()
    return candidate


def _parse_seed(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"seed must be an integer, got {value!r}") from None


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass(frozen=True)
class LoggingSettings:
    """Logging preferences for a CLI invocation."""

    log_format: str = "text"
    verbose: bool = False
    log_path: Optional[Path] = None


@dataclass(frozen=True)
class FileConfig:
    """Raw configuration before environment and flag overrides are applied."""

    zone_directory: Optional[Path] = None
    seed: Optional[int] = None
    consensus_subnet_threshold: int = MAX_MASTER_SUBNETS
    logging: LoggingSettings = field(default_factory=LoggingSettings)


@dataclass(frozen=True)
class ResolvedConfig:
    """Final configuration used during a CLI invocation."""

    planner: PlannerConfig
    zone_directory: Optional[Path]
    logging: LoggingSettings
    config_path: Optional[Path]
    raw_overrides: Dict[str, Any]


def _load_file_config(path: Path) -> FileConfig:
    data: Dict[str, Any]
    suffix = path.suffix.lower()
    content = path.read_bytes()
    if suffix == ".json":
        data = json.loads(content)
    elif suffix in {".toml", ".tml"}:
        data = tomllib.loads(content.decode("utf-8"))
    else:
        raise ValueError(f"Unsupported config format: {path.suffix}")

    base_dir = path.parent
    planner = data.get("planner") or {}
    log_data = data.get("logging") or {}
    settings = LoggingSettings(
        log_format=str(log_data.get("format", "text")).lower(),
        verbose=_parse_bool(log_data.get("verbose", False)),
        log_path=_expand(log_data.get("path"), base_dir),
    )
    return FileConfig(
        zone_directory=_expand(planner.get("zone_directory"), base_dir),
        seed=_parse_seed(planner.get("seed")),
        consensus_subnet_threshold=int(
            planner.get("consensus_subnet_threshold", MAX_MASTER_SUBNETS)
        ),
        logging=settings,
    )


def _apply_env_overrides(config: FileConfig, env: Mapping[str, str]) -> FileConfig:
    updated = config
    if env.get("CP_ZONE_DIRECTORY"):
        updated = replace(updated, zone_directory=_expand(env["CP_ZONE_DIRECTORY"], None))
    if env.get("CP_SEED"):
        updated = replace(updated, seed=_parse_seed(env["CP_SEED"]))
    if env.get("CP_SUBNET_THRESHOLD"):
        updated = replace(updated, consensus_subnet_threshold=int(env["CP_SUBNET_THRESHOLD"]))

    settings = updated.logging
    if env.get("CP_LOG_FORMAT"):
        settings = replace(settings, log_format=env["CP_LOG_FORMAT"].lower())
    if env.get("CP_VERBOSE"):
        settings = replace(settings, verbose=_parse_bool(env["CP_VERBOSE"]))
    if env.get("CP_LOG_PATH"):
        settings = replace(settings, log_path=_expand(env["CP_LOG_PATH"], None))
    if settings != updated.logging:
        updated = replace(updated, logging=settings)
    return updated


def _apply_cli_overrides(config: FileConfig, overrides: Mapping[str, Any]) -> FileConfig:
    updated = config
    if overrides.get("zone_directory"):
        updated = replace(updated, zone_directory=_expand(overrides["zone_directory"], None))
    if overrides.get("seed") is not None:
        updated = replace(updated, seed=_parse_seed(overrides["seed"]))
    if overrides.get("consensus_subnet_threshold") is not None:
        updated = replace(
            updated, consensus_subnet_threshold=int(overrides["consensus_subnet_threshold"])
        )

    settings = updated.logging
    if overrides.get("log_format"):
        settings = replace(settings, log_format=str(overrides["log_format"]).lower())
    if overrides.get("verbose"):
        settings = replace(settings, verbose=True)
    if overrides.get("log_path"):
        settings = replace(settings, log_path=_expand(overrides["log_path"], None))
    return replace(updated, logging=settings)


def load_planner_config(
    config_path: Optional[Path],
    env: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ResolvedConfig:
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    path: Optional[Path] = config_path
    if path is None and env.get("CP_CONFIG"):
        path = Path(env["CP_CONFIG"])
    if path:
        path = Path(path).expanduser()
    elif DEFAULT_CONFIG_PATH.exists():
        path = DEFAULT_CONFIG_PATH

    if path and path.exists():
        config = _load_file_config(path)
    elif path and config_path is not None:
        raise ValueError(f"Config file not found: {path}")
    else:
        config = FileConfig()
        path = None

    config = _apply_env_overrides(config, env)
    config = _apply_cli_overrides(config, overrides)

    if config.logging.log_format not in {"text", "json"}:
        raise ValueError("log_format must be 'text' or 'json'")

    planner = PlannerConfig(
        consensus_subnet_threshold=config.consensus_subnet_threshold,
        seed=config.seed,
    )
    planner.validate()

    return ResolvedConfig(
        planner=planner,
        zone_directory=config.zone_directory,
        logging=config.logging,
        config_path=path,
        raw_overrides=dict(overrides),
    )
