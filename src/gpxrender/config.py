"""
gpxrender configuration loader

This module centralizes *all* configuration handling for gpxrender.

Design goals:
- Keep the CLI Unix-friendly: flags override everything.
- Provide sensible defaults if no config exists (./gpx-files -> ./output-images,
  800x600 canvas, 4px blue stroke, PNG output, no trip totals).
- Allow per-machine config without committing personal paths:
    ~/.config/gpxrender/config.toml
- Allow project-local config:
    <project_root>/config/config.toml
- Allow environment variable overrides for automation.

Precedence (highest to lowest) for any given value:
1) CLI argument (handled by gpxrender.cli)
2) Environment variables (GPXRENDER_*)
3) User config: ~/.config/gpxrender/config.toml
4) Project config: <project_root>/config/config.toml
5) Hard defaults

This module uses Python's built-in tomllib on Python 3.11+, or `tomli` if installed.

Recognized TOML layout:

    [paths]
    input_dir = "gpx-files"
    output_dir = "output-images"
    log_name = "log.txt"

    [canvas]
    width = 800
    height = 600
    min_range = 1e-6      # degrees; 0 disables widening of flat tracks

    [stroke]
    color = "blue"
    width = 4

    [output]
    format = "png"        # "png" or "svg"
    totals = false        # append time/distance totals to log lines
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from gpxrender.errors import ConfigError
from gpxrender.geometry.projection import CANVAS_HEIGHT, CANVAS_WIDTH, DEFAULT_MIN_RANGE
from gpxrender.render.base import FORMATS

# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML file at `path`.

    Behavior:
    - If the file does not exist, return an empty dict (non-fatal).
    - If the file exists but is invalid TOML, raise ConfigError
      with a clear, user-facing message.

    Rationale:
    - Missing config files are normal and expected.
    - Malformed config files indicate user intent and should fail loudly.
    """
    if not path.is_file():
        return {}

    try:
        try:
            # Python 3.11+ standard library
            import tomllib
            return tomllib.loads(path.read_text(encoding="utf-8")) or {}
        except ModuleNotFoundError:
            import tomli
            return tomli.loads(path.read_text(encoding="utf-8")) or {}
    except Exception as e:
        # Wrap parsing errors with file context for usability
        raise ConfigError(f"Failed to parse TOML config: {path} ({e})") from e


# ---------------------------------------------------------------------------
# Generic coercion helpers
# ---------------------------------------------------------------------------
def _deep_get(d: dict[str, Any], dotted_key: str) -> Any:
    """
    Fetch nested dictionary values using dot-separated keys.

    Example:
        _deep_get(cfg, "canvas.width")

    Returns None if any part of the path is missing.
    """
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _as_path(v: Any) -> Optional[Path]:
    """
    Coerce a config value into a pathlib.Path if possible.

    Returns None if value cannot be interpreted as a path.
    """
    if v is None:
        return None
    if isinstance(v, Path):
        return v.expanduser()
    if isinstance(v, str) and v.strip():
        return Path(v).expanduser()
    return None


def _as_bool(v: Any) -> Optional[bool]:
    """
    Coerce loosely-typed config values into booleans.

    Accepts common truthy / falsy representations so that TOML and
    environment variables behave consistently. Returns None when the value
    is not recognizable.
    """
    if v is None:
        return None
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("true", "yes", "y", "1", "on"):
            return True
        if s in ("false", "no", "n", "0", "off"):
            return False
    return None


def _as_number(v: Any, kind: type, key: str) -> Optional[float]:
    """
    Coerce a config value into int or float.

    Unlike the bool/str helpers this raises: a canvas size of "wide" is a
    user error, not something to silently default.
    """
    if v is None:
        return None
    if isinstance(v, bool):
        raise ConfigError(f"{key}: expected a number, got {v!r}")
    try:
        return kind(v)
    except (TypeError, ValueError):
        raise ConfigError(f"{key}: expected a number, got {v!r}") from None


def _as_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


# ---------------------------------------------------------------------------
# Project discovery
# ---------------------------------------------------------------------------
def find_project_root(start: Path) -> Optional[Path]:
    """
    Walk upward from `start` looking for a project root.

    Heuristic:
    - The presence of a `config/` directory marks the project root
    """
    start = start.resolve()
    for p in [start] + list(start.parents):
        if (p / "config").is_dir():
            return p
    return None


# ---------------------------------------------------------------------------
# Typed config dataclasses
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PathsConfig:
    input_dir: Path = Path("gpx-files")
    output_dir: Path = Path("output-images")
    log_name: str = "log.txt"


@dataclass(frozen=True)
class CanvasConfig:
    width: int = CANVAS_WIDTH
    height: int = CANVAS_HEIGHT
    min_range: float = DEFAULT_MIN_RANGE


@dataclass(frozen=True)
class StrokeConfig:
    color: str = "blue"
    width: float = 4.0


@dataclass(frozen=True)
class OutputConfig:
    format: str = "png"
    totals: bool = False


@dataclass(frozen=True)
class GPXRenderConfig:
    """
    Fully merged gpxrender configuration.

    Attributes:
    - paths: input/output directories and log file name
    - canvas: canvas size and degenerate-geometry policy
    - stroke: polyline style
    - output: image format and whether trip totals are logged
    - source: provenance map showing where each value came from
    """

    paths: PathsConfig
    canvas: CanvasConfig
    stroke: StrokeConfig
    output: OutputConfig
    source: dict[str, str]


# dotted key -> (coercion kind)
_KEYS: dict[str, str] = {
    "paths.input_dir": "path",
    "paths.output_dir": "path",
    "paths.log_name": "str",
    "canvas.width": "int",
    "canvas.height": "int",
    "canvas.min_range": "float",
    "stroke.color": "str",
    "stroke.width": "float",
    "output.format": "str",
    "output.totals": "bool",
}

ENV_MAP = {
    "GPXRENDER_INPUT_DIR": "paths.input_dir",
    "GPXRENDER_OUTPUT_DIR": "paths.output_dir",
    "GPXRENDER_FORMAT": "output.format",
    "GPXRENDER_TOTALS": "output.totals",
}


def _coerce(key: str, v: Any) -> Any:
    kind = _KEYS[key]
    if kind == "path":
        return _as_path(v)
    if kind == "str":
        return _as_str(v)
    if kind == "bool":
        b = _as_bool(v)
        if v is not None and b is None:
            raise ConfigError(f"{key}: expected a boolean, got {v!r}")
        return b
    if kind == "int":
        return _as_number(v, int, key)
    return _as_number(v, float, key)


def validate(values: dict[str, Any]) -> None:
    """
    Reject values the pipeline cannot work with.

    Raises ConfigError naming the offending key.
    """
    if values["canvas.width"] <= 0 or values["canvas.height"] <= 0:
        raise ConfigError(
            f"canvas size must be positive, got {values['canvas.width']}x{values['canvas.height']}"
        )
    if values["canvas.min_range"] < 0:
        raise ConfigError(f"canvas.min_range must not be negative, got {values['canvas.min_range']}")
    if values["stroke.width"] <= 0:
        raise ConfigError(f"stroke.width must be positive, got {values['stroke.width']}")
    fmt = str(values["output.format"]).lower()
    if fmt not in FORMATS:
        raise ConfigError(f"output.format must be one of {', '.join(FORMATS)}, got {fmt!r}")


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
def load_config(
    project_root: Optional[Path] = None,
    project_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> GPXRenderConfig:
    """
    Load, merge, and validate all gpxrender configuration.

    `overrides` maps dotted keys to CLI values; None entries are ignored so
    argparse defaults of None fall through to lower layers.

    This function is the single authoritative entry point
    for configuration access.
    """

    # Locate project and config files
    if project_root is None:
        project_root = find_project_root(Path.cwd())
    if project_config_path is None and project_root is not None:
        project_config_path = project_root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "gpxrender" / "config.toml"

    # Load raw TOML dicts
    project_cfg = _load_toml(project_config_path) if project_config_path else {}
    user_cfg = _load_toml(user_config_path) if user_config_path else {}

    # ------------------------------------------------------------------
    # Hard defaults
    # ------------------------------------------------------------------
    paths, canvas, stroke, output = PathsConfig(), CanvasConfig(), StrokeConfig(), OutputConfig()
    values: dict[str, Any] = {
        "paths.input_dir": paths.input_dir,
        "paths.output_dir": paths.output_dir,
        "paths.log_name": paths.log_name,
        "canvas.width": canvas.width,
        "canvas.height": canvas.height,
        "canvas.min_range": canvas.min_range,
        "stroke.color": stroke.color,
        "stroke.width": stroke.width,
        "output.format": output.format,
        "output.totals": output.totals,
    }

    # Track provenance for debugging
    src = {k: "default" for k in values}

    # ------------------------------------------------------------------
    # Project, then user config (user overrides project)
    # ------------------------------------------------------------------
    for cfg, label, cfg_path in (
        (project_cfg, "repo", project_config_path),
        (user_cfg, "user", user_config_path),
    ):
        for k in _KEYS:
            v = _coerce(k, _deep_get(cfg, k))
            if v is None:
                continue
            values[k] = v
            src[k] = f"{label}:{cfg_path}"

    # Environment variable overrides (highest non-CLI precedence)
    for env, key in ENV_MAP.items():
        raw = os.environ.get(env)
        if not raw:
            continue
        values[key] = _coerce(key, raw)
        src[key] = f"env:{env}"

    # CLI overrides
    for key, v in (overrides or {}).items():
        if key not in _KEYS:
            raise ConfigError(f"Unknown config key: {key}")
        v = _coerce(key, v)
        if v is None:
            continue
        values[key] = v
        src[key] = "cli"

    validate(values)

    return GPXRenderConfig(
        paths=PathsConfig(
            input_dir=values["paths.input_dir"],
            output_dir=values["paths.output_dir"],
            log_name=values["paths.log_name"],
        ),
        canvas=CanvasConfig(
            width=values["canvas.width"],
            height=values["canvas.height"],
            min_range=values["canvas.min_range"],
        ),
        stroke=StrokeConfig(
            color=values["stroke.color"],
            width=values["stroke.width"],
        ),
        output=OutputConfig(
            format=str(values["output.format"]).lower(),
            totals=values["output.totals"],
        ),
        source=src,
    )
