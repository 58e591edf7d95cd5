"""TOML config loading for gamma.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "gamma.toml"


@dataclass
class ParserConfig:
    resync: bool = False


@dataclass
class DiagnosticsConfig:
    color: bool = True
    warnings: bool = True


@dataclass
class GammaConfig:
    parser: ParserConfig = field(default_factory=ParserConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find gamma.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> GammaConfig:
    """Parse a gamma.toml file into a GammaConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = GammaConfig()

    if "parser" in data:
        prs = data["parser"]
        config.parser = ParserConfig(
            resync=prs.get("resync", False),
        )

    if "diagnostics" in data:
        diag = data["diagnostics"]
        config.diagnostics = DiagnosticsConfig(
            color=diag.get("color", True),
            warnings=diag.get("warnings", True),
        )

    return config


def discover_config(start_path: Path | None = None) -> GammaConfig:
    """Load the nearest gamma.toml, or defaults when there is none."""
    try:
        return load_config(find_config(start_path))
    except FileNotFoundError:
        return GammaConfig()
