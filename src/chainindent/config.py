"""Fixer configuration: whitespace settings and marker call names."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from chainindent.errors import ConfigError

CONFIG_FILENAME = "chainindent.toml"

LINE_ENDINGS = {"lf": "\n", "crlf": "\r\n"}

DEFAULT_OPEN_MARKERS = frozenset({"andClause", "orClause"})
DEFAULT_CLOSE_MARKERS = frozenset({"endClause"})


@dataclass(frozen=True, slots=True)
class FixerConfig:
    """Whitespace settings and the two marker name sets, fixed for a run."""

    indent: str = "    "
    line_ending: str = "\n"
    open_markers: frozenset[str] = DEFAULT_OPEN_MARKERS
    close_markers: frozenset[str] = DEFAULT_CLOSE_MARKERS
    split_marker_chains: bool = True

    def __post_init__(self) -> None:
        if not self.indent or self.indent.strip(" \t"):
            raise ConfigError(f"indent must be a non-empty run of spaces or tabs, got {self.indent!r}")
        if self.line_ending not in LINE_ENDINGS.values():
            raise ConfigError(f"line ending must be '\\n' or '\\r\\n', got {self.line_ending!r}")
        # Accept any iterable of names but store frozensets
        object.__setattr__(self, "open_markers", frozenset(self.open_markers))
        object.__setattr__(self, "close_markers", frozenset(self.close_markers))
        both = self.open_markers & self.close_markers
        if both:
            raise ConfigError(f"names cannot be both open and close markers: {', '.join(sorted(both))}")


def parse_line_ending(name: str) -> str:
    """Map 'lf' / 'crlf' to the literal line terminator."""
    try:
        return LINE_ENDINGS[name.lower()]
    except KeyError:
        raise ConfigError(f"unknown line ending {name!r} (expected 'lf' or 'crlf')") from None


def load_config_file(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_FILENAME

    if not path.is_file():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: {exc}") from exc


def config_from_mapping(data: dict[str, Any], base: FixerConfig | None = None) -> FixerConfig:
    """Overlay the settings found in a parsed TOML mapping onto base."""
    base = base if base is not None else FixerConfig()
    values: dict[str, Any] = {}

    indent = data.get("indent")
    if indent is not None:
        if not isinstance(indent, str):
            raise ConfigError("'indent' must be a string")
        values["indent"] = indent

    line_ending = data.get("line_ending")
    if line_ending is not None:
        if not isinstance(line_ending, str):
            raise ConfigError("'line_ending' must be a string")
        values["line_ending"] = parse_line_ending(line_ending)

    split = data.get("split_marker_chains")
    if split is not None:
        if not isinstance(split, bool):
            raise ConfigError("'split_marker_chains' must be a boolean")
        values["split_marker_chains"] = split

    markers = data.get("markers")
    if markers is not None:
        if not isinstance(markers, dict):
            raise ConfigError("'markers' must be a table")
        for key, attr in (("open", "open_markers"), ("close", "close_markers")):
            names = markers.get(key)
            if names is None:
                continue
            if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
                raise ConfigError(f"'markers.{key}' must be a list of strings")
            values[attr] = frozenset(names)

    return FixerConfig(
        indent=values.get("indent", base.indent),
        line_ending=values.get("line_ending", base.line_ending),
        open_markers=values.get("open_markers", base.open_markers),
        close_markers=values.get("close_markers", base.close_markers),
        split_marker_chains=values.get("split_marker_chains", base.split_marker_chains),
    )
