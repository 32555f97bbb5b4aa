"""Run configuration for tag repair."""

from __future__ import annotations

import codecs
import json
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from tagmend.errors import ConfigurationError
from tagmend.transforms import MISLABEL_CODEPAGE, SOURCE_CODEPAGE, Pipeline, build_pipelines

MIN_THRESHOLD = 0.1
MAX_THRESHOLD = 1.0
DEFAULT_THRESHOLD = 1.0

# Friendly tag name -> ID3v2 frame id.
SUPPORTED_TAGS: dict[str, str] = {
    "Artist": "TPE1",
    "Content type": "TCON",
    "Title": "TIT2",
    "Content group description": "TIT1",
    "Band": "TPE2",
    "Album": "TALB",
}


def validate_threshold(value: float) -> float:
    """Reject thresholds outside [0.1, 1.0]."""
    try:
        threshold = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Threshold must be a number, got {value!r}") from exc
    if not MIN_THRESHOLD <= threshold <= MAX_THRESHOLD:
        raise ConfigurationError(
            f"Threshold {threshold} is outside [{MIN_THRESHOLD}, {MAX_THRESHOLD}]"
        )
    return threshold


def _check_codec(name: str) -> None:
    try:
        codecs.lookup(name)
    except (LookupError, TypeError) as exc:
        raise ConfigurationError(f"Unknown codepage '{name}'") from exc


@dataclass(frozen=True)
class RepairConfig:
    threshold: float = DEFAULT_THRESHOLD
    verbosity: int = 0
    write: bool = False
    tags: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(SUPPORTED_TAGS)), hash=False
    )
    source_codepage: str = SOURCE_CODEPAGE
    mislabel_codepage: str = MISLABEL_CODEPAGE

    def __post_init__(self) -> None:
        object.__setattr__(self, "threshold", validate_threshold(self.threshold))
        _check_codec(self.source_codepage)
        _check_codec(self.mislabel_codepage)
        if isinstance(self.verbosity, bool) or not isinstance(self.verbosity, int):
            raise ConfigurationError(f"verbosity must be an integer, got {self.verbosity!r}")
        if not isinstance(self.write, bool):
            raise ConfigurationError(f"write must be true or false, got {self.write!r}")
        if not isinstance(self.tags, Mapping) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in self.tags.items()
        ):
            raise ConfigurationError(f"tags must map tag names to frame ids, got {self.tags!r}")
        if not self.tags:
            raise ConfigurationError("At least one tag must be configured")
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))

    @property
    def pipelines(self) -> tuple[Pipeline, ...]:
        return build_pipelines(self.source_codepage, self.mislabel_codepage)

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> RepairConfig:
        known = {f.name for f in fields(RepairConfig)}
        unknown = sorted(set(payload) - known)
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}")
        return RepairConfig(**payload)


def load_config(path: Path) -> RepairConfig:
    """Load a config from YAML (.yml/.yaml) or JSON."""
    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}")
    try:
        if path.suffix.lower() in {".yml", ".yaml"}:
            payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        else:
            payload = json.loads(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Could not parse config {path}: {exc}") from exc
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Config {path} must be a mapping")
    return RepairConfig.from_mapping(payload)
