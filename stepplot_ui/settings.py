from __future__ import annotations

from dataclasses import dataclass, field, fields
import logging
from pathlib import Path
import tomllib
from typing import Any, Mapping

from stepplot_core.collisions import LabelLayoutConfig
from stepplot_core.sampler import SamplerConfig

from .style.theme import DEFAULT_THEME, DiagramTheme, validate_theme

LOGGER = logging.getLogger(__name__)

_SECTIONS = ("sampler", "labels", "theme")


@dataclass(frozen=True)
class DiagramSettings:
    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    labels: LabelLayoutConfig = field(default_factory=LabelLayoutConfig)
    theme: DiagramTheme = DEFAULT_THEME


def _table(raw: Mapping[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name, {})
    if not isinstance(value, dict):
        raise ValueError(f"settings `{name}` must be a table")
    return value


def _build(cls: type, values: Mapping[str, Any], section: str) -> Any:
    known = {f.name for f in fields(cls)}
    for key in values:
        if key not in known:
            raise ValueError(f"unknown setting in [{section}]: {key}")
    try:
        return cls(**values)
    except TypeError as exc:
        raise ValueError(f"invalid value in [{section}]: {exc}") from exc


def settings_from_dict(raw: Mapping[str, Any]) -> DiagramSettings:
    for key in raw:
        if key not in _SECTIONS:
            raise ValueError(f"unknown settings table: {key}")
    return DiagramSettings(
        sampler=_build(SamplerConfig, _table(raw, "sampler"), "sampler"),
        labels=_build(LabelLayoutConfig, _table(raw, "labels"), "labels"),
        theme=validate_theme(_table(raw, "theme")),
    )


def load_settings(path: str | Path) -> DiagramSettings:
    """Read ``[sampler]``, ``[labels]`` and ``[theme]`` tables from a TOML file."""

    settings_path = Path(path)
    if not settings_path.exists():
        raise FileNotFoundError(f"diagram settings not found: {settings_path}")
    with settings_path.open("rb") as f:
        raw = tomllib.load(f)
    settings = settings_from_dict(raw)
    LOGGER.debug("loaded diagram settings from %s", settings_path)
    return settings
