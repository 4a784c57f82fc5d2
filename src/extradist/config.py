"""Engine configuration loaded from YAML files or the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Literal, cast

import numpy as np
import yaml

from .primitives import RandomSource

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "EXTRADIST_CONFIG"

WarningPolicy = Literal["warn", "log", "raise", "ignore"]
WARNING_POLICIES: tuple[str, ...] = ("warn", "log", "raise", "ignore")


@dataclass(slots=True)
class EngineConfig:
    """Options shared by every vectorised evaluation."""

    warning_policy: WarningPolicy = "warn"
    sum_tolerance: float = 1e-7
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.warning_policy not in WARNING_POLICIES:
            raise ValueError(
                f"warning_policy must be one of {', '.join(WARNING_POLICIES)}; "
                f"got '{self.warning_policy}'."
            )
        if not self.sum_tolerance >= 0:
            raise ValueError("sum_tolerance must be non-negative.")


def config_from_mapping(data: Mapping[str, Any]) -> EngineConfig:
    """Build an :class:`EngineConfig` from a plain mapping."""
    known = {field.name for field in fields(EngineConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown engine option(s): {', '.join(sorted(unknown))}.")
    kwargs: dict[str, Any] = dict(data)
    if "sum_tolerance" in kwargs:
        kwargs["sum_tolerance"] = float(kwargs["sum_tolerance"])
    if kwargs.get("seed") is not None:
        kwargs["seed"] = int(kwargs["seed"])
    if "warning_policy" in kwargs:
        kwargs["warning_policy"] = cast(WarningPolicy, str(kwargs["warning_policy"]).lower())
    return EngineConfig(**kwargs)


def load_config(path: str | os.PathLike[str]) -> EngineConfig:
    """Load engine options from the ``engine`` mapping of a YAML file."""
    path = Path(path)
    if not path.exists():
        logger.debug("Skipping engine config %s (file not found)", path)
        return EngineConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        logger.warning("Failed to parse engine config %s: %s", path, exc)
        return EngineConfig()

    if not isinstance(data, Mapping):
        logger.warning("Ignoring engine config %s (expected a mapping at top level)", path)
        return EngineConfig()
    section = data.get("engine") or {}
    if not isinstance(section, Mapping):
        raise ValueError(f"The 'engine' section of {path} must be a mapping.")
    return config_from_mapping(section)


_ACTIVE: EngineConfig | None = None
_STREAM: RandomSource | None = None
_STREAM_OWNER: EngineConfig | None = None


def get_config() -> EngineConfig:
    """Return the active configuration, loading ``$EXTRADIST_CONFIG`` on first use."""
    global _ACTIVE
    if _ACTIVE is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        _ACTIVE = load_config(env_path) if env_path else EngineConfig()
    return _ACTIVE


def set_config(config: EngineConfig | None = None, **overrides: Any) -> EngineConfig:
    """Replace the active configuration; ``None`` resets to the environment default."""
    global _ACTIVE, _STREAM, _STREAM_OWNER
    _STREAM = None
    _STREAM_OWNER = None
    if config is None and not overrides:
        _ACTIVE = None
        return get_config()
    base = config if config is not None else get_config()
    _ACTIVE = replace(base, **overrides) if overrides else base
    return _ACTIVE


def resolve_config(config: EngineConfig | None) -> EngineConfig:
    return config if config is not None else get_config()


def random_stream(config: EngineConfig | None = None) -> RandomSource:
    """Return the random stream shared by successive samplers under ``config``.

    The stream is seeded from ``config.seed`` on first use and keeps its
    position between calls until another configuration is used or
    :func:`set_config` is called.
    """
    global _STREAM, _STREAM_OWNER
    cfg = resolve_config(config)
    if _STREAM is None or _STREAM_OWNER is not cfg:
        _STREAM = RandomSource(np.random.default_rng(cfg.seed))
        _STREAM_OWNER = cfg
    return _STREAM


__all__ = [
    "CONFIG_ENV_VAR",
    "EngineConfig",
    "WARNING_POLICIES",
    "config_from_mapping",
    "get_config",
    "load_config",
    "random_stream",
    "resolve_config",
    "set_config",
]
