"""Evaluate registered distributions by name without surfacing diagnostics."""

from __future__ import annotations

import logging
from inspect import signature
from typing import Any

from .config import EngineConfig, random_stream, resolve_config
from .core import EvaluationResult
from .diagnostics import surface
from .distributions import get_distribution

logger = logging.getLogger(__name__)


def evaluate(
    distribution: str,
    operation: str,
    *args: Any,
    config: EngineConfig | None = None,
    **kwargs: Any,
) -> EvaluationResult:
    """Run ``operation`` of ``distribution`` and return the per-call result.

    Configuration defaults (the shared random stream, the composition sum
    tolerance) are filled in for operations that accept them unless given
    explicitly. An explicit ``seed`` starts a fresh stream for that call.
    The returned :class:`~extradist.core.EvaluationResult` carries the
    diagnostic outcome; nothing is warned, logged or raised for invalid
    parameters, and an aborted call is reported through its status.
    """
    dist = get_distribution(distribution)
    func = dist.operation(operation)
    cfg = resolve_config(config)
    accepted = signature(func).parameters
    if "random_state" in accepted and kwargs.get("random_state") is None and "seed" not in kwargs:
        kwargs["random_state"] = random_stream(cfg)
    if "tolerance" in accepted:
        kwargs.setdefault("tolerance", cfg.sum_tolerance)
    logger.debug("Evaluating %s.%s", dist.name, operation)
    return func(*args, **kwargs)


def evaluate_values(
    distribution: str,
    operation: str,
    *args: Any,
    config: EngineConfig | None = None,
    **kwargs: Any,
):
    """Like :func:`evaluate`, but surface the diagnostic and return the values."""
    cfg = resolve_config(config)
    return surface(evaluate(distribution, operation, *args, config=cfg, **kwargs), cfg)


__all__ = ["evaluate", "evaluate_values"]
