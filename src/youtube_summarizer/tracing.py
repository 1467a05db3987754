"""Optional MLflow tracing for the summarize pipeline.

Active only when ``mlflow`` is importable and the config has tracing on
(``MLFLOW_TRACKING_URI`` set, ``GEMINI_TRACING_ENABLED`` not ``false``).
Then ``summarize_video`` and the MCP tool get parent spans, each Gemini
call is autologged beneath them, and ``annotate_span`` tags the pipeline
span with the video ID, model and model family. Inactive, every helper
here is a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .config import ServerConfig

logger = logging.getLogger(__name__)

try:
    import mlflow
    import mlflow.gemini

    _HAS_MLFLOW = True
except ImportError:
    _HAS_MLFLOW = False


def _active_config(config: ServerConfig | None = None) -> ServerConfig | None:
    """Return the config when tracing should run, else None."""
    if not _HAS_MLFLOW:
        return None
    if config is None:
        from .config import get_config

        config = get_config()
    return config if config.tracing_enabled else None


def is_enabled(config: ServerConfig | None = None) -> bool:
    return _active_config(config) is not None


def trace(
    func: Callable | None = None,
    *,
    name: str | None = None,
    span_type: str | None = None,
    attributes: dict[str, Any] | None = None,
) -> Callable:
    """Wrap *func* in an MLflow span; leave it untouched when tracing is off.

    Decided once, at decoration time.
    """
    if not is_enabled():
        return func if func is not None else (lambda f: f)
    return mlflow.trace(func, name=name, span_type=span_type, attributes=attributes)


def annotate_span(**attributes: Any) -> None:
    """Attach *attributes* to the innermost active span, if any."""
    if not is_enabled():
        return
    span = mlflow.get_current_active_span()
    if span is None:
        return
    span.set_attributes({key: value for key, value in attributes.items() if value is not None})


def setup(config: ServerConfig | None = None) -> None:
    """Point MLflow at the tracking server and autolog Gemini calls.

    A tracking server that cannot be reached is logged and skipped; the
    service still starts.
    """
    cfg = _active_config(config)
    if cfg is None:
        return
    try:
        mlflow.set_tracking_uri(cfg.mlflow_tracking_uri)
        mlflow.set_experiment(cfg.mlflow_experiment_name)
        mlflow.gemini.autolog()
    except Exception:
        logger.warning("MLflow tracing setup failed, continuing without tracing", exc_info=True)
        return
    logger.info(
        "Tracing summaries to %s (experiment %s)",
        cfg.mlflow_tracking_uri,
        cfg.mlflow_experiment_name,
    )


def shutdown() -> None:
    """Flush spans still queued for async export."""
    if not is_enabled():
        return
    try:
        mlflow.flush_trace_async_logging()
    except Exception:
        logger.warning("MLflow trace flush failed", exc_info=True)
