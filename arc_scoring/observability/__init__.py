"""Observability layer - logging and metrics."""

from arc_scoring.observability.logging import setup_logging
from arc_scoring.observability.metrics import MetricsCollector, get_metrics

__all__ = ["setup_logging", "MetricsCollector", "get_metrics"]
