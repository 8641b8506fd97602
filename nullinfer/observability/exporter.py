# Copyright Rand Arete @ Ananke 2025
# Licensed under the Apache License, Version 2.0
"""Solve metrics exporters."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .metrics import SolveMetrics

logger = logging.getLogger(__name__)


class MetricsExporter(ABC):
    """Base class for metrics exporters."""

    @abstractmethod
    def export(self, metrics: SolveMetrics) -> None:
        """Export metrics from one solve."""
        pass


@dataclass
class LogExporter(MetricsExporter):
    """Export metrics to the logging system.

    Attributes:
        log_level: Logging level for metrics (default: INFO)
        format: Output format ('json' or 'text')
    """

    log_level: int = logging.INFO
    format: str = "json"

    def export(self, metrics: SolveMetrics) -> None:
        """Export metrics to logs."""
        summary = metrics.to_dict()

        if self.format == "json":
            message = json.dumps(summary, indent=2)
        else:
            message = self._format_text(summary)

        logger.log(self.log_level, f"Nullability solve metrics:\n{message}")

    def _format_text(self, summary: Dict[str, Any]) -> str:
        """Format summary as human-readable text."""
        lines = [
            f"Clauses: {summary['clauses']} ({summary['dead_clauses']} dead)",
            f"Variables: {summary['variables']} "
            f"({summary['true_variables']} true, {summary['nullable_ratio']:.2%})",
            f"Firings: {summary['firings']}",
            f"Conflicts: {summary['conflicts']}",
            f"Elapsed: {summary['elapsed_ms']:.3f}ms",
        ]
        return "\n".join(lines)


@dataclass
class CallbackExporter(MetricsExporter):
    """Export metrics via a callback function.

    Useful for integrating with external monitoring systems.

    Attributes:
        metrics_callback: Called with the metrics dict
    """

    metrics_callback: Optional[Callable[[Dict[str, Any]], None]] = None

    def export(self, metrics: SolveMetrics) -> None:
        """Export metrics via callback."""
        if self.metrics_callback:
            try:
                self.metrics_callback(metrics.to_dict())
            except Exception as e:
                logger.warning(f"Metrics callback error: {e}")
