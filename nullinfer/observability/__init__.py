# Copyright Rand Arete @ Ananke 2025
# Licensed under the Apache License, Version 2.0
"""Observability for the nullability solver.

Key Components:
- SolveMetrics: Clause, variable and timing statistics from one solve
- MetricsExporter: Export to logs or a user callback

Example:
    >>> result = store.solve()
    >>> LogExporter(format="text").export(result.metrics)
"""

from .metrics import SolveMetrics
from .exporter import CallbackExporter, LogExporter, MetricsExporter

__all__ = [
    "SolveMetrics",
    "MetricsExporter",
    "LogExporter",
    "CallbackExporter",
]
