# Copyright Rand Arete @ Ananke 2025
# Licensed under the Apache License, Version 2.0
"""Metric data structures for solver observability."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class SolveMetrics:
    """Statistics captured from a single solve.

    Attributes:
        clauses: Total clauses recorded
        dead_clauses: Clauses guarded by a never-nullable node
        variables: Variables owned by the store
        firings: Clauses whose antecedent was satisfied
        true_variables: Variables solved true
        conflicts: Impossible clauses that fired
        elapsed_ms: Wall-clock solve time in milliseconds
    """

    clauses: int = 0
    dead_clauses: int = 0
    variables: int = 0
    firings: int = 0
    true_variables: int = 0
    conflicts: int = 0
    elapsed_ms: float = 0.0

    @property
    def live_clauses(self) -> int:
        """Clauses that could fire."""
        return self.clauses - self.dead_clauses

    @property
    def nullable_ratio(self) -> float:
        """Fraction of variables solved true."""
        if self.variables == 0:
            return 0.0
        return self.true_variables / self.variables

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for export."""
        return {
            "clauses": self.clauses,
            "dead_clauses": self.dead_clauses,
            "live_clauses": self.live_clauses,
            "variables": self.variables,
            "firings": self.firings,
            "true_variables": self.true_variables,
            "nullable_ratio": self.nullable_ratio,
            "conflicts": self.conflicts,
            "elapsed_ms": self.elapsed_ms,
        }
