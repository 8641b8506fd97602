# Copyright Rand Arete @ Ananke 2025
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================
"""Solver configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class SolverConfig:
    """Configuration for a ConstraintStore.

    Attributes:
        collect_metrics: Attach a SolveMetrics snapshot to each solve result.

        record_assignment_order: Keep the order in which variables became
            true. Useful for tracing why a type was made nullable.

        conflict_log_level: Logging level used when an impossible clause
            (consequence is "never nullable") has its antecedent satisfied.

        strict_ownership: Reject variables that already belong to another
            store. Disabling this lets a variable be re-bound silently.

    Example:
        >>> config = SolverConfig(conflict_log_level=logging.DEBUG)
        >>> store = ConstraintStore(config)
    """

    collect_metrics: bool = True
    record_assignment_order: bool = True
    conflict_log_level: int = logging.WARNING
    strict_ownership: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "collect_metrics": self.collect_metrics,
            "record_assignment_order": self.record_assignment_order,
            "conflict_log_level": self.conflict_log_level,
            "strict_ownership": self.strict_ownership,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SolverConfig":
        """Create from dictionary."""
        return cls(
            collect_metrics=d.get("collect_metrics", True),
            record_assignment_order=d.get("record_assignment_order", True),
            conflict_log_level=d.get("conflict_log_level", logging.WARNING),
            strict_ownership=d.get("strict_ownership", True),
        )
