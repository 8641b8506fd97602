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
"""Summary of solved values for the edit-generation layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..core.variable import CheckExpression, TypeIsNullable
from .node import NullabilityNode


@dataclass
class SolutionReport:
    """What the solved graph says should change in the source.

    Attributes:
        nullable_offsets: Offsets where a `?` should be inserted
        check_offsets: Offsets where a null check should be synthesized
        required_parameters: Possibly-optional named parameters that were
            solved non-nullable and should become required
    """

    nullable_offsets: List[int] = field(default_factory=list)
    check_offsets: List[int] = field(default_factory=list)
    required_parameters: List[NullabilityNode] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        nodes: Iterable[NullabilityNode],
        checks: Iterable[CheckExpression] = (),
    ) -> SolutionReport:
        """Collect solved values from nodes and check-insertion variables.

        Raises:
            UnsolvedVariableError: If the owning store has not been solved
        """
        nullable = set()
        required: List[NullabilityNode] = []
        for node in nodes:
            variable = node.variable
            if isinstance(variable, TypeIsNullable) and variable.value:
                nullable.add(variable.offset)
            if node.is_required:
                required.append(node)
        check_offsets = {check.offset for check in checks if check.value}
        return cls(
            nullable_offsets=sorted(nullable),
            check_offsets=sorted(check_offsets),
            required_parameters=required,
        )

    @property
    def is_empty(self) -> bool:
        """True if no source changes are needed."""
        return not (self.nullable_offsets or self.check_offsets or self.required_parameters)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "nullable_offsets": list(self.nullable_offsets),
            "check_offsets": list(self.check_offsets),
            "required_parameter_offsets": [
                _offset_of(node) for node in self.required_parameters
            ],
        }


def _offset_of(node: NullabilityNode) -> Optional[int]:
    return getattr(node.variable, "offset", None)
