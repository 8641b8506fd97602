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
"""Worklist for unit propagation.

The worklist holds variables that have just turned true and whose
dependent clauses still need to be re-examined. It supports:
- FIFO ordering
- Deduplication (each variable appears at most once)
- Fixpoint detection (empty worklist = fixed point)
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Deque, List, Optional, Set

if TYPE_CHECKING:
    from ..core.variable import ConstraintVariable
    from ..observability.metrics import SolveMetrics
    from .store import Clause


class VariableWorklist:
    """First-in-first-out worklist of variables.

    Each variable appears at most once.

    Example:
        >>> worklist = VariableWorklist()
        >>> worklist.add(a)
        True
        >>> worklist.add(a)
        False
        >>> worklist.pop() is a
        True
    """

    def __init__(self):
        """Initialize an empty worklist."""
        self._queue: Deque[ConstraintVariable] = deque()
        self._in_worklist: Set[ConstraintVariable] = set()

    def add(self, variable: ConstraintVariable) -> bool:
        """Add a variable to the worklist.

        Args:
            variable: Variable that has just become true

        Returns:
            True if added, False if already present
        """
        if variable in self._in_worklist:
            return False

        self._queue.append(variable)
        self._in_worklist.add(variable)
        return True

    def pop(self) -> Optional[ConstraintVariable]:
        """Remove and return the first variable.

        Returns:
            Variable, or None if empty
        """
        if not self._queue:
            return None
        variable = self._queue.popleft()
        self._in_worklist.discard(variable)
        return variable

    def is_empty(self) -> bool:
        """Check if worklist is empty."""
        return not self._queue

    def __len__(self) -> int:
        """Return number of pending variables."""
        return len(self._queue)

    def __bool__(self) -> bool:
        """True if non-empty."""
        return not self.is_empty()

    def clear(self) -> None:
        """Clear the worklist."""
        self._queue.clear()
        self._in_worklist.clear()


@dataclass
class FixpointResult:
    """Result of solving a constraint store.

    Attributes:
        converged: True if the fixpoint was reached
        iterations: Number of clause firings performed
        assigned: Variables that became true, in assignment order
        conflicts: Impossible clauses whose antecedent was satisfied
        metrics: Solve statistics, when metrics collection is enabled
    """

    converged: bool
    iterations: int
    assigned: List[ConstraintVariable] = field(default_factory=list)
    conflicts: List[Clause] = field(default_factory=list)
    metrics: Optional[SolveMetrics] = None

    @property
    def is_success(self) -> bool:
        """True if converged without conflicts."""
        return self.converged and not self.conflicts
