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
"""Constraint store and unit-propagation solver.

The store accumulates guarded implication clauses

    c1 ∧ c2 ∧ ... ∧ cn  =>  consequence

and computes the least truth assignment that satisfies all of them
(forward chaining over a Horn-clause system).

Construction and solving are strictly sequential phases:
1. Record clauses (thread-safe; several walkers may share one store)
2. Solve exactly once
3. Read `.value` off any variable owned by the store

Solving uses a worklist algorithm:
1. Every known variable starts false; ALWAYS is true
2. Clauses with no outstanding conditions fire immediately
3. When a consequence turns true, it is added to the worklist
4. Popping a variable decrements the outstanding-condition count of every
   clause that mentions it; clauses that reach zero fire
5. Repeat until the worklist is empty (fixed point)

Key properties:
- Monotonic: values only move false -> true
- Terminating: each variable enters the worklist at most once
- Order independent: the least solution does not depend on insertion order
"""

from __future__ import annotations

import logging
import threading
import time
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Deque, Dict, Iterable, List, Optional, Tuple

from ..config import SolverConfig
from ..core.errors import ForeignVariableError, StoreSealedError
from ..core.variable import ALWAYS, ConstraintVariable
from ..observability.metrics import SolveMetrics
from .worklist import FixpointResult, VariableWorklist

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Clause:
    """A guarded implication ``conditions => consequence``.

    Attributes:
        conditions: Antecedent conjunction. A None entry is a never-nullable
            guard, which makes the clause dead.
        consequence: Variable forced true when all conditions hold. None is
            the never-nullable sentinel: the clause is recorded but its
            consequence stays permanently false.
    """

    conditions: Tuple[Optional[ConstraintVariable], ...]
    consequence: Optional[ConstraintVariable]

    @property
    def is_dead(self) -> bool:
        """True if some condition can never hold."""
        return any(condition is None for condition in self.conditions)

    @property
    def is_impossible(self) -> bool:
        """True if the consequence can never be made true."""
        return self.consequence is None

    def __repr__(self) -> str:
        lhs = " & ".join(
            "never" if c is None else c.name for c in self.conditions
        ) or "true"
        rhs = "never" if self.consequence is None else self.consequence.name
        return f"Clause({lhs} => {rhs})"


class ConstraintStore:
    """Accumulates implication clauses and solves them once.

    Example:
        >>> store = ConstraintStore()
        >>> a, b = TypeIsNullable(1, store), TypeIsNullable(2, store)
        >>> store.record([a], b)
        >>> store.record([], a)
        >>> store.solve().converged
        True
        >>> b.value
        True
    """

    def __init__(self, config: Optional[SolverConfig] = None):
        """Initialize an empty store.

        Args:
            config: Solver configuration (defaults to SolverConfig())
        """
        self._config = config if config is not None else SolverConfig()
        self._clauses: List[Clause] = []
        # Insertion-ordered set of owned variables
        self._variables: Dict[ConstraintVariable, None] = {}
        self._lock = threading.Lock()
        self._sealed = False
        self._solved = False
        self._result: Optional[FixpointResult] = None

    @property
    def config(self) -> SolverConfig:
        return self._config

    @property
    def clause_count(self) -> int:
        """Number of clauses recorded so far."""
        return len(self._clauses)

    @property
    def clauses(self) -> Tuple[Clause, ...]:
        """Snapshot of the recorded clauses."""
        with self._lock:
            return tuple(self._clauses)

    @property
    def variables(self) -> Tuple[ConstraintVariable, ...]:
        """Variables owned by this store, in first-seen order."""
        with self._lock:
            return tuple(self._variables)

    @property
    def is_sealed(self) -> bool:
        """True once solving has started."""
        return self._sealed

    @property
    def is_solved(self) -> bool:
        """True once solving has finished."""
        return self._solved

    @property
    def result(self) -> Optional[FixpointResult]:
        """Result of the solve, or None before solving."""
        return self._result

    def adopt(self, variable: ConstraintVariable) -> None:
        """Take ownership of a variable.

        Raises:
            StoreSealedError: If solving has already started
            ForeignVariableError: If another store owns the variable
        """
        with self._lock:
            self._adopt(variable)

    def _adopt(self, variable: ConstraintVariable) -> None:
        # Caller holds self._lock.
        if self._sealed:
            raise StoreSealedError(self, "adopt a variable")
        if variable is ALWAYS:
            return
        owner = variable.store
        if owner is self:
            return
        if owner is not None and self._config.strict_ownership:
            raise ForeignVariableError(variable)
        variable.bind(self)
        self._variables[variable] = None

    def record(
        self,
        conditions: Iterable[Optional[ConstraintVariable]],
        consequence: Optional[ConstraintVariable],
    ) -> Clause:
        """Record the clause ``conditions => consequence``.

        ALWAYS conditions are dropped and duplicate conditions collapsed;
        neither changes the clause's meaning.

        Args:
            conditions: Antecedent variables (None marks a never guard)
            consequence: Variable to force true, or None

        Returns:
            The recorded clause

        Raises:
            StoreSealedError: If solving has already started
        """
        with self._lock:
            if self._sealed:
                raise StoreSealedError(self)
            kept: Dict[Optional[ConstraintVariable], None] = {}
            for condition in conditions:
                if condition is ALWAYS:
                    continue
                if condition is not None:
                    self._adopt(condition)
                kept[condition] = None
            if consequence is not None:
                self._adopt(consequence)
            clause = Clause(tuple(kept), consequence)
            self._clauses.append(clause)
            return clause

    def solve(self) -> FixpointResult:
        """Compute the least assignment satisfying every clause.

        Returns:
            FixpointResult describing the solve

        Raises:
            StoreSealedError: If the store was already solved
        """
        with self._lock:
            if self._sealed:
                raise StoreSealedError(self, "solve")
            self._sealed = True

        started = time.perf_counter()
        logger.debug(
            f"Solving {len(self._clauses)} clauses over {len(self._variables)} variables"
        )

        for variable in self._variables:
            variable._assign(False)

        watchers: Dict[ConstraintVariable, List[int]] = defaultdict(list)
        outstanding: List[int] = []
        ready: Deque[int] = deque()
        dead_clauses = 0

        for index, clause in enumerate(self._clauses):
            if clause.is_dead:
                dead_clauses += 1
                outstanding.append(-1)
                continue
            outstanding.append(len(clause.conditions))
            for condition in clause.conditions:
                watchers[condition].append(index)
            if not clause.conditions:
                ready.append(index)

        worklist = VariableWorklist()
        assigned: List[ConstraintVariable] = []
        conflicts: List[Clause] = []
        firings = 0

        while True:
            while ready:
                clause = self._clauses[ready.popleft()]
                firings += 1
                consequence = clause.consequence
                if consequence is None:
                    conflicts.append(clause)
                    logger.log(
                        self._config.conflict_log_level,
                        f"Unsatisfiable consequence: {clause!r} fired; "
                        "destination stays non-nullable",
                    )
                    continue
                if consequence._truth():
                    continue
                consequence._assign(True)
                if self._config.record_assignment_order:
                    assigned.append(consequence)
                worklist.add(consequence)

            variable = worklist.pop()
            if variable is None:
                break
            for index in watchers.get(variable, ()):
                outstanding[index] -= 1
                if outstanding[index] == 0:
                    ready.append(index)

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        metrics = None
        if self._config.collect_metrics:
            metrics = SolveMetrics(
                clauses=len(self._clauses),
                dead_clauses=dead_clauses,
                variables=len(self._variables),
                firings=firings,
                true_variables=sum(1 for v in self._variables if v._truth()),
                conflicts=len(conflicts),
                elapsed_ms=elapsed_ms,
            )

        self._result = FixpointResult(
            converged=True,
            iterations=firings,
            assigned=assigned,
            conflicts=conflicts,
            metrics=metrics,
        )
        self._solved = True
        logger.debug(
            f"Solved in {elapsed_ms:.2f}ms: {firings} firings, "
            f"{len(conflicts)} conflicts"
        )
        return self._result

    def value_of(self, variable: Optional[ConstraintVariable]) -> bool:
        """Solved value of ``variable``; None (never nullable) is False."""
        if variable is None:
            return False
        return variable.value

    def __repr__(self) -> str:
        state = "solved" if self._solved else ("solving" if self._sealed else "open")
        return f"ConstraintStore({len(self._clauses)} clauses, {state})"
