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
"""Tests for the constraint store, the worklist and solver configuration."""

import logging
import threading

import pytest

from nullinfer.config import SolverConfig
from nullinfer.core.errors import ForeignVariableError, StoreSealedError
from nullinfer.core.variable import ALWAYS, CheckExpression, TypeIsNullable
from nullinfer.propagation.store import Clause, ConstraintStore
from nullinfer.propagation.worklist import FixpointResult, VariableWorklist


# =============================================================================
# Recording
# =============================================================================


class TestRecord:
    """Tests for ConstraintStore.record()."""

    def test_record_appends_clause(self, store):
        a = TypeIsNullable(1, store)
        b = TypeIsNullable(2, store)
        clause = store.record([a], b)

        assert store.clause_count == 1
        assert store.clauses == (clause,)
        assert clause == Clause((a,), b)

    def test_variables_owned_from_creation(self, store):
        """Variables belong to their store before any clause mentions them."""
        a = TypeIsNullable(1, store)
        b = TypeIsNullable(2, store)
        assert store.variables == (a, b)
        store.record([a], b)

        assert a.store is store
        assert b.store is store
        assert store.variables == (a, b)

    def test_always_conditions_dropped(self, store):
        b = TypeIsNullable(2, store)
        clause = store.record([ALWAYS, ALWAYS], b)
        assert clause.conditions == ()

    def test_duplicate_conditions_collapsed(self, store):
        a = TypeIsNullable(1, store)
        b = TypeIsNullable(2, store)
        clause = store.record([a, a, b, a], b)
        assert clause.conditions == (a, b)

    def test_never_condition_kept_as_dead(self, store):
        """A None condition makes the clause dead but it is still recorded."""
        b = TypeIsNullable(2, store)
        clause = store.record([None], b)
        assert clause.is_dead
        assert store.clause_count == 1

    def test_impossible_consequence_accepted(self, store):
        """Recording a None consequence is legal."""
        a = TypeIsNullable(1, store)
        clause = store.record([a], None)
        assert clause.is_impossible
        assert store.clause_count == 1

    def test_record_after_solve_raises(self, store):
        a = TypeIsNullable(1, store)
        store.solve()
        with pytest.raises(StoreSealedError) as info:
            store.record([], a)
        assert info.value.store is store

    def test_foreign_variable_rejected(self, store):
        other = ConstraintStore()
        a = TypeIsNullable(1, store=other)
        with pytest.raises(ForeignVariableError) as info:
            store.record([a], TypeIsNullable(2, store))
        assert info.value.variable is a

    def test_foreign_variable_allowed_without_strict_ownership(self):
        store = ConstraintStore(SolverConfig(strict_ownership=False))
        other = ConstraintStore()
        a = TypeIsNullable(1, store=other)
        store.record([], a)
        assert a.store is store

    def test_clause_repr(self, store):
        a = TypeIsNullable(1, store)
        clause = Clause((a, None), None)
        assert repr(clause) == "Clause(TypeIsNullable(1, store) & never => never)"
        assert repr(Clause((), a)) == "Clause(true => TypeIsNullable(1, store))"


# =============================================================================
# Solving
# =============================================================================


class TestSolve:
    """Tests for ConstraintStore.solve()."""

    def test_empty_store(self, store):
        result = store.solve()
        assert result.converged
        assert result.iterations == 0
        assert result.is_success
        assert store.is_solved

    def test_fact_fires(self, store):
        a = TypeIsNullable(1, store)
        store.record([], a)
        store.solve()
        assert a.value

    def test_chain_propagates(self, store):
        a, b, c = (TypeIsNullable(i, store) for i in (1, 2, 3))
        store.record([b], c)
        store.record([a], b)
        store.record([], a)
        result = store.solve()

        assert a.value and b.value and c.value
        assert result.assigned == [a, b, c]

    def test_conjunction_requires_all_conditions(self, store):
        a, b, c = (TypeIsNullable(i, store) for i in (1, 2, 3))
        store.record([a, b], c)
        store.record([], a)
        store.solve()

        assert a.value
        assert not b.value
        assert not c.value

    def test_conjunction_fires_when_complete(self, store):
        a, b, c = (TypeIsNullable(i, store) for i in (1, 2, 3))
        store.record([a, b], c)
        store.record([], b)
        store.record([], a)
        store.solve()
        assert c.value

    def test_always_condition_is_satisfied(self, store):
        c = TypeIsNullable(3, store)
        store.record([ALWAYS], c)
        store.solve()
        assert c.value

    def test_cycle_terminates(self, store):
        a, b = TypeIsNullable(1, store), TypeIsNullable(2, store)
        store.record([a], b)
        store.record([b], a)
        result = store.solve()
        assert result.converged
        assert not a.value and not b.value

    def test_dead_clause_never_fires(self, store):
        c = TypeIsNullable(3, store)
        store.record([None], c)
        result = store.solve()
        assert not c.value
        assert result.metrics.dead_clauses == 1

    def test_impossible_clause_conflict(self, store, caplog):
        """An impossible consequence that fires is reported, not raised."""
        a = TypeIsNullable(1, store)
        store.record([], a)
        clause = store.record([a], None)

        with caplog.at_level(logging.WARNING, logger="nullinfer.propagation.store"):
            result = store.solve()

        assert result.conflicts == [clause]
        assert not result.is_success
        assert "Unsatisfiable consequence" in caplog.text

    def test_impossible_clause_silent_when_not_triggered(self, store):
        a = TypeIsNullable(1, store)
        store.record([a], None)
        result = store.solve()
        assert result.conflicts == []
        assert not a.value

    def test_consequence_always_is_noop(self, store):
        a = TypeIsNullable(1, store)
        store.record([a], ALWAYS)
        store.record([], a)
        result = store.solve()
        assert result.assigned == [a]

    def test_solve_twice_raises(self, store):
        store.solve()
        with pytest.raises(StoreSealedError) as info:
            store.solve()
        assert info.value.action == "solve"

    def test_result_retained(self, store):
        result = store.solve()
        assert store.result is result

    def test_value_of(self, store):
        a = TypeIsNullable(1, store)
        store.record([], a)
        store.solve()
        assert store.value_of(a) is True
        assert store.value_of(None) is False
        assert store.value_of(ALWAYS) is True

    def test_metrics(self, store):
        a, b = TypeIsNullable(1, store), TypeIsNullable(2, store)
        c = CheckExpression(3, store)
        store.record([], a)
        store.record([a], b)
        store.record([None], c)
        result = store.solve()

        metrics = result.metrics
        assert metrics.clauses == 3
        assert metrics.dead_clauses == 1
        assert metrics.live_clauses == 2
        assert metrics.variables == 3
        assert metrics.firings == 2
        assert metrics.true_variables == 2
        assert metrics.conflicts == 0
        assert metrics.elapsed_ms >= 0.0

    def test_metrics_disabled(self):
        store = ConstraintStore(SolverConfig(collect_metrics=False))
        assert store.solve().metrics is None

    def test_assignment_order_disabled(self):
        store = ConstraintStore(SolverConfig(record_assignment_order=False))
        a = TypeIsNullable(1, store)
        store.record([], a)
        result = store.solve()
        assert result.assigned == []
        assert a.value

    def test_repr_tracks_state(self, store):
        assert "open" in repr(store)
        store.solve()
        assert "solved" in repr(store)


# =============================================================================
# Concurrency
# =============================================================================


class TestConcurrentRecording:
    """Several walkers may record into one store before a single solve."""

    def test_threads_record_into_shared_store(self, store):
        units = 8
        per_unit = 200
        roots = [TypeIsNullable(unit * per_unit, store) for unit in range(units)]
        chains = {}

        def walk(unit):
            previous = roots[unit]
            chain = []
            for step in range(1, per_unit):
                current = TypeIsNullable(unit * per_unit + step, store)
                store.record([previous], current)
                chain.append(current)
                previous = current
            chains[unit] = chain

        threads = [threading.Thread(target=walk, args=(unit,)) for unit in range(units)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        store.record([], roots[0])
        store.solve()

        assert store.clause_count == units * (per_unit - 1) + 1
        assert all(v.value for v in chains[0])
        for unit in range(1, units):
            assert not any(v.value for v in chains[unit])


# =============================================================================
# Worklist
# =============================================================================


class TestVariableWorklist:
    """Tests for VariableWorklist."""

    def test_fifo_ordering(self, store):
        worklist = VariableWorklist()
        a, b, c = (TypeIsNullable(i, store) for i in (1, 2, 3))
        worklist.add(a)
        worklist.add(b)
        worklist.add(c)

        assert worklist.pop() is a
        assert worklist.pop() is b
        assert worklist.pop() is c

    def test_empty(self):
        worklist = VariableWorklist()
        assert worklist.is_empty()
        assert not worklist
        assert worklist.pop() is None

    def test_deduplication(self, store):
        worklist = VariableWorklist()
        a = TypeIsNullable(1, store)
        assert worklist.add(a)
        assert not worklist.add(a)
        assert len(worklist) == 1

    def test_readd_after_pop(self, store):
        worklist = VariableWorklist()
        a = TypeIsNullable(1, store)
        worklist.add(a)
        worklist.pop()
        assert worklist.add(a)

    def test_clear(self, store):
        worklist = VariableWorklist()
        worklist.add(TypeIsNullable(1, store))
        worklist.clear()
        assert worklist.is_empty()


class TestFixpointResult:
    """Tests for FixpointResult."""

    def test_success_requires_no_conflicts(self):
        assert FixpointResult(converged=True, iterations=1).is_success
        clause = Clause((), None)
        assert not FixpointResult(converged=True, iterations=1, conflicts=[clause]).is_success
        assert not FixpointResult(converged=False, iterations=1).is_success


# =============================================================================
# Configuration
# =============================================================================


class TestSolverConfig:
    """Tests for SolverConfig."""

    def test_defaults(self):
        config = SolverConfig()
        assert config.collect_metrics
        assert config.record_assignment_order
        assert config.conflict_log_level == logging.WARNING
        assert config.strict_ownership

    def test_dict_round_trip(self):
        config = SolverConfig(collect_metrics=False, conflict_log_level=logging.DEBUG)
        assert SolverConfig.from_dict(config.to_dict()) == config

    def test_from_partial_dict(self):
        config = SolverConfig.from_dict({"strict_ownership": False})
        assert not config.strict_ownership
        assert config.collect_metrics

    def test_frozen(self):
        config = SolverConfig()
        with pytest.raises(Exception):
            config.collect_metrics = False

    def test_store_uses_default_config(self):
        assert ConstraintStore().config == SolverConfig()
