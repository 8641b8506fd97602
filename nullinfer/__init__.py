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
"""nullinfer: nullability inference for null-safety migration.

nullinfer decides, for every type-usage site of a program written against
an implicitly nullable type system, whether the type must become nullable,
where runtime null checks must be synthesized, and which optional named
parameters are effectively required. It does so by building a guarded
Horn-clause system over two lattices ("may be null" and "demonstrates
non-null intent") and solving it once by unit propagation.

Key Components:
    - core: Constraint variables, write-once cells, contract errors
    - propagation: Constraint store, guard lists, worklist solver
    - nullability: Nullability nodes, conditional joins, solution report
    - observability: Solve metrics and exporters

Usage:
    >>> store = ConstraintStore()
    >>> param = NullabilityNode.for_type_annotation(store, 10)
    >>> NullabilityNode.record_assignment(
    ...     NullabilityNode.ALWAYS, param, None, [], store, False)
    >>> store.solve()
    >>> param.is_nullable
    True
"""

# Use lazy imports to allow standalone testing of submodules
# Full imports are done on first access via __getattr__


def __getattr__(name: str):
    """Lazy import of module attributes."""
    # Constraint variables
    if name in (
        "ALWAYS",
        "CheckExpression",
        "ConditionalNullable",
        "ConstraintVariable",
        "NonNullIntent",
        "OrVariable",
        "TypeIsNullable",
        "or_",
    ):
        from .core.variable import (
            ALWAYS,
            CheckExpression,
            ConditionalNullable,
            ConstraintVariable,
            NonNullIntent,
            OrVariable,
            TypeIsNullable,
            or_,
        )

        return locals()[name]

    # Contract errors
    if name in (
        "NullabilityContractError",
        "UnsolvedVariableError",
        "StoreSealedError",
    ):
        from .core.errors import (
            NullabilityContractError,
            StoreSealedError,
            UnsolvedVariableError,
        )

        return locals()[name]

    # Store and guards
    if name in ("Clause", "ConstraintStore", "GuardList", "FixpointResult"):
        from .propagation import Clause, ConstraintStore, FixpointResult, GuardList

        return locals()[name]

    # Nodes
    if name in (
        "ConditionalJoinTable",
        "NodeKind",
        "NullabilityNode",
        "SolutionReport",
    ):
        from .nullability import (
            ConditionalJoinTable,
            NodeKind,
            NullabilityNode,
            SolutionReport,
        )

        return locals()[name]

    if name == "SolverConfig":
        from .config import SolverConfig

        return SolverConfig

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Variables
    "ALWAYS",
    "CheckExpression",
    "ConditionalNullable",
    "ConstraintVariable",
    "NonNullIntent",
    "OrVariable",
    "TypeIsNullable",
    "or_",
    # Errors
    "NullabilityContractError",
    "UnsolvedVariableError",
    "StoreSealedError",
    # Store
    "Clause",
    "ConstraintStore",
    "FixpointResult",
    "GuardList",
    # Nodes
    "ConditionalJoinTable",
    "NodeKind",
    "NullabilityNode",
    "SolutionReport",
    # Config
    "SolverConfig",
]
