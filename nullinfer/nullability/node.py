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
"""Nullability nodes: one per type-usage site in the program being migrated.

A node wraps the constraint variable deciding whether its type must accept
null, plus an optional "non-null intent" variable for declarations whose
usage proves null would be an error. The source walker creates nodes as it
visits type annotations and expressions, and calls the recording methods
below as it encounters assignments, omitted arguments and dereferences.

Two lattices travel along each assignment edge:
    - nullability flows forward (source -> destination)
    - non-null intent flows backward (destination -> source), but only
      across edges that execute unconditionally
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Callable, ClassVar, Hashable, List, Optional, Sequence, Union

from ..core.cell import WriteOnce
from ..core.errors import (
    MissingNonNullIntentError,
    MissingNullabilityError,
    NonNullIntentAlreadyTrackedError,
)
from ..core.variable import (
    ALWAYS,
    CheckExpression,
    ConstraintVariable,
    NonNullIntent,
    TypeIsNullable,
    or_,
)
from ..propagation.guards import GuardList
from ..propagation.store import ConstraintStore

# (conditional expression key, branch a, branch b) -> joined variable
JoinNullabilities = Callable[
    [Hashable, Optional[ConstraintVariable], Optional[ConstraintVariable]],
    Optional[ConstraintVariable],
]

Guards = Union[None, GuardList, Sequence["NullabilityNode"]]


class NodeKind(Enum):
    """How a node's nullability is determined.

    NEVER: No variable; the type can never be made nullable
    ALWAYS: Fixed nullable by construction
    VARIABLE: Decided by constraint solving
    """

    NEVER = auto()
    ALWAYS = auto()
    VARIABLE = auto()


class NullabilityNode:
    """A single node in the nullability inference graph.

    Attributes:
        variable: Variable set true if this type needs to be nullable. None
            means an external constraint forces the type to be non-nullable.
    """

    __slots__ = ("variable", "_non_null_intent", "_is_possibly_optional")

    # Types known a priori to be nullable (e.g. the type of the `null` literal).
    ALWAYS: ClassVar[NullabilityNode]

    # Types known a priori to be non-nullable (e.g. an integer literal).
    NEVER: ClassVar[NullabilityNode]

    def __init__(self, variable: Optional[ConstraintVariable]):
        self.variable = variable
        self._non_null_intent: WriteOnce[ConstraintVariable] = WriteOnce()
        self._is_possibly_optional = False

    @classmethod
    def for_conditional_expression(
        cls,
        expression_key: Hashable,
        a: NullabilityNode,
        b: NullabilityNode,
        join_nullabilities: JoinNullabilities,
    ) -> NullabilityNode:
        """Node for a conditional expression, nullable if either branch is.

        The variable is produced by the injected ``join_nullabilities``
        policy so the caller can keep its own side table of joins.
        """
        return cls(join_nullabilities(expression_key, a.variable, b.variable))

    @classmethod
    def for_inferred_dynamic_type(cls) -> NullabilityNode:
        """Node for a variable whose type was inferred as `dynamic`."""
        return cls(ALWAYS)

    @classmethod
    def for_substitution(
        cls,
        store: ConstraintStore,
        inner_node: Optional[NullabilityNode],
        outer_node: NullabilityNode,
    ) -> NullabilityNode:
        """Node for a type-parameter substitution.

        ``outer_node`` is the node of the type variable being eliminated and
        ``inner_node`` the node of the type substituted in its place (may be
        None). The result is nullable if either one is.
        """
        inner = inner_node.variable if inner_node is not None else None
        return cls(or_(store, inner, outer_node.variable))

    @classmethod
    def for_type_annotation(
        cls,
        store: ConstraintStore,
        end_offset: int,
        always: bool = False,
    ) -> NullabilityNode:
        """Node for a type annotation written in the user's program.

        Args:
            store: Store that owns the fresh variable
            end_offset: Offset where a `?` would be inserted
            always: Force the annotation nullable (e.g. already has `?`)
        """
        if always:
            return cls(ALWAYS)
        return cls(TypeIsNullable(end_offset, store))

    @property
    def kind(self) -> NodeKind:
        if self.variable is None:
            return NodeKind.NEVER
        if self.variable is ALWAYS:
            return NodeKind.ALWAYS
        return NodeKind.VARIABLE

    @property
    def debug_suffix(self) -> str:
        """Suffix appended to a type name when debugging."""
        return "" if self.variable is None else f"?({self.variable!r})"

    @property
    def is_always_nullable(self) -> bool:
        """True if this node is nullable by construction."""
        return self.variable is ALWAYS

    @property
    def is_never_nullable(self) -> bool:
        return self.variable is None

    @property
    def is_nullable(self) -> bool:
        """After solving, whether this type should be nullable."""
        if self.variable is None:
            return False
        return self.variable.value

    @property
    def is_possibly_optional(self) -> bool:
        """True for named parameters that may be optional or required."""
        return self._is_possibly_optional

    @property
    def is_required(self) -> bool:
        """After solving, whether a possibly-optional parameter must become required."""
        return self._is_possibly_optional and not self.is_nullable

    @property
    def non_null_intent(self) -> Optional[ConstraintVariable]:
        """Variable set true if usage shows this type is meant to be non-null.

        Usage demonstrates intent when a statement or expression would
        unconditionally throw at runtime on a null value.
        """
        return self._non_null_intent.get()

    def record_named_parameter_not_supplied(
        self,
        store: ConstraintStore,
        guards: Guards,
    ) -> None:
        """Record that a call omitted the named parameter for this node.

        Omitting an optional argument passes null, so under the call's guards
        the parameter must be nullable.

        Raises:
            MissingNullabilityError: If the parameter can never be nullable
        """
        if not self._is_possibly_optional:
            return
        if self.variable is None:
            raise MissingNullabilityError(self)
        self._record_constraints(store, guards, (), self.variable)

    def record_non_null_intent(
        self,
        store: ConstraintStore,
        guards: Guards,
    ) -> None:
        """Record that this node's usage demonstrates non-null intent.

        Raises:
            MissingNonNullIntentError: If intent was never tracked
        """
        intent = self.non_null_intent
        if intent is None:
            raise MissingNonNullIntentError(self)
        self._record_constraints(store, guards, (), intent)

    def track_non_null_intent(self, store: ConstraintStore, offset: int) -> None:
        """Track possible non-null intent for the parameter declared at ``offset``.

        Raises:
            NonNullIntentAlreadyTrackedError: If already tracked
        """
        self._non_null_intent.set(
            NonNullIntent(offset, store),
            error=lambda: NonNullIntentAlreadyTrackedError(self),
        )

    def track_possibly_optional(self) -> None:
        """Mark this node as a named parameter that may be optional."""
        self._is_possibly_optional = True

    @staticmethod
    def record_assignment(
        source_node: NullabilityNode,
        destination_node: NullabilityNode,
        check_not_null: Optional[CheckExpression],
        guards: Guards,
        store: ConstraintStore,
        in_conditional_control_flow: bool,
    ) -> None:
        """Connect two nodes for an assignment ``destination := source``.

        Also used for parameter passing and returns.

        Args:
            source_node: Node of the value being assigned
            destination_node: Node of the receiving type
            check_not_null: Expression that may need a null check, or None
            guards: Nodes under which the assignment is reachable
            store: Store receiving the generated clauses
            in_conditional_control_flow: Whether the assignment is reachable
                only conditionally from the function entry; conditional
                edges do not back-propagate non-null intent
        """
        source = source_node.variable
        if source is None:
            return

        destination = destination_node.variable
        destination_intent = destination_node.non_null_intent

        # nullable_src => nullable_dst | check_expr
        NullabilityNode._record_constraints(
            store, guards, (source,), or_(store, destination, check_not_null)
        )

        # nullable_src & nonNullIntent_dst => check_expr
        if check_not_null is not None and destination_intent is not None:
            NullabilityNode._record_constraints(
                store, guards, (source, destination_intent), check_not_null
            )

        source_intent = source_node.non_null_intent
        if in_conditional_control_flow or source_intent is None:
            return
        if destination is None:
            # Flowing into a type that can never be null demonstrates intent.
            NullabilityNode._record_constraints(store, guards, (), source_intent)
        elif destination_intent is not None:
            NullabilityNode._record_constraints(
                store, guards, (destination_intent,), source_intent
            )

    @staticmethod
    def _record_constraints(
        store: ConstraintStore,
        guards: Guards,
        additional_conditions: Sequence[ConstraintVariable],
        consequence: Optional[ConstraintVariable],
    ) -> None:
        conditions: List[Optional[ConstraintVariable]] = GuardList.of(guards).conditions()
        conditions.extend(additional_conditions)
        store.record(conditions, consequence)

    def __repr__(self) -> str:
        if self.variable is None:
            return "NullabilityNode(never)"
        return f"NullabilityNode({self.variable!r})"


NullabilityNode.ALWAYS = NullabilityNode(ALWAYS)
NullabilityNode.NEVER = NullabilityNode(None)
