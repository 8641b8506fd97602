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
"""Boolean constraint variables for nullability inference.

A constraint variable is an identity-bearing boolean unknown. Variables
start out unsolved; the owning ConstraintStore assigns each one the least
truth value consistent with the recorded implications.

Variable kinds:
    - ALWAYS: the fixed true singleton, absorbing element for or_()
    - TypeIsNullable: a `?` may be inserted at a type annotation offset
    - NonNullIntent: usage at a declaration proves null is erroneous
    - CheckExpression: a null check should be synthesized at an expression
    - ConditionalNullable: result of joining the branches of a conditional
    - OrVariable: derived disjunction of two variables

The absence of a variable (None) is the "never nullable" sentinel: it is
statically false and no clause can force it true.

Lattice:
    false ⊑ true, with values moving only upward during solving.
"""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Hashable, Optional

from .errors import NonMonotonicUpdateError, UnsolvedVariableError

if TYPE_CHECKING:
    from ..propagation.store import ConstraintStore


_variable_ids = itertools.count(1)


class ConstraintVariable:
    """A boolean unknown participating in implication clauses.

    Variables are compared by identity. Every variable is created inside
    the store that will solve it, so a solved store can answer for all of
    its variables, including those no clause ever mentions.

    Attributes:
        id: Process-unique synthetic id, used for debug naming
    """

    __slots__ = ("id", "_store", "_value")

    def __init__(self, store: ConstraintStore):
        self.id = next(_variable_ids)
        self._store: Optional[ConstraintStore] = None
        self._value: Optional[bool] = None
        store.adopt(self)

    @property
    def name(self) -> str:
        """Debug name for this variable."""
        return f"v#{self.id}"

    @property
    def store(self) -> Optional[ConstraintStore]:
        """The store that owns this variable."""
        return self._store

    @property
    def is_solved(self) -> bool:
        return self._store is not None and self._store.is_solved

    @property
    def value(self) -> bool:
        """The solved truth value; False unless some clause forced it.

        Raises:
            UnsolvedVariableError: If the owning store has not finished solving
        """
        if not self.is_solved:
            raise UnsolvedVariableError(self)
        return bool(self._value)

    def bind(self, store: ConstraintStore) -> None:
        """Attach this variable to its owning store."""
        self._store = store

    def _truth(self) -> bool:
        # Current value during solving; the store is the only caller.
        return bool(self._value)

    def _assign(self, value: bool) -> None:
        # Only false -> true transitions are legal.
        if self._value and not value:
            raise NonMonotonicUpdateError(self)
        self._value = value

    def __repr__(self) -> str:
        return self.name


class AlwaysVariable(ConstraintVariable):
    """The variable that is fixed true.

    This is a singleton class - use ALWAYS instead of instantiating directly.
    """

    __slots__ = ()

    _instance: Optional[AlwaysVariable] = None

    def __new__(cls) -> AlwaysVariable:
        if cls._instance is None:
            instance = super().__new__(cls)
            instance.id = next(_variable_ids)
            instance._store = None
            instance._value = True
            cls._instance = instance
        return cls._instance

    def __init__(self):
        pass

    @property
    def name(self) -> str:
        return "always"

    @property
    def is_solved(self) -> bool:
        return True

    @property
    def value(self) -> bool:
        return True

    def bind(self, store: ConstraintStore) -> None:
        # Shared by every store.
        pass

    def _truth(self) -> bool:
        return True

    def _assign(self, value: bool) -> None:
        if not value:
            raise NonMonotonicUpdateError(self)


class _OffsetVariable(ConstraintVariable):
    """A variable keyed by a source offset.

    The offset is an opaque identity key; it is used only to map a solved
    value back to a source location and for debug naming.
    """

    __slots__ = ("offset",)

    def __init__(self, offset: Hashable, store: ConstraintStore):
        self.offset = offset
        super().__init__(store)

    @property
    def name(self) -> str:
        return f"{type(self).__name__}({self.offset!r})"


class TypeIsNullable(_OffsetVariable):
    """True if the type annotation ending at ``offset`` needs a `?`."""

    __slots__ = ()


class NonNullIntent(_OffsetVariable):
    """True if the declaration at ``offset`` is demonstrably meant to be non-null."""

    __slots__ = ()


class CheckExpression(_OffsetVariable):
    """True if a null check should be synthesized at the expression at ``offset``."""

    __slots__ = ()


class ConditionalNullable(_OffsetVariable):
    """Nullability of a conditional expression, true if either branch is nullable."""

    __slots__ = ()


class OrVariable(ConstraintVariable):
    """Derived variable whose solved value is ``left or right``."""

    __slots__ = ("left", "right")

    def __init__(
        self,
        left: ConstraintVariable,
        right: ConstraintVariable,
        store: ConstraintStore,
    ):
        self.left = left
        self.right = right
        super().__init__(store)

    @property
    def name(self) -> str:
        return f"or#{self.id}"


# Singleton instance for use throughout the system
ALWAYS: AlwaysVariable = AlwaysVariable()


def or_(
    store: ConstraintStore,
    a: Optional[ConstraintVariable],
    b: Optional[ConstraintVariable],
) -> Optional[ConstraintVariable]:
    """Return a variable whose solved value is ``a or b``.

    Simplifications:
        or_(None, x) = x
        or_(x, None) = x
        or_(ALWAYS, x) = or_(x, ALWAYS) = ALWAYS
        or_(x, x) = x

    Otherwise a fresh OrVariable is created and the implications
    ``a => result`` and ``b => result`` are recorded into ``store``.

    Example:
        >>> or_(store, None, None) is None
        True
        >>> or_(store, ALWAYS, TypeIsNullable(7, store)) is ALWAYS
        True
    """
    if a is None:
        return b
    if b is None:
        return a
    if a is ALWAYS or b is ALWAYS:
        return ALWAYS
    if a is b:
        return a
    result = OrVariable(a, b, store=store)
    store.record([a], result)
    store.record([b], result)
    return result
