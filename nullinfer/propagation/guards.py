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
"""Guard lists: conditional reachability without a control flow graph.

A guard list is the ordered sequence of nullability nodes that must all
hold for a code path to be reachable. For example, the body of
``if (x == null) { ... }`` is guarded by the node for ``x``: constraints
recorded inside it only fire if ``x`` turns out to be nullable.

The walker pushes a guard when entering a branch and drops it when leaving,
so guard lists are immutable and extended by copy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Tuple, Union

if TYPE_CHECKING:
    from ..core.variable import ConstraintVariable
    from ..nullability.node import NullabilityNode


class GuardList:
    """Immutable ordered sequence of guard nodes.

    Example:
        >>> outer = GuardList.of([x_node])
        >>> inner = outer.extended(y_node)
        >>> len(outer), len(inner)
        (1, 2)
    """

    __slots__ = ("_nodes",)

    def __init__(self, nodes: Iterable[NullabilityNode] = ()):
        self._nodes: Tuple[NullabilityNode, ...] = tuple(nodes)

    @classmethod
    def of(
        cls,
        guards: Union[None, GuardList, Iterable[NullabilityNode]],
    ) -> GuardList:
        """Normalize a guard argument into a GuardList."""
        if guards is None:
            return EMPTY_GUARDS
        if isinstance(guards, GuardList):
            return guards
        return cls(guards)

    @property
    def nodes(self) -> Tuple[NullabilityNode, ...]:
        return self._nodes

    def extended(self, node: NullabilityNode) -> GuardList:
        """Return a new guard list with ``node`` appended."""
        return GuardList(self._nodes + (node,))

    def conditions(self) -> List[Optional[ConstraintVariable]]:
        """Guard variables in order; None marks a never-nullable guard."""
        return [node.variable for node in self._nodes]

    @property
    def is_unreachable(self) -> bool:
        """True if a guard can never hold, so the guarded path is dead."""
        return any(node.variable is None for node in self._nodes)

    def __iter__(self) -> Iterator[NullabilityNode]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __bool__(self) -> bool:
        return bool(self._nodes)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, GuardList):
            return len(self._nodes) == len(other._nodes) and all(
                a is b for a, b in zip(self._nodes, other._nodes)
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(id(node) for node in self._nodes))

    def __repr__(self) -> str:
        return f"GuardList({list(self._nodes)!r})"


EMPTY_GUARDS = GuardList()
