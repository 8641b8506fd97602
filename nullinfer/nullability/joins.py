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
"""Default join policy for conditional expressions.

``NullabilityNode.for_conditional_expression`` takes its join policy as a
parameter. ConditionalJoinTable is the policy used by the decorated-type
layer: it joins the two branch variables and remembers the result per
conditional expression so edit generation can later find it.
"""

from __future__ import annotations

import logging
from typing import Dict, Hashable, Iterator, Optional, Tuple

from ..core.errors import DuplicateJoinError
from ..core.variable import ALWAYS, ConditionalNullable, ConstraintVariable
from ..propagation.store import ConstraintStore

logger = logging.getLogger(__name__)


class ConditionalJoinTable:
    """Joins branch nullabilities and records them in a side table.

    Keys are conditional expression offsets (or any hashable expression
    identity). The key's repr names the fresh ConditionalNullable variable.

    Example:
        >>> joins = ConditionalJoinTable(store)
        >>> node = NullabilityNode.for_conditional_expression(40, a, b, joins)
        >>> joins[40] is node.variable
        True
    """

    def __init__(self, store: ConstraintStore):
        self._store = store
        self._joins: Dict[Hashable, Optional[ConstraintVariable]] = {}

    def __call__(
        self,
        key: Hashable,
        a: Optional[ConstraintVariable],
        b: Optional[ConstraintVariable],
    ) -> Optional[ConstraintVariable]:
        if key in self._joins:
            raise DuplicateJoinError(key)
        result = self._join(key, a, b)
        self._joins[key] = result
        logger.debug(f"Joined conditional {key!r}: {a!r} | {b!r} -> {result!r}")
        return result

    def _join(
        self,
        key: Hashable,
        a: Optional[ConstraintVariable],
        b: Optional[ConstraintVariable],
    ) -> Optional[ConstraintVariable]:
        if a is None:
            return b
        if b is None:
            return a
        if a is ALWAYS or b is ALWAYS:
            return ALWAYS
        if a is b:
            return a
        result = ConditionalNullable(key, self._store)
        self._store.record([a], result)
        self._store.record([b], result)
        return result

    def __getitem__(self, key: Hashable) -> Optional[ConstraintVariable]:
        return self._joins[key]

    def __contains__(self, key: object) -> bool:
        return key in self._joins

    def __len__(self) -> int:
        return len(self._joins)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._joins)

    def items(self) -> Iterator[Tuple[Hashable, Optional[ConstraintVariable]]]:
        return iter(self._joins.items())
