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
"""Contract violations raised by the nullability inference engine.

Every error here signals that a caller broke the construction protocol
(reading before solving, recording after solving, tracking intent twice).
None of them are recoverable at runtime.
"""

from __future__ import annotations

from typing import Any


class NullabilityContractError(Exception):
    """Base class for all engine contract violations."""


class UnsolvedVariableError(NullabilityContractError):
    """A variable's value was read before its store finished solving."""

    def __init__(self, variable: Any):
        self.variable = variable
        super().__init__(f"Value of {variable!r} read before constraint solving")


class StoreSealedError(NullabilityContractError):
    """A clause was recorded (or solve re-run) after solving started."""

    def __init__(self, store: Any, action: str = "record"):
        self.store = store
        self.action = action
        super().__init__(f"Cannot {action}: constraint store is already solved")


class NonNullIntentAlreadyTrackedError(NullabilityContractError):
    """track_non_null_intent was called twice on the same node."""

    def __init__(self, node: Any):
        self.node = node
        super().__init__(f"Non-null intent already tracked for {node!r}")


class MissingNonNullIntentError(NullabilityContractError):
    """Non-null intent was recorded on a node that does not track it."""

    def __init__(self, node: Any):
        self.node = node
        super().__init__(f"{node!r} does not track non-null intent")


class MissingNullabilityError(NullabilityContractError):
    """A node that must be able to hold null has no nullability variable."""

    def __init__(self, node: Any):
        self.node = node
        super().__init__(f"{node!r} is never nullable but was required to accept null")


class ForeignVariableError(NullabilityContractError):
    """A variable owned by one store was recorded into another."""

    def __init__(self, variable: Any):
        self.variable = variable
        super().__init__(f"{variable!r} belongs to a different constraint store")


class NonMonotonicUpdateError(NullabilityContractError):
    """A solved variable was asked to move from true back to false."""

    def __init__(self, variable: Any):
        self.variable = variable
        super().__init__(f"Non-monotonic update of {variable!r} (true -> false)")


class DuplicateJoinError(NullabilityContractError):
    """A conditional expression was joined more than once."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"Conditional expression {key!r} already joined")
