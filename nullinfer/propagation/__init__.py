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
"""Constraint recording and propagation.

Key components:
- ConstraintStore: Records guarded implications and solves them once
- Clause: A single ``conditions => consequence`` implication
- GuardList: Nodes gating whether a clause is live
- VariableWorklist: Schedules variables whose dependents need re-checking
"""

from .guards import EMPTY_GUARDS, GuardList
from .store import Clause, ConstraintStore
from .worklist import FixpointResult, VariableWorklist


__all__ = [
    # Store
    "Clause",
    "ConstraintStore",
    # Guards
    "EMPTY_GUARDS",
    "GuardList",
    # Worklist
    "FixpointResult",
    "VariableWorklist",
]
