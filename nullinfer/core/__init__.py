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
"""Core building blocks: constraint variables, write-once cells, errors."""

from .cell import WriteOnce
from .errors import (
    DuplicateJoinError,
    ForeignVariableError,
    MissingNonNullIntentError,
    MissingNullabilityError,
    NonMonotonicUpdateError,
    NonNullIntentAlreadyTrackedError,
    NullabilityContractError,
    StoreSealedError,
    UnsolvedVariableError,
)
from .variable import (
    ALWAYS,
    AlwaysVariable,
    CheckExpression,
    ConditionalNullable,
    ConstraintVariable,
    NonNullIntent,
    OrVariable,
    TypeIsNullable,
    or_,
)

__all__ = [
    # Variables
    "ALWAYS",
    "AlwaysVariable",
    "CheckExpression",
    "ConditionalNullable",
    "ConstraintVariable",
    "NonNullIntent",
    "OrVariable",
    "TypeIsNullable",
    "or_",
    # Cells
    "WriteOnce",
    # Errors
    "DuplicateJoinError",
    "ForeignVariableError",
    "MissingNonNullIntentError",
    "MissingNullabilityError",
    "NonMonotonicUpdateError",
    "NonNullIntentAlreadyTrackedError",
    "NullabilityContractError",
    "StoreSealedError",
    "UnsolvedVariableError",
]
