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
"""Pytest configuration for nullinfer tests.

Sets up the import path so tests run from a source checkout without an
editable install, and provides shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root so `import nullinfer` resolves to this checkout
repo_root = Path(__file__).parent.parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from nullinfer.config import SolverConfig  # noqa: E402
from nullinfer.nullability.node import NullabilityNode  # noqa: E402
from nullinfer.propagation.store import ConstraintStore  # noqa: E402


@pytest.fixture
def store():
    """A fresh, unsolved constraint store."""
    return ConstraintStore(SolverConfig())


@pytest.fixture
def make_node(store):
    """Factory for type-annotation nodes owned by the test store."""
    offsets = iter(range(1000, 100000))

    def make(offset=None):
        return NullabilityNode.for_type_annotation(
            store, offset if offset is not None else next(offsets)
        )

    return make
