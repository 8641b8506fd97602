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
"""Write-once storage slot."""

from __future__ import annotations

from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class WriteOnce(Generic[T]):
    """A slot that can be filled at most once.

    Example:
        >>> cell = WriteOnce()
        >>> cell.set(3)
        >>> cell.get()
        3
        >>> cell.set(4)
        Traceback (most recent call last):
            ...
        ValueError: WriteOnce cell is already set
    """

    __slots__ = ("_value", "_is_set")

    def __init__(self):
        self._value: Optional[T] = None
        self._is_set = False

    @property
    def is_set(self) -> bool:
        return self._is_set

    def get(self) -> Optional[T]:
        """Return the stored value, or None if the cell is empty."""
        return self._value

    def set(self, value: T, error: Optional[Callable[[], Exception]] = None) -> None:
        """Fill the cell.

        Args:
            value: Value to store
            error: Factory for the exception raised on a second write.
                Defaults to ValueError.
        """
        if self._is_set:
            if error is not None:
                raise error()
            raise ValueError("WriteOnce cell is already set")
        self._value = value
        self._is_set = True

    def __repr__(self) -> str:
        if not self._is_set:
            return "WriteOnce(<empty>)"
        return f"WriteOnce({self._value!r})"
