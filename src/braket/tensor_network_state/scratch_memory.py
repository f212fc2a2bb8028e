# Copyright Amazon.com Inc. or its affiliates. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License"). You
# may not use this file except in compliance with the License. A copy of
# the License is located at
#
#     http://aws.amazon.com/apache2.0/
#
# or in the "license" file accompanying this file. This file is
# distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF
# ANY KIND, either express or implied. See the License for the specific
# language governing permissions and limitations under the License.

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

import numpy as np

from braket.tensor_network_state.errors import InvalidArgumentError, ScratchInUseError

# Default workspace capacity in bytes
_DEFAULT_SCRATCH_SIZE = 1 << 28


class ScratchMemory:
    """
    Fixed-capacity scratch buffer shared by every contraction of a simulator session.

    The buffer is allocated once and never grown. Only one contraction may use it at a
    time; serializing contractions is the caller's responsibility. `reserve` does not
    wait for the buffer to free up, it raises `ScratchInUseError` so that a broken
    serialization is reported instead of silently sharing the workspace.
    """

    def __init__(self, scratch_size: Optional[int] = None):
        scratch_size = _DEFAULT_SCRATCH_SIZE if scratch_size is None else int(scratch_size)
        if scratch_size < 0:
            raise InvalidArgumentError(f"Scratch size must be non-negative, got {scratch_size}")
        self._buffer = np.empty(scratch_size, dtype=np.uint8)
        self._lock = threading.Lock()

    @property
    def scratch_size(self) -> int:
        """int: Capacity of the buffer in bytes."""
        return self._buffer.size

    @property
    def buffer(self) -> np.ndarray:
        """np.ndarray: The raw byte buffer."""
        return self._buffer

    @property
    def in_use(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def reserve(self) -> Iterator[ScratchMemory]:
        """Holds the buffer for the duration of one contraction.

        Raises:
            ScratchInUseError: If another contraction already holds the buffer.
        """
        if not self._lock.acquire(blocking=False):
            raise ScratchInUseError("Scratch memory is already in use by another contraction")
        try:
            yield self
        finally:
            self._lock.release()
