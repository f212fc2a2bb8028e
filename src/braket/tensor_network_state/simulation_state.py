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

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, TextIO, Tuple

import numpy as np

from braket.tensor_network_state.operator_tensor import Precision


class StateKind(Enum):
    """Representation backing a simulation state."""

    STATE_VECTOR = "state_vector"
    TENSOR_NETWORK = "tensor_network"
    MPS = "mps"


class StateDataType(Enum):
    """Kind of data a simulation state is constructed from."""

    STATE_VECTOR = "state_vector"
    TENSORS = "tensors"


@dataclass(frozen=True)
class TensorDescriptor:
    """
    Read-only view of one tensor of a simulation state.

    Attributes:
        data: The tensor entries; the state keeps ownership of the buffer.
        extents: Extent of each tensor mode.
        fp_precision: Precision of the entries.
    """

    data: np.ndarray
    extents: Tuple[int, ...]
    fp_precision: Precision

    @property
    def rank(self) -> int:
        return len(self.extents)

    @property
    def size(self) -> int:
        return int(np.prod(self.extents))


class SimulationState:
    """
    The quantum state of a simulation, as produced by running a circuit.

    Representations identify themselves with `kind`; operations that combine two states
    compare kinds rather than concrete classes.
    """

    @property
    def kind(self) -> StateKind:
        """StateKind: The representation backing this state."""
        raise NotImplementedError("kind is not implemented.")

    @property
    def num_qubits(self) -> int:
        """int: The number of qubits of the state."""
        raise NotImplementedError("num_qubits is not implemented.")

    def get_precision(self) -> Precision:
        raise NotImplementedError("get_precision is not implemented.")

    def overlap(self, other: SimulationState) -> complex:
        """The overlap of this state with `other`."""
        raise NotImplementedError("overlap is not implemented.")

    def get_amplitude(self, basis_state: Sequence[int]) -> complex:
        """The amplitude of a computational basis state, last entry most significant."""
        raise NotImplementedError("get_amplitude is not implemented.")

    def get_amplitudes(self, basis_states: Sequence[Sequence[int]]) -> List[complex]:
        return [self.get_amplitude(basis_state) for basis_state in basis_states]

    def get_tensor(self, tensor_idx: int) -> TensorDescriptor:
        raise NotImplementedError("get_tensor is not implemented.")

    def get_tensors(self) -> List[TensorDescriptor]:
        return [self.get_tensor(i) for i in range(self.get_num_tensors())]

    def get_num_tensors(self) -> int:
        raise NotImplementedError("get_num_tensors is not implemented.")

    def create_from_size_and_ptr(
        self, size: int, ptr, data_type: StateDataType = StateDataType.STATE_VECTOR
    ) -> SimulationState:
        """Creates a state of the same representation from the given data."""
        raise NotImplementedError("create_from_size_and_ptr is not implemented.")

    def to_host(self, buffer: np.ndarray, num_elements: int) -> None:
        """Copies the dense amplitudes into `buffer`."""
        raise NotImplementedError("to_host is not implemented.")

    def dump(self, stream: TextIO) -> None:
        raise NotImplementedError("dump is not implemented.")

    def destroy_state(self) -> None:
        raise NotImplementedError("destroy_state is not implemented.")

    def is_device_data(self) -> bool:
        return False

    def is_array_like(self) -> bool:
        return True
