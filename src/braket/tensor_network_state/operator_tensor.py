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

import dataclasses
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from braket.tensor_network_state.errors import InvalidArgumentError
from braket.tensor_network_state.linalg_utils import transpose_operator


class Precision(Enum):
    """Floating point precision of tensor entries."""

    FP32 = "fp32"
    FP64 = "fp64"


@dataclass
class OperatorTensor:
    """
    One applied gate or projector in a tensor network.

    Attributes:
        target_qubit_ids: Qubits the tensor acts on; the first is the most significant.
        control_qubit_ids: Qubits the tensor is controlled on, empty for uncontrolled ops.
        data: Flat complex128 buffer of ``4 ** len(target_qubit_ids)`` entries, the
            row-major ``[out, in]`` matrix of the operator on its targets.
        is_adjoint: Whether the engine applies the operator in adjoint form.
        is_unitary: Whether the operator is unitary.
    """

    target_qubit_ids: tuple[int, ...]
    data: np.ndarray
    control_qubit_ids: tuple[int, ...] = field(default_factory=tuple)
    is_adjoint: bool = False
    is_unitary: bool = True

    def __post_init__(self):
        self.target_qubit_ids = tuple(int(q) for q in self.target_qubit_ids)
        self.control_qubit_ids = tuple(int(q) for q in self.control_qubit_ids)
        if not self.target_qubit_ids:
            raise InvalidArgumentError("An operator tensor needs at least one target qubit")
        if set(self.target_qubit_ids) & set(self.control_qubit_ids):
            raise InvalidArgumentError(
                f"Qubits {self.control_qubit_ids} cannot both control and be targeted by "
                f"the same operator"
            )
        data = np.asarray(self.data)
        expected = 4 ** len(self.target_qubit_ids)
        if data.size != expected:
            raise InvalidArgumentError(
                f"Operator on {len(self.target_qubit_ids)} qubits needs {expected} entries, "
                f"got {data.size}"
            )
        self.data = np.ascontiguousarray(data, dtype=np.complex128).reshape(-1)

    @property
    def num_targets(self) -> int:
        return len(self.target_qubit_ids)

    @property
    def qubits(self) -> tuple[int, ...]:
        """tuple[int, ...]: Control qubits followed by target qubits."""
        return self.control_qubit_ids + self.target_qubit_ids

    @property
    def matrix(self) -> np.ndarray:
        dim = 2**self.num_targets
        return self.data.reshape(dim, dim)

    def transposed(self) -> OperatorTensor:
        """A copy of this tensor with its data transposed; this tensor's buffer is left as is."""
        return dataclasses.replace(self, data=transpose_operator(self.data))

    def adjoint(self) -> OperatorTensor:
        """A copy of this tensor with `is_adjoint` flipped, sharing the same buffer."""
        return dataclasses.replace(self, is_adjoint=not self.is_adjoint)
