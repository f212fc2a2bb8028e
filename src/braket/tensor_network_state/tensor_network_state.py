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

from typing import List, Optional, Sequence

import numpy as np

from braket.ir.jaqcd import Program
from braket.tensor_network_state.contraction import ContractionHandle
from braket.tensor_network_state.errors import InvalidArgumentError
from braket.tensor_network_state.gate_operations import StatePreparation, from_braket_instruction
from braket.tensor_network_state.network_accessor import compute_projected_amplitudes
from braket.tensor_network_state.operation import GateOperation
from braket.tensor_network_state.operator_tensor import OperatorTensor
from braket.tensor_network_state.scratch_memory import ScratchMemory


class TensorNetworkState:
    """
    A pure state of `qubit_count` qubits as the ordered list of operator tensors applied
    to :math:`\\ket{0 \\dots 0}`.

    The contraction handle and scratch memory are shared with other states and are not
    owned by this one.
    """

    def __init__(self, qubit_count: int, handle: ContractionHandle, scratch: ScratchMemory):
        if qubit_count < 1:
            raise InvalidArgumentError(f"A state needs at least one qubit, got {qubit_count}")
        self._qubit_count = qubit_count
        self._handle = handle
        self._scratch = scratch
        self._tensor_ops: List[OperatorTensor] = []

    @classmethod
    def from_operations(
        cls,
        qubit_count: int,
        operations: Sequence[GateOperation],
        handle: ContractionHandle,
        scratch: ScratchMemory,
    ) -> TensorNetworkState:
        state = cls(qubit_count, handle, scratch)
        for operation in operations:
            state.apply_operation(operation)
        return state

    @classmethod
    def from_program(
        cls,
        program: Program,
        qubit_count: int,
        handle: ContractionHandle,
        scratch: ScratchMemory,
    ) -> TensorNetworkState:
        """Builds the state prepared by the instructions of a JAQCD program.

        Result types and basis rotation instructions of the program are ignored.
        """
        operations = [from_braket_instruction(instruction) for instruction in program.instructions]
        return cls.from_operations(qubit_count, operations, handle, scratch)

    @classmethod
    def from_state_vector(
        cls, vector: np.ndarray, handle: ContractionHandle, scratch: ScratchMemory
    ) -> TensorNetworkState:
        """Builds a single-tensor network whose state is `vector`.

        The tensor maps :math:`\\ket{0 \\dots 0}` onto `vector` and is not unitary.
        Its targets run from the highest qubit down to qubit 0, so that the row index
        of its matrix is the dense index of the basis state.
        """
        vector = np.asarray(vector, dtype=np.complex128).reshape(-1)
        qubit_count = int(vector.size).bit_length() - 1
        if vector.size < 2 or vector.size != 1 << qubit_count:
            raise InvalidArgumentError(
                f"State vector size {vector.size} is not a power of two of at least 2"
            )
        state = cls(qubit_count, handle, scratch)
        state.apply_operation(StatePreparation(range(qubit_count - 1, -1, -1), vector))
        return state

    @property
    def qubit_count(self) -> int:
        return self._qubit_count

    @property
    def tensor_ops(self) -> List[OperatorTensor]:
        """List[OperatorTensor]: The applied operator tensors in application order."""
        return self._tensor_ops

    @property
    def handle(self) -> ContractionHandle:
        return self._handle

    @property
    def scratch(self) -> ScratchMemory:
        return self._scratch

    def apply_operation(self, operation: GateOperation) -> None:
        self.apply_tensor_operator(
            operation.targets,
            operation.matrix,
            controls=operation.controls,
            unitary=operation.is_unitary,
        )

    def apply_tensor_operator(
        self,
        targets: Sequence[int],
        matrix: np.ndarray,
        controls: Sequence[int] = (),
        adjoint: bool = False,
        unitary: bool = True,
    ) -> None:
        """Appends an operator tensor to the network.

        Raises:
            InvalidArgumentError: If a qubit index is not below `qubit_count` or the
                matrix does not match the number of targets.
        """
        op = OperatorTensor(
            target_qubit_ids=tuple(targets),
            data=np.asarray(matrix),
            control_qubit_ids=tuple(controls),
            is_adjoint=adjoint,
            is_unitary=unitary,
        )
        invalid = [q for q in op.qubits if q < 0 or q >= self._qubit_count]
        if invalid:
            raise InvalidArgumentError(
                f"Qubits {invalid} out of range for a state of {self._qubit_count} qubits"
            )
        self._tensor_ops.append(op)

    def get_state_vector(
        self,
        projected_modes: Sequence[int] = (),
        projected_values: Sequence[int] = (),
        num_hyper_samples: Optional[int] = None,
    ) -> np.ndarray:
        """Contracts the network into amplitudes.

        Args:
            projected_modes (Sequence[int]): Qubits to fix. Default () contracts the full
                state vector.
            projected_values (Sequence[int]): Values of the fixed qubits.
            num_hyper_samples (Optional[int]): Hyper samples of the path search;
                the accessor default when None.

        Returns:
            np.ndarray: The amplitudes over the qubits that are not fixed, qubit 0
            (or the lowest remaining qubit) as the least significant bit.
        """
        kwargs = {} if num_hyper_samples is None else {"num_hyper_samples": num_hyper_samples}
        amplitudes, _ = compute_projected_amplitudes(
            self._handle,
            self._scratch,
            self._qubit_count,
            self._tensor_ops,
            projected_modes,
            projected_values,
            **kwargs,
        )
        return amplitudes
