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

import sys
from logging import Logger, getLogger
from typing import List, Optional, Sequence, TextIO

import numpy as np

from braket.tensor_network_state.contraction import ContractionHandle
from braket.tensor_network_state.errors import (
    InvalidArgumentError,
    OutOfRangeError,
    SizeMismatchError,
    StateReleasedError,
    UnsupportedConstructionModeError,
    UnsupportedStateTypeError,
)
from braket.tensor_network_state.linalg_utils import basis_state_index
from braket.tensor_network_state.network_accessor import (
    compute_projected_amplitudes,
    conjugate_network,
)
from braket.tensor_network_state.operator_tensor import Precision
from braket.tensor_network_state.scratch_memory import ScratchMemory
from braket.tensor_network_state.simulation_state import (
    SimulationState,
    StateDataType,
    StateKind,
    TensorDescriptor,
)
from braket.tensor_network_state.tensor_network_state import TensorNetworkState

# Largest state whose amplitudes are contracted into a dense vector and cached
_MAX_QUBITS_FOR_DENSE_CONTRACTION = 30


class TensorNetSimulationState(SimulationState):
    """
    Simulation state backed by a tensor network.

    The state owns its `TensorNetworkState`, which is never modified after
    construction. The scratch memory, contraction handle and random generator are
    shared with the simulator and with every state created from this one.

    Amplitudes of small states are answered from a dense vector contracted on first
    use and kept for the lifetime of the state. States with more than
    `max_qubits_for_dense_contraction` qubits are never contracted densely by
    `get_amplitude`; each amplitude is a separate projected contraction.

    Contractions of states sharing the same scratch memory must not run concurrently.
    The state does not wait for the scratch memory; a contraction started while
    another one holds it raises `ScratchInUseError`.
    """

    def __init__(
        self,
        state: TensorNetworkState,
        scratch: ScratchMemory,
        handle: ContractionHandle,
        random_engine: np.random.Generator,
        max_qubits_for_dense_contraction: Optional[int] = None,
        logger: Optional[Logger] = None,
    ):
        """
        Args:
            state (TensorNetworkState): The network; ownership is transferred to this state.
            scratch (ScratchMemory): Shared workspace for contractions.
            handle (ContractionHandle): Shared contraction engine session.
            random_engine (np.random.Generator): Shared random generator, passed on to
                states created from this one.
            max_qubits_for_dense_contraction (Optional[int]): Largest qubit count for which
                amplitudes are read from a cached dense vector. Defaults to 30.
            logger (Optional[Logger]): Logger to use. Defaults to the module logger.
        """
        self._state = state
        self._scratch = scratch
        self._handle = handle
        self._random_engine = random_engine
        self._max_qubits_for_dense_contraction = (
            _MAX_QUBITS_FOR_DENSE_CONTRACTION
            if max_qubits_for_dense_contraction is None
            else max_qubits_for_dense_contraction
        )
        self.logger = logger or getLogger(__name__)
        self._contracted_state_vec: Optional[np.ndarray] = None

    @property
    def kind(self) -> StateKind:
        return StateKind.TENSOR_NETWORK

    @property
    def tensor_network_state(self) -> TensorNetworkState:
        """TensorNetworkState: The underlying network.

        Raises:
            StateReleasedError: If the network was released by `destroy_state`.
        """
        if self._state is None:
            raise StateReleasedError("Tensor network state has already been destroyed")
        return self._state

    @property
    def num_qubits(self) -> int:
        return self.tensor_network_state.qubit_count

    @property
    def random_engine(self) -> np.random.Generator:
        return self._random_engine

    @property
    def max_qubits_for_dense_contraction(self) -> int:
        return self._max_qubits_for_dense_contraction

    def get_precision(self) -> Precision:
        return Precision.FP64

    def is_array_like(self) -> bool:
        return False

    def overlap(self, other: SimulationState) -> complex:
        """Magnitude of the inner product :math:`\\braket{other|self}`.

        The network of `other` is conjugated and appended after this one, and the
        combined network is contracted against :math:`\\ket{0 \\dots 0}`. Neither
        state is modified.

        Args:
            other (SimulationState): A tensor network state.

        Returns:
            complex: The absolute value of the inner product, with zero imaginary part.

        Raises:
            UnsupportedStateTypeError: If `other` is not backed by a tensor network.
            InsufficientWorkspaceError: If the contraction does not fit in the scratch memory.
        """
        if other.kind is not StateKind.TENSOR_NETWORK:
            raise UnsupportedStateTypeError(
                f"Computing the overlap of a tensor network state with a {other.kind.value} "
                f"state is not supported"
            )
        ket = self.tensor_network_state
        bra = other.tensor_network_state
        qubit_count = max(ket.qubit_count, bra.qubit_count)
        tensor_ops = ket.tensor_ops + conjugate_network(bra.tensor_ops)
        amplitudes, norm = compute_projected_amplitudes(
            self._handle,
            self._scratch,
            qubit_count,
            tensor_ops,
            range(qubit_count),
            [0] * qubit_count,
            return_norm=True,
            logger=self.logger,
        )
        self.logger.debug(f"Overlap network of {len(tensor_ops)} tensors has norm {norm}")
        return complex(abs(amplitudes[0]))

    def get_amplitude(self, basis_state: Sequence[int]) -> complex:
        """Amplitude of a computational basis state.

        Args:
            basis_state (Sequence[int]): Value of each qubit, qubit 0 first. The last
                entry is the most significant bit of the dense index.

        Returns:
            complex: The amplitude.

        Raises:
            InvalidArgumentError: If the basis state is empty, has the wrong length or has
                entries other than 0 and 1.
        """
        qubit_count = self.num_qubits
        basis_state = list(basis_state)
        if len(basis_state) != qubit_count:
            raise InvalidArgumentError(
                f"Invalid number of bits in the basis state: expected {qubit_count}, "
                f"provided {len(basis_state)}"
            )
        if any(bit not in (0, 1) for bit in basis_state):
            raise InvalidArgumentError(
                f"Invalid basis state {basis_state}: only qubit states 0 and 1 are supported"
            )
        if not basis_state:
            raise InvalidArgumentError("Empty basis state")
        bits = [int(bit) for bit in basis_state]

        if qubit_count <= self._max_qubits_for_dense_contraction:
            return complex(self._dense_state_vector()[basis_state_index(bits)])

        amplitudes = self.tensor_network_state.get_state_vector(range(qubit_count), bits)
        return complex(amplitudes[0])

    def _dense_state_vector(self) -> np.ndarray:
        if self._contracted_state_vec is None:
            state_vector = self.tensor_network_state.get_state_vector()
            state_vector.flags.writeable = False
            self._contracted_state_vec = state_vector
            self.logger.debug(f"Cached dense state vector of {state_vector.size} amplitudes")
        return self._contracted_state_vec

    def get_tensor(self, tensor_idx: int) -> TensorDescriptor:
        """Read-only view of the operator tensor at `tensor_idx`.

        Raises:
            OutOfRangeError: If `tensor_idx` is not in ``[0, get_num_tensors())``.
        """
        tensor_ops = self.tensor_network_state.tensor_ops
        if tensor_idx < 0 or tensor_idx >= len(tensor_ops):
            raise OutOfRangeError(
                f"Invalid tensor index {tensor_idx} for a network of {len(tensor_ops)} tensors"
            )
        op = tensor_ops[tensor_idx]
        data = op.data.view()
        data.flags.writeable = False
        return TensorDescriptor(
            data=data,
            extents=(2,) * (2 * op.num_targets),
            fp_precision=self.get_precision(),
        )

    def get_tensors(self) -> List[TensorDescriptor]:
        return [self.get_tensor(i) for i in range(self.get_num_tensors())]

    def get_num_tensors(self) -> int:
        return len(self.tensor_network_state.tensor_ops)

    def create_from_size_and_ptr(
        self, size: int, ptr, data_type: StateDataType = StateDataType.STATE_VECTOR
    ) -> TensorNetSimulationState:
        """Creates a tensor network state holding the given dense state vector.

        Args:
            size (int): Number of amplitudes, a power of two.
            ptr: Array-like of at least `size` complex amplitudes.
            data_type (StateDataType): Kind of data in `ptr`. Default STATE_VECTOR.

        Returns:
            TensorNetSimulationState: A new state sharing this state's scratch memory,
            contraction handle, random generator, dense threshold and logger.

        Raises:
            UnsupportedConstructionModeError: If `data_type` is TENSORS.
            InvalidArgumentError: If `size` is not a power of two of at least 2 or `ptr`
                is too short.
        """
        if data_type is StateDataType.TENSORS:
            raise UnsupportedConstructionModeError(
                "Cannot create a tensor network simulation state from MPS tensors"
            )
        if size < 2 or size & (size - 1):
            raise InvalidArgumentError(
                f"State vector size {size} is not a power of two of at least 2"
            )
        data = np.asarray(ptr).reshape(-1)
        if data.size < size:
            raise InvalidArgumentError(
                f"Expected {size} amplitudes but the data holds {data.size}"
            )
        vector = data[:size].astype(np.complex128)
        network = TensorNetworkState.from_state_vector(vector, self._handle, self._scratch)
        return TensorNetSimulationState(
            network,
            self._scratch,
            self._handle,
            self._random_engine,
            max_qubits_for_dense_contraction=self._max_qubits_for_dense_contraction,
            logger=self.logger,
        )

    def destroy_state(self) -> None:
        """Releases the tensor network. Calling it again has no effect."""
        if self._state is not None:
            self.logger.info("Destroying tensor network state")
        self._state = None

    def to_host(self, buffer: np.ndarray, num_elements: int) -> None:
        """Copies the dense amplitudes into `buffer`.

        Raises:
            SizeMismatchError: If `buffer` is not one-dimensional, or `num_elements` or
                the buffer size differ from ``2 ** num_qubits``; the buffer is left untouched.
        """
        expected = 1 << self.num_qubits
        if num_elements != expected or np.ndim(buffer) != 1 or np.size(buffer) != expected:
            raise SizeMismatchError(
                f"Dimension mismatch: expecting {expected} elements but providing an array "
                f"of shape {np.shape(buffer)} with {num_elements} elements requested"
            )
        if self._contracted_state_vec is not None:
            state_vector = self._contracted_state_vec
        else:
            state_vector = self.tensor_network_state.get_state_vector()
        buffer[:] = state_vector

    def dump(self, stream: Optional[TextIO] = None) -> None:
        """Writes the amplitudes to `stream`, one per line. Defaults to stdout."""
        network = self.tensor_network_state
        stream = stream or sys.stdout
        if self._contracted_state_vec is not None:
            state_vector = self._contracted_state_vec
        else:
            state_vector = network.get_state_vector()
        for amplitude in state_vector:
            stream.write(f"{amplitude}\n")
