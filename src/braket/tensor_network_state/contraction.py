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

"""
Tensor network contraction engine.

A pure state of ``n`` qubits is described as the product state
:math:`\\ket{0 \\dots 0}` followed by a sequence of operator tensors. Nothing is
contracted when operators are applied; an accessor later projects some qubit modes
onto fixed values and contracts the whole network in one `opt_einsum` call, using a
contraction path found by randomized greedy search.

Key concepts:
- Each qubit starts as a rank-1 tensor ``[1, 0]``
- An operator on ``k`` qubits is a rank-``2k`` tensor with legs ``(out..., in...)``
- Projected modes are capped with rank-1 basis vectors
- The dense output is ordered with qubit 0 as the least significant bit

Adjoint convention: a unitary operator applied with ``adjoint=True`` contributes
its conjugate transpose. A non-unitary operator applied with ``adjoint=True`` only
has its entries conjugated and keeps its leg orientation; callers that need the
conjugate transpose of a projector must transpose its data themselves.

Every engine object must be destroyed, either explicitly or by using it as a
context manager. The handle counts live objects so leaks can be detected.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from enum import Enum
from logging import Logger, getLogger
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import opt_einsum

from braket.tensor_network_state.errors import EngineFailureError
from braket.tensor_network_state.linalg_utils import controlled_matrix

_ITEMSIZE = np.dtype(np.complex128).itemsize
_DEFAULT_NUM_HYPER_SAMPLES = 8


class WorksizePref(Enum):
    """Which workspace estimate to report."""

    MIN = "min"
    RECOMMENDED = "recommended"
    MAX = "max"


class AccessorAttribute(Enum):
    """Configurable accessor options."""

    NUM_HYPER_SAMPLES = "num_hyper_samples"


@dataclass
class _AppliedOperator:
    """
    An operator tensor as seen by the engine.

    Attributes:
        qubits: Qubits of the tensor legs, controls first.
        tensor: The operator as a rank-``2 * len(qubits)`` tensor ``(out..., in...)``.
        immutable: Whether `update_tensor_operator` may replace the tensor.
        adjoint: Adjoint flag the operator was applied with.
        unitary: Unitary flag the operator was applied with.
        control_values: Control values, one per control qubit.
    """

    qubits: Tuple[int, ...]
    tensor: np.ndarray
    immutable: bool
    adjoint: bool
    unitary: bool
    control_values: Tuple[int, ...] = ()


class _EngineObject:
    """Base class for objects created by a `ContractionHandle`."""

    def __init__(self, handle: ContractionHandle):
        self._handle = handle
        self._destroyed = False
        handle._register(self)

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def destroy(self) -> None:
        if not self._destroyed:
            self._destroyed = True
            self._handle._unregister(self)

    def _check_alive(self) -> None:
        if self._destroyed:
            raise EngineFailureError(f"{type(self).__name__} has already been destroyed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.destroy()


class ContractionHandle:
    """
    Session of the contraction engine.

    The handle is shared by every state of a simulator session and is not owned by
    any of them; it only creates engine objects and tracks which are still alive.
    """

    def __init__(self, logger: Optional[Logger] = None):
        self.logger = logger or getLogger(__name__)
        self._live_objects: Dict[int, _EngineObject] = {}

    @property
    def live_objects(self) -> int:
        """int: Number of engine objects created and not yet destroyed."""
        return len(self._live_objects)

    def _register(self, obj: _EngineObject) -> None:
        self._live_objects[id(obj)] = obj

    def _unregister(self, obj: _EngineObject) -> None:
        self._live_objects.pop(id(obj), None)

    def create_state(self, qubit_count: int) -> EngineState:
        """Creates an engine state of `qubit_count` qubits, all in :math:`\\ket{0}`."""
        if qubit_count < 1:
            raise EngineFailureError(f"An engine state needs at least one qubit, got {qubit_count}")
        return EngineState(self, qubit_count)

    def create_accessor(
        self, state: EngineState, projected_modes: Sequence[int]
    ) -> StateAccessor:
        """Creates an accessor for `state` that projects `projected_modes` onto fixed values."""
        state._check_alive()
        return StateAccessor(self, state, projected_modes)

    def create_workspace_descriptor(self) -> WorkspaceDescriptor:
        return WorkspaceDescriptor(self)


class EngineState(_EngineObject):
    """A pure state network held by the engine."""

    def __init__(self, handle: ContractionHandle, qubit_count: int):
        super().__init__(handle)
        self._qubit_count = qubit_count
        self._operators: List[_AppliedOperator] = []

    @property
    def qubit_count(self) -> int:
        return self._qubit_count

    @property
    def num_operators(self) -> int:
        return len(self._operators)

    def apply_tensor_operator(
        self,
        targets: Sequence[int],
        data: np.ndarray,
        *,
        immutable: bool = True,
        adjoint: bool = False,
        unitary: bool = False,
    ) -> int:
        """Appends an operator acting on `targets`.

        Args:
            targets (Sequence[int]): Target qubits, the first being the most significant.
            data (np.ndarray): The ``4 ** len(targets)`` entries of the row-major
                ``[out, in]`` operator matrix.
            immutable (bool): Whether the operator may never be updated. Default True.
            adjoint (bool): Whether to apply the operator in adjoint form. Default False.
            unitary (bool): Whether the operator is unitary. Default False.

        Returns:
            int: The id of the applied tensor.
        """
        return self.apply_controlled_tensor_operator(
            (), targets, data, immutable=immutable, adjoint=adjoint, unitary=unitary
        )

    def apply_controlled_tensor_operator(
        self,
        controls: Sequence[int],
        targets: Sequence[int],
        data: np.ndarray,
        *,
        control_values: Optional[Sequence[int]] = None,
        immutable: bool = True,
        adjoint: bool = False,
        unitary: bool = False,
    ) -> int:
        """Appends an operator on `targets` controlled on `controls`.

        Control values default to 1 for every control qubit. The remaining arguments
        are those of `apply_tensor_operator`.

        Returns:
            int: The id of the applied tensor.
        """
        self._check_alive()
        controls = tuple(int(q) for q in controls)
        targets = tuple(int(q) for q in targets)
        control_values = (1,) * len(controls) if control_values is None else tuple(control_values)
        qubits = controls + targets
        if not targets:
            raise EngineFailureError("Operator has no target qubits")
        if len(set(qubits)) != len(qubits):
            raise EngineFailureError(f"Operator qubits {qubits} are not distinct")
        if any(q < 0 or q >= self._qubit_count for q in qubits):
            raise EngineFailureError(
                f"Operator qubits {qubits} out of range for {self._qubit_count} qubits"
            )
        if len(control_values) != len(controls) or any(v not in (0, 1) for v in control_values):
            raise EngineFailureError(f"Invalid control values {control_values}")
        tensor = self._operator_tensor(targets, data, control_values, adjoint, unitary)
        self._operators.append(
            _AppliedOperator(qubits, tensor, immutable, adjoint, unitary, control_values)
        )
        return len(self._operators) - 1

    def update_tensor_operator(self, tensor_id: int, data: np.ndarray) -> None:
        """Replaces the data of a mutable operator, keeping its qubits and flags."""
        self._check_alive()
        if tensor_id < 0 or tensor_id >= len(self._operators):
            raise EngineFailureError(f"Unknown tensor id {tensor_id}")
        applied = self._operators[tensor_id]
        if applied.immutable:
            raise EngineFailureError(f"Tensor {tensor_id} is immutable")
        num_controls = len(applied.control_values)
        applied.tensor = self._operator_tensor(
            applied.qubits[num_controls:],
            data,
            applied.control_values,
            applied.adjoint,
            applied.unitary,
        )

    @staticmethod
    def _operator_tensor(
        targets: Tuple[int, ...],
        data: np.ndarray,
        control_values: Tuple[int, ...],
        adjoint: bool,
        unitary: bool,
    ) -> np.ndarray:
        dim = 2 ** len(targets)
        data = np.asarray(data, dtype=np.complex128)
        if data.size != dim * dim:
            raise EngineFailureError(
                f"Operator on {len(targets)} qubits needs {dim * dim} entries, got {data.size}"
            )
        matrix = data.reshape(dim, dim)
        if adjoint:
            matrix = matrix.conj().T if unitary else matrix.conj()
        if control_values:
            matrix = controlled_matrix(matrix, control_values)
        num_legs = len(targets) + len(control_values)
        return np.ascontiguousarray(matrix).reshape([2] * (2 * num_legs))

    def _network(
        self, projected_modes: Sequence[int], projected_values: Sequence[int]
    ) -> List[Any]:
        """Interleaved `opt_einsum` operands for the network with the given projection."""
        operands: List[Any] = []
        current = list(range(self._qubit_count))
        next_index = self._qubit_count
        for qubit in range(self._qubit_count):
            operands.extend([np.array([1, 0], dtype=np.complex128), [qubit]])
        for applied in self._operators:
            covariant = [current[q] for q in applied.qubits]
            contravariant = list(range(next_index, next_index + len(applied.qubits)))
            operands.extend([applied.tensor, contravariant + covariant])
            for qubit, index in zip(applied.qubits, contravariant):
                current[qubit] = index
            next_index += len(applied.qubits)
        for mode, value in zip(projected_modes, projected_values):
            basis_vector = np.zeros(2, dtype=np.complex128)
            basis_vector[value] = 1
            operands.extend([basis_vector, [current[mode]]])
        projected = set(projected_modes)
        open_modes = [q for q in range(self._qubit_count) if q not in projected]
        operands.append([current[q] for q in reversed(open_modes)])
        return operands

    def _norm_network(self) -> List[Any]:
        """Interleaved operands of :math:`\\braket{\\psi|\\psi}`."""
        ket = self._network((), ())
        output = ket[-1]
        offset = 1 + max(itertools.chain(*ket[1:-1:2]))
        output_set = set(output)
        bra: List[Any] = []
        for tensor, indices in zip(ket[:-1:2], ket[1:-1:2]):
            bra.extend(
                [np.conj(tensor), [i if i in output_set else i + offset for i in indices]]
            )
        return ket[:-1] + bra + [[]]


class WorkspaceDescriptor(_EngineObject):
    """Workspace requirements of a prepared accessor and the memory attached to it."""

    def __init__(self, handle: ContractionHandle):
        super().__init__(handle)
        self._sizes: Dict[WorksizePref, int] = {}
        self._memory: Optional[np.ndarray] = None

    def get_memory_size(self, pref: WorksizePref = WorksizePref.RECOMMENDED) -> int:
        """Workspace size in bytes requested by the last accessor prepared with this descriptor."""
        self._check_alive()
        if not self._sizes:
            raise EngineFailureError("Workspace descriptor has not been prepared")
        return self._sizes[pref]

    def set_memory(self, buffer: np.ndarray) -> None:
        """Attaches `buffer` as scratch workspace."""
        self._check_alive()
        self._memory = buffer

    @property
    def attached_size(self) -> int:
        return 0 if self._memory is None else self._memory.nbytes

    def _set_sizes(self, sizes: Dict[WorksizePref, int]) -> None:
        self._sizes = dict(sizes)
        self._memory = None


class StateAccessor(_EngineObject):
    """
    Extracts amplitudes of a state with some modes projected onto fixed values.

    The output holds one amplitude per assignment of the modes that are not projected,
    with the lowest such qubit as the least significant bit. When every mode is
    projected the output is a single amplitude.
    """

    def __init__(self, handle: ContractionHandle, state: EngineState, projected_modes):
        super().__init__(handle)
        projected_modes = tuple(int(m) for m in projected_modes)
        if len(set(projected_modes)) != len(projected_modes) or any(
            m < 0 or m >= state.qubit_count for m in projected_modes
        ):
            self.destroy()
            raise EngineFailureError(f"Invalid projected modes {projected_modes}")
        self._state = state
        self._projected_modes = projected_modes
        self._num_hyper_samples = _DEFAULT_NUM_HYPER_SAMPLES
        self._path = None

    def configure(self, attribute: AccessorAttribute, value: Any) -> None:
        self._check_alive()
        if attribute is AccessorAttribute.NUM_HYPER_SAMPLES:
            if int(value) < 1:
                raise EngineFailureError(f"Number of hyper samples must be positive, got {value}")
            self._num_hyper_samples = int(value)
        else:
            raise EngineFailureError(f"Unsupported accessor attribute {attribute}")

    def prepare(self, max_workspace_size: int, workspace: WorkspaceDescriptor) -> None:
        """Finds a contraction path and records its workspace requirements in `workspace`.

        Paths are searched minimizing flops first; when the best one needs more than
        `max_workspace_size` bytes the search is repeated minimizing the largest
        intermediate instead.
        """
        self._check_alive()
        self._state._check_alive()
        workspace._check_alive()
        operands = self._state._network(self._projected_modes, (0,) * len(self._projected_modes))
        path, info = self._find_path(operands, "flops")
        if _workspace_bytes(info) > max_workspace_size:
            path, info = self._find_path(operands, "size")
        self._path = path
        workspace._set_sizes(
            {
                WorksizePref.MIN: _workspace_bytes(info),
                WorksizePref.RECOMMENDED: _workspace_bytes(info),
                WorksizePref.MAX: int(sum(info.size_list)) * _ITEMSIZE,
            }
        )
        self._handle.logger.debug(
            f"Prepared contraction of {self._state.num_operators} operators on "
            f"{self._state.qubit_count} qubits: {info.opt_cost} flops, "
            f"largest intermediate of {info.largest_intermediate} elements"
        )

    def _find_path(self, operands, minimize):
        optimizer = opt_einsum.RandomGreedy(max_repeats=self._num_hyper_samples, minimize=minimize)
        try:
            return opt_einsum.contract_path(*operands, optimize=optimizer)
        except (ValueError, TypeError) as error:
            raise EngineFailureError(f"Contraction path search failed: {error}") from error

    def compute(
        self,
        projected_values: Sequence[int],
        workspace: WorkspaceDescriptor,
        *,
        return_norm: bool = False,
    ) -> Tuple[np.ndarray, Optional[complex]]:
        """Contracts the network for the given values of the projected modes.

        Args:
            projected_values (Sequence[int]): One value in {0, 1} per projected mode.
            workspace (WorkspaceDescriptor): Prepared descriptor with memory attached.
            return_norm (bool): Whether to also compute the squared norm of the state.
                Default False.

        Returns:
            Tuple[np.ndarray, Optional[complex]]: The flat amplitudes and the state norm,
            or None for the norm when `return_norm` is False.
        """
        self._check_alive()
        self._state._check_alive()
        workspace._check_alive()
        if self._path is None:
            raise EngineFailureError("Accessor has not been prepared")
        if workspace.attached_size < workspace.get_memory_size(WorksizePref.MIN):
            raise EngineFailureError(
                f"Attached workspace of {workspace.attached_size} bytes is smaller than the "
                f"required {workspace.get_memory_size(WorksizePref.MIN)} bytes"
            )
        projected_values = tuple(int(v) for v in projected_values)
        if len(projected_values) != len(self._projected_modes) or any(
            v not in (0, 1) for v in projected_values
        ):
            raise EngineFailureError(
                f"Projected values {projected_values} do not match modes {self._projected_modes}"
            )
        operands = self._state._network(self._projected_modes, projected_values)
        try:
            amplitudes = opt_einsum.contract(*operands, optimize=self._path)
            norm = (
                complex(opt_einsum.contract(*self._state._norm_network(), optimize="greedy"))
                if return_norm
                else None
            )
        except (ValueError, TypeError, MemoryError) as error:
            raise EngineFailureError(f"Contraction failed: {error}") from error
        return np.asarray(amplitudes, dtype=np.complex128).reshape(-1), norm


def _workspace_bytes(info) -> int:
    return int(info.largest_intermediate) * _ITEMSIZE
