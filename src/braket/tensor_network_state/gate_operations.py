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

from collections.abc import Sequence
from functools import singledispatch

import numpy as np

import braket.ir.jaqcd as braket_instruction
from braket.tensor_network_state.errors import InvalidArgumentError
from braket.tensor_network_state.linalg_utils import check_matrix_dimensions, check_unitary
from braket.tensor_network_state.operation import GateOperation


@singledispatch
def _from_braket_instruction(instruction) -> GateOperation:
    raise InvalidArgumentError(f"Instruction {instruction} not recognized")


def from_braket_instruction(instruction) -> GateOperation:
    """Instantiates the gate operation corresponding to the given JAQCD instruction.

    Args:
        instruction: A JAQCD instruction, such as ``braket.ir.jaqcd.H``.

    Returns:
        GateOperation: The gate operation, with control qubits of controlled
        instructions moved to `controls`.

    Raises:
        InvalidArgumentError: If the instruction has no tensor network counterpart.
    """
    return _from_braket_instruction(instruction)


def ir_matrix_to_ndarray(matrix: Sequence[Sequence[Sequence[float]]]) -> np.ndarray:
    """Converts a JAQCD matrix of ``[real, imaginary]`` pairs into a complex array."""
    return np.array([[complex(element[0], element[1]) for element in row] for row in matrix])


class Identity(GateOperation):
    """Identity gate"""

    _matrix = np.eye(2, dtype=complex)

    @property
    def matrix(self) -> np.ndarray:
        return Identity._matrix


@_from_braket_instruction.register(braket_instruction.I)
def _i(instruction) -> Identity:
    return Identity([instruction.target])


class Hadamard(GateOperation):
    """Hadamard gate"""

    _matrix = np.array([[1, 1], [1, -1]], dtype=complex) / np.sqrt(2)

    @property
    def matrix(self) -> np.ndarray:
        return Hadamard._matrix


@_from_braket_instruction.register(braket_instruction.H)
def _hadamard(instruction) -> Hadamard:
    return Hadamard([instruction.target])


class PauliX(GateOperation):
    """Pauli-X gate"""

    _matrix = np.array([[0, 1], [1, 0]], dtype=complex)

    @property
    def matrix(self) -> np.ndarray:
        return PauliX._matrix


@_from_braket_instruction.register(braket_instruction.X)
def _pauli_x(instruction) -> PauliX:
    return PauliX([instruction.target])


@_from_braket_instruction.register(braket_instruction.CNot)
def _cnot(instruction) -> PauliX:
    return PauliX([instruction.target], controls=[instruction.control])


@_from_braket_instruction.register(braket_instruction.CCNot)
def _ccnot(instruction) -> PauliX:
    return PauliX([instruction.target], controls=instruction.controls)


class PauliY(GateOperation):
    """Pauli-Y gate"""

    _matrix = np.array([[0, -1j], [1j, 0]], dtype=complex)

    @property
    def matrix(self) -> np.ndarray:
        return PauliY._matrix


@_from_braket_instruction.register(braket_instruction.Y)
def _pauli_y(instruction) -> PauliY:
    return PauliY([instruction.target])


@_from_braket_instruction.register(braket_instruction.CY)
def _cy(instruction) -> PauliY:
    return PauliY([instruction.target], controls=[instruction.control])


class PauliZ(GateOperation):
    """Pauli-Z gate"""

    _matrix = np.diag([1.0, -1.0]).astype(complex)

    @property
    def matrix(self) -> np.ndarray:
        return PauliZ._matrix


@_from_braket_instruction.register(braket_instruction.Z)
def _pauli_z(instruction) -> PauliZ:
    return PauliZ([instruction.target])


@_from_braket_instruction.register(braket_instruction.CZ)
def _cz(instruction) -> PauliZ:
    return PauliZ([instruction.target], controls=[instruction.control])


class S(GateOperation):
    """S gate"""

    _matrix = np.array([[1, 0], [0, 1j]], dtype=complex)

    @property
    def matrix(self) -> np.ndarray:
        return S._matrix


@_from_braket_instruction.register(braket_instruction.S)
def _s(instruction) -> S:
    return S([instruction.target])


class Si(GateOperation):
    """The adjoint :math:`S^{\\dagger}` of the S gate"""

    _matrix = np.array([[1, 0], [0, -1j]], dtype=complex)

    @property
    def matrix(self) -> np.ndarray:
        return Si._matrix


@_from_braket_instruction.register(braket_instruction.Si)
def _si(instruction) -> Si:
    return Si([instruction.target])


class T(GateOperation):
    """T gate"""

    _matrix = np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=complex)

    @property
    def matrix(self) -> np.ndarray:
        return T._matrix


@_from_braket_instruction.register(braket_instruction.T)
def _t(instruction) -> T:
    return T([instruction.target])


class Ti(GateOperation):
    """The adjoint :math:`T^{\\dagger}` of the T gate"""

    _matrix = np.array([[1, 0], [0, np.exp(-1j * np.pi / 4)]], dtype=complex)

    @property
    def matrix(self) -> np.ndarray:
        return Ti._matrix


@_from_braket_instruction.register(braket_instruction.Ti)
def _ti(instruction) -> Ti:
    return Ti([instruction.target])


class PhaseShift(GateOperation):
    """Phase shift gate"""

    def __init__(self, targets, angle, controls=()):
        super().__init__(targets, controls)
        self._angle = angle

    @property
    def matrix(self) -> np.ndarray:
        return np.array([[1, 0], [0, np.exp(1j * self._angle)]], dtype=complex)


@_from_braket_instruction.register(braket_instruction.PhaseShift)
def _phase_shift(instruction) -> PhaseShift:
    return PhaseShift([instruction.target], instruction.angle)


@_from_braket_instruction.register(braket_instruction.CPhaseShift)
def _c_phase_shift(instruction) -> PhaseShift:
    return PhaseShift([instruction.target], instruction.angle, controls=[instruction.control])


class RotX(GateOperation):
    """X-axis rotation gate"""

    def __init__(self, targets, angle, controls=()):
        super().__init__(targets, controls)
        self._angle = angle

    @property
    def matrix(self) -> np.ndarray:
        cos = np.cos(self._angle / 2)
        i_sin = 1j * np.sin(self._angle / 2)
        return np.array([[cos, -i_sin], [-i_sin, cos]], dtype=complex)


@_from_braket_instruction.register(braket_instruction.Rx)
def _rot_x(instruction) -> RotX:
    return RotX([instruction.target], instruction.angle)


class RotY(GateOperation):
    """Y-axis rotation gate"""

    def __init__(self, targets, angle, controls=()):
        super().__init__(targets, controls)
        self._angle = angle

    @property
    def matrix(self) -> np.ndarray:
        cos = np.cos(self._angle / 2)
        sin = np.sin(self._angle / 2)
        return np.array([[cos, -sin], [sin, cos]], dtype=complex)


@_from_braket_instruction.register(braket_instruction.Ry)
def _rot_y(instruction) -> RotY:
    return RotY([instruction.target], instruction.angle)


class RotZ(GateOperation):
    """Z-axis rotation gate"""

    def __init__(self, targets, angle, controls=()):
        super().__init__(targets, controls)
        self._angle = angle

    @property
    def matrix(self) -> np.ndarray:
        positive_phase = np.exp(1j * self._angle / 2)
        negative_phase = np.exp(-1j * self._angle / 2)
        return np.array([[negative_phase, 0], [0, positive_phase]], dtype=complex)


@_from_braket_instruction.register(braket_instruction.Rz)
def _rot_z(instruction) -> RotZ:
    return RotZ([instruction.target], instruction.angle)


class Swap(GateOperation):
    """Swap gate"""

    _matrix = np.array([[1, 0, 0, 0], [0, 0, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]], dtype=complex)

    @property
    def matrix(self) -> np.ndarray:
        return Swap._matrix


@_from_braket_instruction.register(braket_instruction.Swap)
def _swap(instruction) -> Swap:
    return Swap(instruction.targets)


@_from_braket_instruction.register(braket_instruction.CSwap)
def _cswap(instruction) -> Swap:
    return Swap(instruction.targets, controls=[instruction.control])


class Unitary(GateOperation):
    """Arbitrary unitary gate"""

    def __init__(self, targets, matrix, controls=()):
        super().__init__(targets, controls)
        clone = np.array(matrix, dtype=complex)
        check_matrix_dimensions(clone, self._targets)
        check_unitary(clone)
        self._matrix = clone

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix


@_from_braket_instruction.register(braket_instruction.Unitary)
def _unitary(instruction) -> Unitary:
    return Unitary(instruction.targets, ir_matrix_to_ndarray(instruction.matrix))


class Projector(GateOperation):
    """
    Projector onto a computational basis state of the target qubits.

    Used for mid-circuit measurement outcomes. The projector is not unitary and is
    not renormalized, so the state it leaves behind carries the outcome probability
    as its squared norm.
    """

    def __init__(self, targets, outcome: Sequence[int]):
        super().__init__(targets)
        if len(outcome) != len(self._targets) or any(bit not in (0, 1) for bit in outcome):
            raise InvalidArgumentError(
                f"Outcome {tuple(outcome)} is not a basis state of targets {self._targets}"
            )
        index = 0
        for bit in outcome:
            index = index * 2 + bit
        self._matrix = np.zeros((2 ** len(self._targets),) * 2, dtype=complex)
        self._matrix[index, index] = 1

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def is_unitary(self) -> bool:
        return False


class StatePreparation(GateOperation):
    r"""
    Maps :math:`\ket{0 \dots 0}` of the target qubits onto the given vector.

    The matrix is :math:`\ket{\psi}\bra{0 \dots 0}`: the vector fills the first
    column and every other entry is zero. It is not unitary, and unlike a
    projector it is not symmetric under transposition.
    """

    def __init__(self, targets, vector: np.ndarray):
        super().__init__(targets)
        vector = np.asarray(vector, dtype=complex).reshape(-1)
        dim = 2 ** len(self._targets)
        if vector.size != dim:
            raise InvalidArgumentError(
                f"State vector of {vector.size} entries does not fit {len(self._targets)} qubits"
            )
        self._matrix = np.zeros((dim, dim), dtype=complex)
        self._matrix[:, 0] = vector

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def is_unitary(self) -> bool:
        return False

