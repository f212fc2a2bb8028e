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

from collections.abc import Sequence

import numpy as np
from scipy.linalg import block_diag

from braket.tensor_network_state.errors import InvalidArgumentError


def controlled_matrix(matrix: np.ndarray, control_state: Sequence[int]) -> np.ndarray:
    r"""Returns the controlled form of the given matrix

    A controlled matrix is produced by successively taking the direct sum of the matrix :math:`U_n`
    with an equal-rank identity matrix :math:`I_n`, with regular control (indicated by a control
    value of 1) taking the direct sum on the left

        .. math:: C_1(U_n) := I_n \oplus U_n

    and negative control (indicated by a control value of 0) taking the direct sum on the right

        .. math:: C_0(U_n) := U_n \oplus I_n

    The control state is read from right to left, so that the first control ends up as the
    most significant qubit of the output matrix.

    Args:
        matrix (np.ndarray): The matrix to control
        control_state (Sequence[int]): Basis state on which to control the operation.

    Returns:
        np.ndarray: The controlled form of the matrix
    """
    new_matrix = np.asarray(matrix, dtype=complex)
    for state in reversed(control_state):
        identity = np.eye(len(new_matrix), dtype=complex)
        new_matrix = block_diag(identity, new_matrix) if state else block_diag(new_matrix, identity)
    return new_matrix


def transpose_operator(data: np.ndarray) -> np.ndarray:
    """Returns a transposed copy of a flat, row-major square operator buffer.

    Args:
        data (np.ndarray): Flat buffer of ``dim * dim`` entries.

    Returns:
        np.ndarray: A new flat buffer holding the transposed matrix.
    """
    dim = int(round(np.sqrt(data.size)))
    return np.ascontiguousarray(data.reshape(dim, dim).T).reshape(-1)


def basis_state_index(basis_state: Sequence[int]) -> int:
    """Index of a computational basis state in the dense amplitude vector.

    The last entry of `basis_state` is the most significant bit.
    """
    index = 0
    for bit in reversed(basis_state):
        index = index * 2 + bit
    return index


def check_matrix_dimensions(matrix: np.ndarray, targets: Sequence[int]) -> None:
    """Checks that `matrix` is square and acts on exactly `len(targets)` qubits.

    Raises:
        InvalidArgumentError: If the matrix has the wrong shape.
    """
    expected = 2 ** len(targets)
    if matrix.ndim != 2 or matrix.shape != (expected, expected):
        raise InvalidArgumentError(
            f"Matrix of shape {matrix.shape} does not act on {len(targets)} qubits; "
            f"expected shape {(expected, expected)}"
        )


def check_unitary(matrix: np.ndarray) -> None:
    """Checks that `matrix` is unitary.

    Raises:
        InvalidArgumentError: If the matrix is not unitary.
    """
    if not np.allclose(matrix @ matrix.conj().T, np.eye(len(matrix))):
        raise InvalidArgumentError(f"{matrix} is not unitary")
