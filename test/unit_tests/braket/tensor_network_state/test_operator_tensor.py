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


import numpy as np
import pytest

from braket.tensor_network_state.errors import InvalidArgumentError
from braket.tensor_network_state.operator_tensor import OperatorTensor


def test_operator_tensor_defaults():
    op = OperatorTensor([2], [[0, 1], [1, 0]])
    assert op.target_qubit_ids == (2,)
    assert op.control_qubit_ids == ()
    assert op.qubits == (2,)
    assert op.num_targets == 1
    assert not op.is_adjoint
    assert op.is_unitary
    assert op.data.dtype == np.complex128
    assert op.data.shape == (4,)
    assert op.data.flags.c_contiguous


def test_operator_tensor_qubits_controls_first():
    op = OperatorTensor((3, 1), np.eye(4), control_qubit_ids=(0,))
    assert op.qubits == (0, 3, 1)
    assert np.array_equal(op.matrix, np.eye(4))


@pytest.mark.parametrize(
    "targets, data, controls",
    [
        ((), np.eye(2), ()),
        ((0,), np.eye(4), ()),
        ((0, 1), np.eye(2), ()),
        ((0,), np.eye(2), (0,)),
    ],
)
def test_invalid_operator_tensor(targets, data, controls):
    with pytest.raises(InvalidArgumentError):
        OperatorTensor(targets, data, control_qubit_ids=controls)


def test_transposed_copies_data():
    data = np.arange(4, dtype=complex)
    op = OperatorTensor((0,), data, is_unitary=False)
    transposed = op.transposed()
    assert np.array_equal(transposed.matrix, [[0, 2], [1, 3]])
    assert np.array_equal(op.matrix, [[0, 1], [2, 3]])
    assert not np.shares_memory(transposed.data, op.data)
    assert not transposed.is_unitary


def test_adjoint_flips_flag():
    op = OperatorTensor((0,), np.eye(2))
    adjoint = op.adjoint()
    assert adjoint.is_adjoint
    assert not op.is_adjoint
    assert not adjoint.adjoint().is_adjoint
    assert np.shares_memory(adjoint.data, op.data)
