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

from braket.tensor_network_state.contraction import (
    AccessorAttribute,
    ContractionHandle,
    WorksizePref,
)
from braket.tensor_network_state.errors import EngineFailureError

SQRT_HALF = 1 / np.sqrt(2)

h_matrix = np.array([[1, 1], [1, -1]], dtype=complex) / np.sqrt(2)
x_matrix = np.array([[0, 1], [1, 0]], dtype=complex)
s_matrix = np.array([[1, 0], [0, 1j]], dtype=complex)
lowering_matrix = np.array([[0, 1], [0, 0]], dtype=complex)


def contract(handle, state, projected_modes=(), projected_values=(), return_norm=False):
    with handle.create_accessor(state, projected_modes) as accessor:
        with handle.create_workspace_descriptor() as workspace:
            accessor.prepare(1 << 20, workspace)
            workspace.set_memory(np.empty(workspace.get_memory_size(), dtype=np.uint8))
            return accessor.compute(projected_values, workspace, return_norm=return_norm)


@pytest.fixture
def handle():
    return ContractionHandle()


@pytest.fixture
def bell(handle):
    state = handle.create_state(2)
    state.apply_tensor_operator([0], h_matrix)
    state.apply_controlled_tensor_operator([0], [1], x_matrix)
    yield state
    state.destroy()


def test_initial_state(handle):
    with handle.create_state(3) as state:
        amplitudes, norm = contract(handle, state)
    assert np.allclose(amplitudes, [1, 0, 0, 0, 0, 0, 0, 0])
    assert norm is None
    assert handle.live_objects == 0


def test_bell_state(handle, bell):
    amplitudes, norm = contract(handle, bell, return_norm=True)
    assert np.allclose(amplitudes, [SQRT_HALF, 0, 0, SQRT_HALF])
    assert np.isclose(norm, 1)


@pytest.mark.parametrize(
    "projected_modes, projected_values, expected",
    [
        ((1,), (1,), [0, SQRT_HALF]),
        ((1,), (0,), [SQRT_HALF, 0]),
        ((0,), (1,), [0, SQRT_HALF]),
        ((0, 1), (1, 1), [SQRT_HALF]),
        ((1, 0), (0, 1), [0]),
    ],
)
def test_projected_modes(handle, bell, projected_modes, projected_values, expected):
    amplitudes, _ = contract(handle, bell, projected_modes, projected_values)
    assert np.allclose(amplitudes, expected)


def test_qubit_zero_least_significant(handle):
    with handle.create_state(3) as state:
        state.apply_tensor_operator([1], x_matrix)
        amplitudes, _ = contract(handle, state)
    assert np.isclose(amplitudes[2], 1)


def test_first_target_most_significant(handle):
    cx = np.array([[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]], dtype=complex)
    with handle.create_state(2) as state:
        state.apply_tensor_operator([1], x_matrix)
        state.apply_tensor_operator([1, 0], cx)
        amplitudes, _ = contract(handle, state)
    assert np.allclose(amplitudes, [0, 0, 0, 1])


def test_negative_control(handle):
    with handle.create_state(2) as state:
        state.apply_controlled_tensor_operator([0], [1], x_matrix, control_values=[0])
        amplitudes, _ = contract(handle, state)
    assert np.allclose(amplitudes, [0, 0, 1, 0])


def test_unitary_adjoint_is_conjugate_transpose(handle):
    with handle.create_state(1) as state:
        state.apply_tensor_operator([0], h_matrix)
        state.apply_tensor_operator([0], s_matrix, adjoint=True, unitary=True)
        amplitudes, _ = contract(handle, state)
    assert np.allclose(amplitudes, [SQRT_HALF, -1j * SQRT_HALF])


def test_non_unitary_adjoint_keeps_orientation(handle):
    with handle.create_state(1) as state:
        state.apply_tensor_operator([0], lowering_matrix, adjoint=True, unitary=False)
        amplitudes, _ = contract(handle, state)
    assert np.allclose(amplitudes, [0, 0])

    with handle.create_state(1) as state:
        state.apply_tensor_operator([0], lowering_matrix, adjoint=True, unitary=True)
        amplitudes, _ = contract(handle, state)
    assert np.allclose(amplitudes, [0, 1])


def test_norm_of_projected_state(handle):
    with handle.create_state(1) as state:
        state.apply_tensor_operator([0], h_matrix)
        state.apply_tensor_operator([0], np.diag([0, 1]))
        amplitudes, norm = contract(handle, state, return_norm=True)
    assert np.allclose(amplitudes, [0, SQRT_HALF])
    assert np.isclose(norm, 0.5)


def test_update_tensor_operator(handle):
    with handle.create_state(1) as state:
        tensor_id = state.apply_tensor_operator([0], x_matrix, immutable=False)
        assert np.allclose(contract(handle, state)[0], [0, 1])
        state.update_tensor_operator(tensor_id, np.eye(2))
        assert np.allclose(contract(handle, state)[0], [1, 0])


def test_update_immutable_tensor_operator(handle):
    with handle.create_state(1) as state:
        tensor_id = state.apply_tensor_operator([0], x_matrix)
        with pytest.raises(EngineFailureError):
            state.update_tensor_operator(tensor_id, np.eye(2))
        with pytest.raises(EngineFailureError):
            state.update_tensor_operator(tensor_id + 1, np.eye(2))


@pytest.mark.parametrize(
    "controls, targets, data, control_values",
    [
        ((), (2,), x_matrix, None),
        ((), (-1,), x_matrix, None),
        ((), (), x_matrix, None),
        ((0,), (0,), x_matrix, None),
        ((), (0, 0), np.eye(4), None),
        ((), (0,), np.eye(4), None),
        ((0,), (1,), x_matrix, (2,)),
        ((0,), (1,), x_matrix, (1, 1)),
    ],
)
def test_apply_invalid_operator(handle, controls, targets, data, control_values):
    with handle.create_state(2) as state:
        with pytest.raises(EngineFailureError):
            state.apply_controlled_tensor_operator(
                controls, targets, data, control_values=control_values
            )
        assert state.num_operators == 0


def test_create_state_without_qubits(handle):
    with pytest.raises(EngineFailureError):
        handle.create_state(0)
    assert handle.live_objects == 0


@pytest.mark.parametrize("projected_modes", [(2,), (0, 0), (-1,)])
def test_invalid_projected_modes(handle, bell, projected_modes):
    with pytest.raises(EngineFailureError):
        handle.create_accessor(bell, projected_modes)
    assert handle.live_objects == 1


def test_invalid_projected_values(handle, bell):
    with pytest.raises(EngineFailureError):
        contract(handle, bell, (0,), (2,))
    with pytest.raises(EngineFailureError):
        contract(handle, bell, (0,), ())
    assert handle.live_objects == 1


def test_workspace_sizes(handle, bell):
    with handle.create_accessor(bell, ()) as accessor:
        with handle.create_workspace_descriptor() as workspace:
            with pytest.raises(EngineFailureError):
                workspace.get_memory_size()
            accessor.prepare(1 << 20, workspace)
            minimum = workspace.get_memory_size(WorksizePref.MIN)
            recommended = workspace.get_memory_size(WorksizePref.RECOMMENDED)
            maximum = workspace.get_memory_size(WorksizePref.MAX)
    assert 0 < minimum <= recommended <= maximum
    assert recommended >= 4 * np.dtype(np.complex128).itemsize


def test_prepare_with_small_limit_still_reports_sizes(handle, bell):
    with handle.create_accessor(bell, ()) as accessor:
        with handle.create_workspace_descriptor() as workspace:
            accessor.prepare(0, workspace)
            assert workspace.get_memory_size() > 0


def test_compute_requires_prepare(handle, bell):
    with handle.create_accessor(bell, ()) as accessor:
        with handle.create_workspace_descriptor() as workspace:
            with pytest.raises(EngineFailureError):
                accessor.compute((), workspace)


def test_compute_requires_attached_memory(handle, bell):
    with handle.create_accessor(bell, ()) as accessor:
        with handle.create_workspace_descriptor() as workspace:
            accessor.prepare(1 << 20, workspace)
            with pytest.raises(EngineFailureError):
                accessor.compute((), workspace)
            workspace.set_memory(np.empty(8, dtype=np.uint8))
            with pytest.raises(EngineFailureError):
                accessor.compute((), workspace)


def test_configure(handle, bell):
    with handle.create_accessor(bell, ()) as accessor:
        accessor.configure(AccessorAttribute.NUM_HYPER_SAMPLES, 2)
        with pytest.raises(EngineFailureError):
            accessor.configure(AccessorAttribute.NUM_HYPER_SAMPLES, 0)
        with pytest.raises(EngineFailureError):
            accessor.configure("num_hyper_samples", 2)


def test_live_objects(handle):
    state = handle.create_state(1)
    accessor = handle.create_accessor(state, ())
    workspace = handle.create_workspace_descriptor()
    assert handle.live_objects == 3
    workspace.destroy()
    accessor.destroy()
    accessor.destroy()
    assert handle.live_objects == 1
    assert accessor.destroyed
    state.destroy()
    assert handle.live_objects == 0


def test_destroyed_objects_reject_use(handle):
    state = handle.create_state(1)
    state.destroy()
    with pytest.raises(EngineFailureError):
        state.apply_tensor_operator([0], x_matrix)
    with pytest.raises(EngineFailureError):
        handle.create_accessor(state, ())
    assert handle.live_objects == 0
