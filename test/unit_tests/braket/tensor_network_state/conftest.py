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

from braket.tensor_network_state import (
    ContractionHandle,
    ScratchMemory,
    TensorNetSimulationState,
    TensorNetworkState,
)
from braket.tensor_network_state.gate_operations import Hadamard, PauliX


@pytest.fixture
def handle():
    return ContractionHandle()


@pytest.fixture
def scratch():
    return ScratchMemory(1 << 20)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def make_state(handle, scratch, rng):
    def _make_state(qubit_count, operations=(), **kwargs):
        network = TensorNetworkState.from_operations(qubit_count, operations, handle, scratch)
        return TensorNetSimulationState(network, scratch, handle, rng, **kwargs)

    return _make_state


@pytest.fixture
def bell_operations():
    return [Hadamard([0]), PauliX([1], controls=[0])]


@pytest.fixture
def bell_state(make_state, bell_operations):
    return make_state(2, bell_operations)
