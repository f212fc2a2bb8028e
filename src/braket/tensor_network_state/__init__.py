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


from braket.tensor_network_state._version import __version__  # noqa: F401
from braket.tensor_network_state.contraction import ContractionHandle  # noqa: F401
from braket.tensor_network_state.errors import (  # noqa: F401
    EngineFailureError,
    InsufficientWorkspaceError,
    InvalidArgumentError,
    OutOfRangeError,
    ScratchInUseError,
    SizeMismatchError,
    StateReleasedError,
    TensorNetworkStateError,
    UnsupportedConstructionModeError,
    UnsupportedStateTypeError,
)
from braket.tensor_network_state.operation import GateOperation, Operation  # noqa: F401
from braket.tensor_network_state.operator_tensor import OperatorTensor, Precision  # noqa: F401
from braket.tensor_network_state.scratch_memory import ScratchMemory  # noqa: F401
from braket.tensor_network_state.simulation_state import (  # noqa: F401
    SimulationState,
    StateDataType,
    StateKind,
    TensorDescriptor,
)
from braket.tensor_network_state.tensor_network_state import TensorNetworkState  # noqa: F401
from braket.tensor_network_state.tensornet_simulation_state import (  # noqa: F401
    TensorNetSimulationState,
)
