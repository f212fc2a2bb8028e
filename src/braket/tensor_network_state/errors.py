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
Exceptions raised by the tensor network simulation state.

Each error also derives from the builtin exception that best describes it, so
callers that only know about ``ValueError``, ``TypeError`` and friends keep
working.
"""


class TensorNetworkStateError(Exception):
    """Base class for all tensor network state errors."""


class InvalidArgumentError(TensorNetworkStateError, ValueError):
    """An argument, such as a basis state or a qubit index, is malformed."""


class OutOfRangeError(TensorNetworkStateError, IndexError):
    """A tensor index lies outside the tensors of the network."""


class SizeMismatchError(TensorNetworkStateError, ValueError):
    """A host buffer does not hold exactly one entry per amplitude."""


class UnsupportedStateTypeError(TensorNetworkStateError, TypeError):
    """An operation was requested against a state of another representation."""


class UnsupportedConstructionModeError(TensorNetworkStateError, TypeError):
    """A state was requested from input data this representation cannot ingest."""


class InsufficientWorkspaceError(TensorNetworkStateError, MemoryError):
    """The contraction needs more workspace than the scratch memory provides."""


class EngineFailureError(TensorNetworkStateError, RuntimeError):
    """The contraction engine rejected a request or failed to execute it."""


class StateReleasedError(TensorNetworkStateError, RuntimeError):
    """The state was queried after its network was released."""


class ScratchInUseError(TensorNetworkStateError, RuntimeError):
    """The scratch memory is already held by another contraction."""
