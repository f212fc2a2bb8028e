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

from abc import ABC, abstractmethod
from typing import Sequence, Tuple

import numpy as np


class Operation(ABC):
    """
    Encapsulates an operation acting on a set of target qubits.
    """

    @property
    @abstractmethod
    def targets(self) -> Tuple[int, ...]:
        """Tuple[int, ...]: The indices of the qubits the operation's matrix acts on.

        Control qubits are not targets; they are listed separately in `controls`.
        """

    @property
    def controls(self) -> Tuple[int, ...]:
        """Tuple[int, ...]: The indices of the qubits the operation is controlled on.

        Empty for uncontrolled operations.
        """
        return ()


class GateOperation(Operation, ABC):
    """
    Encapsulates a quantum gate operation acting on a set of target qubits.

    The matrix is indexed ``[out, in]`` with the first target as the most
    significant qubit.
    """

    def __init__(self, targets: Sequence[int], controls: Sequence[int] = ()):
        self._targets = tuple(int(target) for target in targets)
        self._controls = tuple(int(control) for control in controls)

    @property
    def targets(self) -> Tuple[int, ...]:
        return self._targets

    @property
    def controls(self) -> Tuple[int, ...]:
        return self._controls

    @property
    @abstractmethod
    def matrix(self) -> np.ndarray:
        """np.ndarray: The matrix representation of the operation on its targets."""

    @property
    def is_unitary(self) -> bool:
        """bool: Whether the matrix is unitary. Projectors and resets are not."""
        return True
