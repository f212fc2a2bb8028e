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

from contextlib import ExitStack
from logging import Logger, getLogger
from typing import List, Optional, Sequence, Tuple

import numpy as np

from braket.tensor_network_state.contraction import (
    AccessorAttribute,
    ContractionHandle,
    WorksizePref,
)
from braket.tensor_network_state.errors import InsufficientWorkspaceError
from braket.tensor_network_state.operator_tensor import OperatorTensor
from braket.tensor_network_state.scratch_memory import ScratchMemory

# Hyper samples used by the contraction path finder
_NUM_HYPER_SAMPLES = 8


def conjugate_network(tensor_ops: Sequence[OperatorTensor]) -> List[OperatorTensor]:
    """Operators of the bra :math:`\\bra{\\psi}` for a ket given by `tensor_ops`.

    The operators are reversed and their adjoint flags flipped. Non-unitary
    operators are also transposed, since the engine keeps their leg orientation
    when applying them in adjoint form. The input tensors and their buffers are
    left untouched.

    Args:
        tensor_ops (Sequence[OperatorTensor]): Operators of the ket, in application order.

    Returns:
        List[OperatorTensor]: Operators that, appended after a ket network, contract
        it against :math:`\\bra{\\psi}` when every mode is projected onto 0.
    """
    conjugated = []
    for op in reversed(tensor_ops):
        op = op.adjoint()
        if not op.is_unitary:
            op = op.transposed()
        conjugated.append(op)
    return conjugated


def compute_projected_amplitudes(
    handle: ContractionHandle,
    scratch: ScratchMemory,
    qubit_count: int,
    tensor_ops: Sequence[OperatorTensor],
    projected_modes: Sequence[int] = (),
    projected_values: Sequence[int] = (),
    *,
    num_hyper_samples: int = _NUM_HYPER_SAMPLES,
    return_norm: bool = False,
    logger: Optional[Logger] = None,
) -> Tuple[np.ndarray, Optional[complex]]:
    """Contracts a temporary network built from `tensor_ops` with some modes projected.

    A fresh engine state of `qubit_count` qubits is created and every operator is
    appended to it as an immutable tensor, through the controlled path when it has
    control qubits. An accessor projecting `projected_modes` onto `projected_values`
    is then configured, prepared against the scratch capacity and computed. Every
    engine object is destroyed before returning, whether or not the contraction
    succeeded.

    Args:
        handle (ContractionHandle): Engine session to create the temporary objects in.
        scratch (ScratchMemory): Workspace provider; held for the whole contraction.
        qubit_count (int): Number of qubits of the temporary network.
        tensor_ops (Sequence[OperatorTensor]): Operators in application order.
        projected_modes (Sequence[int]): Qubits with fixed values. Default ().
        projected_values (Sequence[int]): Value of each projected qubit. Default ().
        num_hyper_samples (int): Hyper samples of the path search. Default 8.
        return_norm (bool): Whether to also compute the squared norm of the network state.
            Default False.
        logger (Optional[Logger]): Logger for workspace diagnostics.

    Returns:
        Tuple[np.ndarray, Optional[complex]]: The amplitudes over the modes that are not
        projected, lowest qubit least significant, and the norm if requested.

    Raises:
        InsufficientWorkspaceError: If the contraction needs more workspace than
            `scratch` provides.
        ScratchInUseError: If another contraction holds `scratch`.
        EngineFailureError: If the engine rejects any request.
    """
    logger = logger or getLogger(__name__)
    with scratch.reserve(), ExitStack() as stack:
        state = stack.enter_context(handle.create_state(qubit_count))
        for op in tensor_ops:
            if op.control_qubit_ids:
                state.apply_controlled_tensor_operator(
                    op.control_qubit_ids,
                    op.target_qubit_ids,
                    op.data,
                    immutable=True,
                    adjoint=op.is_adjoint,
                    unitary=op.is_unitary,
                )
            else:
                state.apply_tensor_operator(
                    op.target_qubit_ids,
                    op.data,
                    immutable=True,
                    adjoint=op.is_adjoint,
                    unitary=op.is_unitary,
                )

        accessor = stack.enter_context(handle.create_accessor(state, projected_modes))
        accessor.configure(AccessorAttribute.NUM_HYPER_SAMPLES, num_hyper_samples)
        workspace = stack.enter_context(handle.create_workspace_descriptor())
        accessor.prepare(scratch.scratch_size, workspace)

        worksize = workspace.get_memory_size(WorksizePref.RECOMMENDED)
        logger.debug(
            f"Contraction workspace: {worksize} bytes requested, "
            f"{scratch.scratch_size} bytes available"
        )
        if worksize > scratch.scratch_size:
            raise InsufficientWorkspaceError(
                f"Insufficient workspace: contraction needs {worksize} bytes but the scratch "
                f"memory holds {scratch.scratch_size} bytes"
            )
        workspace.set_memory(scratch.buffer[:worksize])

        return accessor.compute(projected_values, workspace, return_norm=return_norm)
