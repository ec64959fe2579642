"""
Stochastic Gradient Descent optimizer implementation.

This module provides minibatch SGD with optional heavy-ball momentum and
classical L2 weight decay. Like the moment-based optimizers it reads gradients
from `Parameter.grad`, skips parameters without a gradient and advances its
`StepCounter` exactly once per `step()`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from ...domain._hyperparameters import SGDHyperparameters, StepCounter
from .._parameter import Parameter
from ._base import ParameterOptimizer
from ._sgd_update import sgd_step
from ._state import MomentumState


@dataclass(eq=False)
class SGD(ParameterOptimizer[MomentumState]):
    """
    Stochastic Gradient Descent (SGD) optimizer.

    Update rule
    -----------
    For each parameter ``p`` with gradient ``g``:

    - If ``weight_decay > 0`` (classical L2 regularization):
        ``g <- g + weight_decay * p``
    - If ``momentum > 0``:
        ``buf <- momentum * buf + g`` and ``p <- p - lr * buf``
    - Otherwise:
        ``p <- p - lr * g``

    Parameters
    ----------
    params : Iterable[Parameter]
        Parameters to be optimized.
    lr : float, optional
        Learning rate. Must be positive. Defaults to 1e-3.
    momentum : float, optional
        Heavy-ball coefficient in [0, 1). Defaults to 0.0.
    weight_decay : float, optional
        Classical L2 coefficient (coupled). Must be non-negative.
        Defaults to 0.0.
    counter : Optional[StepCounter], optional
        Step counter to advance; a private one is created when omitted.

    Notes
    -----
    - Gradients are expected to be averaged over the minibatch by the loss.
    - Momentum buffers are allocated for every parameter even when
      ``momentum == 0`` so that switching configurations never reshapes state.
    """

    hyperparameters: SGDHyperparameters

    def __init__(
        self,
        params: Iterable[Parameter],
        *,
        lr: float = 1e-3,
        momentum: float = 0.0,
        weight_decay: float = 0.0,
        counter: Optional[StepCounter] = None,
        hyperparameters: Optional[SGDHyperparameters] = None,
    ) -> None:
        if hyperparameters is None:
            hyperparameters = SGDHyperparameters(
                learning_rate=lr, momentum=momentum, weight_decay=weight_decay
            )
        self.hyperparameters = hyperparameters
        super().__init__(params, counter=counter)

    @property
    def lr(self) -> float:
        return self.hyperparameters.learning_rate

    def _new_state(self, param: Parameter) -> MomentumState:
        return MomentumState.zeros_like(param)

    def _apply(
        self,
        params: Sequence[Parameter],
        grads: Sequence[Any],
        states: Sequence[MomentumState],
    ) -> int:
        return sgd_step(params, grads, self.hyperparameters, self.counter, states)
