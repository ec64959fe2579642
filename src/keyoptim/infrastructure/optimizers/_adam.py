"""
Adam optimizer implementation.

This module provides a KeyOptim-native implementation of the Adam
optimization algorithm. The optimizer updates `Parameter` instances in-place
using their gradients and maintains per-parameter first and second moments.

Design notes
------------
- Optimizers operate on `Parameter` objects and read gradients from `p.grad`.
- Parameters with `grad is None` are skipped to support partial graphs and
  frozen weights.
- The numerical update lives in `_moment.moment_step`; this class only binds
  parameters, state and the step counter together.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Tuple

from ...domain._hyperparameters import MomentHyperparameters, StepCounter
from .._parameter import Parameter
from ._base import ParameterOptimizer
from ._moment import adam_variance, moment_step
from ._state import MomentState


@dataclass(eq=False)
class Adam(ParameterOptimizer[MomentState]):
    """
    Adam optimizer.

    Adam maintains exponentially decaying averages of past gradients (first
    moment) and past squared gradients (second moment), and applies bias
    correction to both estimates.

    Update rule
    -----------
    Let ``g_t`` be the gradient at step ``t``:

        m_t = beta1 * m_{t-1} + (1 - beta1) * g_t
        v_t = beta2 * v_{t-1} + (1 - beta2) * (g_t ** 2)

        m_hat = m_t / (1 - beta1^t)
        v_hat = v_t / (1 - beta2^t)

        p <- p - lr * m_hat / (sqrt(v_hat) + eps)

    If ``weight_decay > 0`` (classical L2 regularization):

        g_t <- g_t + weight_decay * p

    Parameters
    ----------
    params : Iterable[Parameter]
        Parameters to be optimized.
    lr : float, optional
        Learning rate. Must be positive. Defaults to 1e-3.
    betas : tuple[float, float], optional
        Decay rates for the first and second moments, each in [0, 1).
        Defaults to (0.9, 0.999).
    eps : float, optional
        Denominator stabilizer. Must be positive. Defaults to 1e-6.
    weight_decay : float, optional
        Classical L2 coefficient (coupled). Must be non-negative.
        Defaults to 0.0.
    counter : Optional[StepCounter], optional
        Step counter to advance; a private one is created when omitted.
    hyperparameters : Optional[MomentHyperparameters], optional
        Pre-built configuration. When given, `lr`, `betas`, `eps` and
        `weight_decay` are ignored.

    Raises
    ------
    InvalidHyperparameterError
        If any hyperparameter is outside its valid range.
    """

    hyperparameters: MomentHyperparameters

    rule = staticmethod(adam_variance)

    def __init__(
        self,
        params: Iterable[Parameter],
        *,
        lr: float = 1e-3,
        betas: Tuple[float, float] = (0.9, 0.999),
        eps: float = MomentHyperparameters.ADAM_EPSILON,
        weight_decay: float = 0.0,
        counter: Optional[StepCounter] = None,
        hyperparameters: Optional[MomentHyperparameters] = None,
    ) -> None:
        if hyperparameters is None:
            hyperparameters = MomentHyperparameters(
                learning_rate=lr,
                beta1=betas[0],
                beta2=betas[1],
                epsilon=eps,
                weight_decay=weight_decay,
            )
        self.hyperparameters = hyperparameters
        super().__init__(params, counter=counter)

    @property
    def lr(self) -> float:
        return self.hyperparameters.learning_rate

    @property
    def betas(self) -> Tuple[float, float]:
        return (self.hyperparameters.beta1, self.hyperparameters.beta2)

    @property
    def eps(self) -> float:
        return self.hyperparameters.epsilon

    def _new_state(self, param: Parameter) -> MomentState:
        return MomentState.zeros_like(param)

    def _apply(
        self,
        params: Sequence[Parameter],
        grads: Sequence[Any],
        states: Sequence[MomentState],
    ) -> int:
        return moment_step(
            params, grads, states, self.hyperparameters, self.counter, rule=self.rule
        )
