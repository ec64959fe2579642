"""
Yogi optimizer implementation.

Yogi shares Adam's first-moment update, bias correction and parameter update,
and replaces the second-moment recurrence with an additive, sign-controlled
update:

    v_t = v_{t-1} + (1 - beta2) * sign(g_t^2 - v_{t-1}) * g_t^2

The change of ``v`` per step is therefore bounded by ``(1 - beta2) * g_t^2``
however far ``g_t^2`` is from ``v_{t-1}``. A gradient spike can no longer
blow up the denominator for many steps, which keeps the effective step size
from collapsing under high-variance or sparse gradients.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ...domain._hyperparameters import MomentHyperparameters, StepCounter
from .._parameter import Parameter
from ._adam import Adam
from ._moment import yogi_variance


@dataclass(eq=False)
class Yogi(Adam):
    """
    Yogi optimizer.

    Parameters are the same as for `Adam`, except that `eps` defaults to the
    looser 1e-3.
    """

    rule = staticmethod(yogi_variance)

    def __init__(
        self,
        params: Iterable[Parameter],
        *,
        lr: float = 1e-3,
        betas: Tuple[float, float] = (0.9, 0.999),
        eps: float = MomentHyperparameters.YOGI_EPSILON,
        weight_decay: float = 0.0,
        counter: Optional[StepCounter] = None,
        hyperparameters: Optional[MomentHyperparameters] = None,
    ) -> None:
        super().__init__(
            params,
            lr=lr,
            betas=betas,
            eps=eps,
            weight_decay=weight_decay,
            counter=counter,
            hyperparameters=hyperparameters,
        )
