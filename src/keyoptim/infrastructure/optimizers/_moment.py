"""
Moment-based update rules (Adam and Yogi).

This module contains the numerical core shared by the `Adam` and `Yogi`
optimizers. `moment_step` updates a batch of parameters in place from their
gradients, the per-parameter `MomentState` accumulators and a shared
`StepCounter`.

Update rule
-----------
For every parameter ``p`` with gradient ``g`` at step ``t``:

    v  = beta1 * v + (1 - beta1) * g
    s  = <variance rule>
    v_hat = v / (1 - beta1^t)
    s_hat = s / (1 - beta2^t)
    p <- p - lr * v_hat / (sqrt(s_hat) + eps)

with the variance rules

    adam: s = beta2 * s + (1 - beta2) * g^2
    yogi: s = s + (1 - beta2) * sign(g^2 - s) * g^2

Yogi bounds the per-step change of ``s`` to ``(1 - beta2) * g^2`` whatever
the size of ``g^2 - s``.

Notes
-----
- The batch is validated before anything is written; on `ShapeMismatchError`
  parameters, states and counter are unchanged.
- The counter advances exactly once per call, and the same ``t`` is used for
  every parameter in the call.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Sequence, Union

import numpy as np

from ...domain._hyperparameters import MomentHyperparameters, StepCounter
from ._state import MomentState
from ._validation import collect_buffers, warn_if_non_finite

logger = logging.getLogger(__name__)

VarianceRule = Callable[[np.ndarray, np.ndarray, float], None]


def adam_variance(variance: np.ndarray, g2: np.ndarray, beta2: float) -> None:
    """Exponential moving average of squared gradients (in place)."""
    variance *= beta2
    variance += (1.0 - beta2) * g2


def yogi_variance(variance: np.ndarray, g2: np.ndarray, beta2: float) -> None:
    """Sign-controlled additive variance update (in place)."""
    variance += (1.0 - beta2) * np.sign(g2 - variance) * g2


VARIANCE_RULES: Dict[str, VarianceRule] = {
    "adam": adam_variance,
    "yogi": yogi_variance,
}


def _resolve_rule(rule: Union[str, VarianceRule]) -> VarianceRule:
    if callable(rule):
        return rule
    try:
        return VARIANCE_RULES[str(rule).lower()]
    except KeyError:
        raise ValueError(
            f"unknown variance rule {rule!r}; expected one of {sorted(VARIANCE_RULES)}"
        ) from None


def _state_group(state: Any) -> Sequence[Any]:
    if isinstance(state, MomentState):
        return (state.velocity, state.variance)
    return tuple(state)


def moment_step(
    parameters: Sequence[Any],
    gradients: Sequence[Any],
    states: Sequence[Any],
    hyperparameters: MomentHyperparameters,
    counter: StepCounter,
    *,
    rule: Union[str, VarianceRule] = "adam",
) -> int:
    """
    Apply one moment-based update to a batch of parameters.

    Parameters
    ----------
    parameters : Sequence[Tensor or np.ndarray]
        Parameters, updated in place.
    gradients : Sequence[Tensor or array-like]
        One gradient per parameter, same shapes. Read only.
    states : Sequence[MomentState or (velocity, variance)]
        Per-parameter accumulators, updated in place.
    hyperparameters : MomentHyperparameters
        Validated configuration.
    counter : StepCounter
        Shared step counter; advanced exactly once by this call.
    rule : str or callable, optional
        ``"adam"`` (default), ``"yogi"``, or a custom in-place variance
        function ``f(variance, g2, beta2)``.

    Returns
    -------
    int
        The step index ``t`` used for bias correction.

    Raises
    ------
    ShapeMismatchError
        If the batch lengths or any shapes disagree. Nothing is modified.
    ValueError
        If `rule` names an unknown variance rule.
    """
    update_variance = _resolve_rule(rule)
    batch = collect_buffers(
        parameters,
        gradients,
        [_state_group(s) for s in states],
        ("velocity", "variance"),
    )

    t = counter.advance()

    hp = hyperparameters
    b1, b2 = hp.beta1, hp.beta2
    bias1 = 1.0 - b1**t
    bias2 = 1.0 - b2**t

    for p, g, (v, s) in batch:
        # Classical L2 weight decay (coupled): g <- g + wd * p
        if hp.weight_decay != 0.0:
            g = g + hp.weight_decay * p

        v *= b1
        v += (1.0 - b1) * g

        update_variance(s, g * g, b2)

        v_hat = v / bias1
        s_hat = s / bias2
        p -= hp.learning_rate * v_hat / (np.sqrt(s_hat) + hp.epsilon)

    logger.debug(
        "%s step t=%d updated %d parameter(s)",
        getattr(update_variance, "__name__", "moment"),
        t,
        len(batch),
    )
    warn_if_non_finite("moment_step", [p for p, _, _ in batch], t)
    return t


def adam_step(
    parameters: Sequence[Any],
    gradients: Sequence[Any],
    states: Sequence[Any],
    hyperparameters: MomentHyperparameters,
    counter: StepCounter,
) -> int:
    """Adam update; see `moment_step`."""
    return moment_step(
        parameters, gradients, states, hyperparameters, counter, rule=adam_variance
    )


def yogi_step(
    parameters: Sequence[Any],
    gradients: Sequence[Any],
    states: Sequence[Any],
    hyperparameters: MomentHyperparameters,
    counter: StepCounter,
) -> int:
    """Yogi update; see `moment_step`."""
    return moment_step(
        parameters, gradients, states, hyperparameters, counter, rule=yogi_variance
    )
