"""
Minibatch SGD update function.

Update rule
-----------
For each parameter ``p`` with gradient ``g``:

    g   <- g + weight_decay * p          (if weight_decay > 0)
    buf <- momentum * buf + g            (if momentum > 0)
    p   <- p - lr * buf                  (or p - lr * g without momentum)

The gradient is expected to already be averaged over the minibatch.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ...domain._errors import ShapeMismatchError
from ...domain._hyperparameters import SGDHyperparameters, StepCounter
from ._state import MomentumState
from ._validation import collect_buffers, warn_if_non_finite

logger = logging.getLogger(__name__)


def sgd_step(
    parameters: Sequence[Any],
    gradients: Sequence[Any],
    hyperparameters: SGDHyperparameters,
    counter: StepCounter,
    states: Optional[Sequence[MomentumState]] = None,
) -> int:
    """
    Apply one minibatch SGD update to a batch of parameters.

    Parameters
    ----------
    parameters : Sequence[Tensor or np.ndarray]
        Parameters, updated in place.
    gradients : Sequence[Tensor or array-like]
        One gradient per parameter, same shapes.
    hyperparameters : SGDHyperparameters
        Validated configuration.
    counter : StepCounter
        Shared step counter; advanced exactly once by this call.
    states : Optional[Sequence[MomentumState]]
        Momentum buffers. Required when ``momentum > 0``.

    Returns
    -------
    int
        The step index after this call.

    Raises
    ------
    ShapeMismatchError
        If lengths or shapes disagree. Nothing is modified.
    """
    hp = hyperparameters
    use_momentum = hp.momentum != 0.0

    if use_momentum:
        if states is None:
            raise ShapeMismatchError(
                "sgd with momentum requires one momentum buffer per parameter"
            )
        groups = [(s.buffer,) for s in states]
        names = ("momentum_buffer",)
    else:
        groups = [() for _ in parameters]
        names = ()

    batch = collect_buffers(parameters, gradients, groups, names)

    t = counter.advance()

    for p, g, bufs in batch:
        if hp.weight_decay != 0.0:
            g = g + hp.weight_decay * p

        if use_momentum:
            (buf,) = bufs
            buf *= hp.momentum
            buf += g
            p -= hp.learning_rate * buf
        else:
            p -= hp.learning_rate * g

    logger.debug("sgd step t=%d updated %d parameter(s)", t, len(batch))
    warn_if_non_finite("sgd_step", [p for p, _, _ in batch], t)
    return t
