"""
Shared plumbing for parameter-bound optimizers.

`ParameterOptimizer` owns the list of managed parameters, their per-parameter
state (created eagerly, one entry per parameter) and the `StepCounter`. It
selects the parameters that currently carry a gradient and hands them, with
their states, to a subclass-provided batch update.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, List, Optional, Sequence, TypeVar

from ...domain._hyperparameters import StepCounter
from .._parameter import Parameter

S = TypeVar("S")


class ParameterOptimizer(ABC, Generic[S]):
    """
    Base class for optimizers that read gradients from `Parameter.grad`.

    Parameters
    ----------
    params : Iterable[Parameter]
        Parameters to optimize. The iterable is consumed and stored.
    counter : Optional[StepCounter]
        Step counter to advance. A fresh counter is created when omitted;
        pass a shared instance to drive several optimizers with one clock.

    Notes
    -----
    Subclasses implement `_new_state(param)` and
    `_apply(params, grads, states)`; the class cannot be instantiated
    until both are provided.
    """

    def __init__(
        self,
        params: Iterable[Parameter],
        *,
        counter: Optional[StepCounter] = None,
    ) -> None:
        self.params: List[Parameter] = list(params)
        self._counter = counter if counter is not None else StepCounter()
        self._states: List[S] = [self._new_state(p) for p in self.params]

    # ---- subclass hooks ----
    @abstractmethod
    def _new_state(self, param: Parameter) -> S:
        """
        Return fresh, zero-initialized state for `param`.
        """
        raise NotImplementedError

    @abstractmethod
    def _apply(
        self, params: Sequence[Parameter], grads: Sequence[Any], states: Sequence[S]
    ) -> int:
        """
        Validate and update one batch; return the new counter value.
        """
        raise NotImplementedError

    # ---- public API ----
    @property
    def counter(self) -> StepCounter:
        """
        Return the step counter advanced by `step()`.
        """
        return self._counter

    @property
    def step_count(self) -> int:
        """
        Number of completed `step()` calls on the underlying counter.
        """
        return self._counter.value

    def state_for(self, param: Parameter) -> S:
        """
        Return the optimizer state of a managed parameter.

        Raises
        ------
        KeyError
            If `param` is not managed by this optimizer.
        """
        for p, st in zip(self.params, self._states):
            if p is param:
                return st
        raise KeyError(f"{param!r} is not managed by this optimizer")

    def zero_grad(self) -> None:
        """
        Clear gradients for all managed parameters.

        Notes
        -----
        This calls ``zero_grad()`` on each parameter, which clears the stored
        gradient tensor (if any). Training loops typically call `zero_grad()`
        before computing a new backward pass to avoid gradient accumulation.
        """
        for p in self.params:
            p.zero_grad()

    def step(self) -> None:
        """
        Apply one update step to all managed parameters.

        Notes
        -----
        - Parameters with ``grad is None`` are skipped; the counter still
          advances exactly once.
        - Shape errors are raised before any parameter or state is modified.
        """
        active = [i for i, p in enumerate(self.params) if p.grad is not None]
        self._apply(
            [self.params[i] for i in active],
            [self.params[i].grad for i in active],
            [self._states[i] for i in active],
        )
