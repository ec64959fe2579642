"""
Domain-level optimizer contracts for KeyOptim.

This module defines the `IOptimizer` protocol, which specifies the minimal
interface required for optimizer implementations (e.g., SGD, Adam, Yogi).

Notes
-----
- Domain contracts are backend-agnostic and must not depend on NumPy or
  infrastructure implementations.
- Optimizers update trainable parameters based on their stored gradients.
  Gradient computation is outside the scope of this protocol.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from ._hyperparameters import StepCounter


@runtime_checkable
class IOptimizer(Protocol):
    """
    Optimizer interface contract.

    An optimizer holds references to trainable parameters and updates them
    in-place according to a specific optimization rule.

    Required members
    ----------------
    - `step()` applies one optimization update to managed parameters and
      advances `counter` exactly once.
    - `zero_grad()` clears gradients for managed parameters.
    - `counter` exposes the step counter driving bias correction.
    """

    def step(self) -> None:
        """
        Apply one optimization step.

        Implementations should skip parameters that do not currently have
        gradients (e.g., `grad is None`).
        """
        ...

    def zero_grad(self) -> None:
        """
        Clear gradients for all managed parameters.
        """
        ...

    @property
    def params(self) -> Iterable[object]:
        """
        Return the parameters managed by this optimizer.
        """
        ...

    @property
    def counter(self) -> StepCounter:
        """
        Return the step counter advanced by `step()`.
        """
        ...
