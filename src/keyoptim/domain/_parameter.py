"""
Trainable parameter interface definitions.

This module defines the domain-level interface for trainable parameters used
by optimization algorithms. A parameter is a tensor plus a separate gradient
buffer that an external differentiation step populates before each optimizer
call.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable, Optional

from ._tensor import ITensor


@runtime_checkable
class IParameter(ITensor, Protocol):
    """
    Domain-level interface for trainable parameters.

    Notes
    -----
    - Parameters may be frozen or unfrozen via the `requires_grad` flag.
    - Optimizers only read `grad`; they never populate it.
    """

    # ---- training control ----
    @property
    def requires_grad(self) -> bool:
        """
        Indicate whether this parameter should receive gradients.
        """
        ...

    # ---- gradient access ----
    @property
    def grad(self) -> Optional["ITensor"]:
        """
        Return the gradient tensor associated with this parameter.

        Returns
        -------
        Optional[ITensor]
            The gradient tensor, or None if no gradient is currently stored.
        """
        ...

    def zero_grad(self) -> None:
        """
        Clear the stored gradient for this parameter.
        """
        ...
