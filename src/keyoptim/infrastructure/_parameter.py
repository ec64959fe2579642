"""
Concrete trainable parameter implementation.

This module defines `Parameter`, an infrastructure-level implementation of the
domain contract `IParameter`. A `Parameter` is a `Tensor` intended to be
optimized by training algorithms (e.g., SGD, Adam, Yogi). It carries
training-related state such as `requires_grad` and a gradient buffer (`grad`).

Design notes
------------
- `Parameter` subclasses `Tensor` to reuse storage and shape behavior.
- The gradient buffer is stored separately from tensor data and is populated
  by an external differentiation step through `set_grad` or
  `accumulate_grad`. Optimizers only read it.
- Gradients are shape-checked on arrival so the optimizer sees consistent
  buffers; `ShapeMismatchError` is raised otherwise.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

import numpy as np

from ..domain._errors import ShapeMismatchError
from ..domain._parameter import IParameter
from .tensor._tensor import Tensor


class Parameter(Tensor, IParameter):
    """
    Trainable tensor wrapper.

    Parameters
    ----------
    shape : tuple[int, ...]
        Parameter shape.
    requires_grad : bool, optional
        Whether this parameter should receive gradients. Defaults to True.
    dtype : np.dtype, optional
        Element dtype. Defaults to np.float32.
    name : Optional[str], optional
        Human-readable name used in diagnostics.
    """

    def __init__(
        self,
        shape: Union[int, Sequence[int]],
        *,
        requires_grad: bool = True,
        dtype: Any = np.float32,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(shape, dtype=dtype)
        self._requires_grad: bool = bool(requires_grad)
        self._grad: Optional[Tensor] = None
        self.name = name

    def __repr__(self) -> str:
        label = f"name={self.name!r}, " if self.name is not None else ""
        return f"Parameter({label}shape={self.shape}, dtype={self.dtype})"

    @property
    def requires_grad(self) -> bool:
        """
        Indicate whether this parameter should receive gradients.

        Returns
        -------
        bool
            True if gradients are accepted, False if frozen.
        """
        return self._requires_grad

    @requires_grad.setter
    def requires_grad(self, value: bool) -> None:
        self._requires_grad = bool(value)

    @property
    def grad(self) -> Optional[Tensor]:
        """
        Return the current gradient for this parameter.

        Returns
        -------
        Optional[Tensor]
            The gradient tensor if present, otherwise None.
        """
        return self._grad

    def zero_grad(self) -> None:
        """
        Clear any stored gradient.

        Notes
        -----
        Training loops typically call this method before computing new
        gradients to prevent unintentional accumulation across steps.
        """
        self._grad = None

    def set_grad(self, grad: Optional[Union[Tensor, Any]]) -> None:
        """
        Overwrite the stored gradient.

        Parameters
        ----------
        grad : Optional[Tensor or array-like]
            The new gradient, or None to clear. Array-likes are copied into a
            fresh `Tensor` of this parameter's dtype.

        Raises
        ------
        ShapeMismatchError
            If the gradient shape differs from the parameter shape.
        """
        if grad is None:
            self._grad = None
            return
        if not isinstance(grad, Tensor):
            grad = Tensor.from_numpy(grad, dtype=self.dtype)
        if grad.shape != self.shape:
            raise ShapeMismatchError.for_shapes("gradient", self.shape, grad.shape)
        self._grad = grad

    def accumulate_grad(self, grad: Union[Tensor, Any]) -> None:
        """
        Accumulate an incoming gradient contribution into this parameter.

        Notes
        -----
        - If `requires_grad` is False, the gradient is ignored.
        - If no gradient is currently stored, a copy of the incoming gradient
          is stored; otherwise the contribution is added elementwise.
        """
        if not self._requires_grad:
            return

        incoming = grad.data if isinstance(grad, Tensor) else np.asarray(grad)
        if incoming.shape != self.shape:
            raise ShapeMismatchError.for_shapes(
                "gradient", self.shape, incoming.shape
            )

        if self._grad is None:
            self._grad = Tensor.from_numpy(incoming, dtype=self.dtype)
        else:
            # fresh buffer: the stored gradient may be caller-owned (set_grad)
            self._grad = Tensor.from_numpy(self._grad.data + incoming, dtype=self.dtype)
