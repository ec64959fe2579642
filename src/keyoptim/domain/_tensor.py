"""
Tensor interface definitions.

This module defines the domain-level interface for tensor-like buffers using
structural typing. The interface is intentionally small: optimizers only need
to know a buffer's shape and to move data in and out of it.

Notes
-----
The domain layer does not import NumPy. Concrete implementations expose their
storage through `to_numpy` / `copy_from_numpy` and the infrastructure layer is
free to work on the backing array directly.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor interface.

    An `ITensor` is an owned, shape-tagged numeric buffer. It carries no
    autograd machinery; gradients are produced elsewhere and stored on
    parameters as separate buffers.
    """

    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the shape of the tensor.

        Returns
        -------
        tuple[int, ...]
            The tensor's shape.
        """
        ...

    def numel(self) -> int:
        """
        Return the total number of elements.
        """
        ...

    def to_numpy(self) -> Any:
        """
        Return a copy of the tensor contents as a host array.
        """
        ...

    def copy_from_numpy(self, arr: Any) -> None:
        """
        Overwrite the tensor contents with an array of the same shape.
        """
        ...
