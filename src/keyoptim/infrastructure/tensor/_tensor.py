"""
Concrete Tensor implementation (NumPy backend).

This module provides a concrete `Tensor` that satisfies the domain-level
`ITensor` protocol. A tensor owns a NumPy array of a fixed shape and dtype;
every write into it is shape-checked, so a tensor never changes shape after
construction.

Design notes
------------
- This file sits in the infrastructure layer: it imports NumPy and concrete
  error types, and provides a concrete runtime implementation.
- There is no autograd here. Gradients are separate `Tensor` buffers attached
  to `Parameter` objects by an external differentiation step.
- Optimizers work on the backing array (`data`) directly and rely on
  `copy_from` / `copy_from_numpy` for shape-checked writes.
"""

from __future__ import annotations

from typing import Any, Union, Sequence

import numpy as np

from ...domain._tensor import ITensor
from ...domain._errors import ShapeMismatchError

Number = Union[int, float]


def _normalize_shape(shape_like: Union[int, Sequence[int]]) -> tuple[int, ...]:
    if isinstance(shape_like, (int, np.integer)):
        shape = (int(shape_like),)
    else:
        shape = tuple(int(d) for d in shape_like)
    if any(d < 0 for d in shape):
        raise ValueError(f"shape dimensions must be >= 0, got {shape}")
    return shape


class Tensor(ITensor):
    """
    Concrete tensor implementation (NumPy CPU backend).

    Parameters
    ----------
    shape : tuple[int, ...]
        Tensor shape. A scalar tensor has shape ``()``.
    dtype : np.dtype, optional
        Element dtype for this tensor. Defaults to np.float32.

    Notes
    -----
    - Storage is a NumPy ndarray initialized to zeros.
    - `data` returns the live backing array; mutating it mutates the tensor.
      `to_numpy` returns a copy.
    """

    def __init__(
        self,
        shape: Union[int, Sequence[int]],
        *,
        dtype: Any = np.float32,
    ) -> None:
        self._shape: tuple[int, ...] = _normalize_shape(shape)
        self._dtype: np.dtype = np.dtype(dtype)
        self._data: np.ndarray = np.zeros(self._shape, dtype=self._dtype)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={self._shape}, dtype={self._dtype})"

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the tensor shape.

        Returns
        -------
        tuple[int, ...]
            Shape fixed at construction.
        """
        return self._shape

    @property
    def dtype(self) -> np.dtype:
        """
        Return the element dtype of this tensor.
        """
        return self._dtype

    @property
    def data(self) -> np.ndarray:
        """
        Return the NumPy array backing this tensor (not a copy).
        """
        return self._data

    def numel(self) -> int:
        """
        Return the total number of elements in the tensor.
        """
        return int(self._data.size)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_numpy(cls, arr: Any, *, dtype: Any = None, **kwargs) -> "Tensor":
        """
        Create a tensor holding a copy of an array-like value.

        Parameters
        ----------
        arr : Any
            Array-like object accepted by `np.asarray`, including scalars.
        dtype : np.dtype, optional
            Target dtype. Defaults to np.float32.
        **kwargs
            Extra keyword arguments forwarded to the constructor (subclasses
            use this for flags such as `requires_grad`).

        Returns
        -------
        Tensor
            A new tensor with the same shape as `arr`.
        """
        dt = np.dtype(dtype) if dtype is not None else np.dtype(np.float32)
        arr_nd = np.asarray(arr, dtype=dt)
        out = cls(arr_nd.shape, dtype=dt, **kwargs)
        out._data[...] = arr_nd
        return out

    @classmethod
    def zeros_like(cls, other: "ITensor", *, dtype: Any = None) -> "Tensor":
        """
        Create a zero-filled tensor with the shape (and dtype) of `other`.
        """
        if dtype is None:
            dtype = getattr(other, "dtype", np.float32)
        return cls(other.shape, dtype=dtype)

    # ------------------------------------------------------------------
    # Data movement
    # ------------------------------------------------------------------
    def to_numpy(self) -> np.ndarray:
        """
        Return a copy of the tensor contents.
        """
        return self._data.copy()

    def item(self) -> float:
        """
        Return the value of a single-element tensor as a Python float.

        Raises
        ------
        ValueError
            If the tensor holds more than one element.
        """
        if self.numel() != 1:
            raise ValueError(
                f"item() requires a single-element tensor, got shape {self._shape}"
            )
        return float(self._data.reshape(-1)[0])

    def copy_from_numpy(self, arr: Any) -> None:
        """
        Copy data from a NumPy array (or array-like / scalar) into this tensor.

        Parameters
        ----------
        arr : Any
            Array-like object accepted by `np.asarray`, including NumPy scalars.

        Raises
        ------
        ShapeMismatchError
            If the array shape differs from the tensor shape.
        """
        arr_nd = np.asarray(arr, dtype=self._dtype)

        # Strict shape check (including scalar shape == ())
        if arr_nd.shape != self._shape:
            raise ShapeMismatchError.for_shapes("array", self._shape, arr_nd.shape)

        self._data[...] = arr_nd

    def copy_from(self, other: "Tensor") -> None:
        """
        Copy data from another tensor into this tensor (in-place).

        Raises
        ------
        TypeError
            If `other` is not a Tensor, or if dtypes differ.
        ShapeMismatchError
            If shapes differ.
        """
        if not isinstance(other, Tensor):
            raise TypeError(f"copy_from expects a Tensor, got {type(other)!r}")

        if self._shape != other.shape:
            raise ShapeMismatchError.for_shapes("tensor", self._shape, other.shape)

        if self._dtype != other.dtype:
            raise TypeError(
                f"dtype mismatch in copy_from: {self._dtype} vs {other.dtype}"
            )

        self._data[...] = other._data

    def fill(self, value: Number) -> None:
        """
        Fill the tensor in-place with a scalar value.
        """
        self._data.fill(value)

    def clone(self) -> "Tensor":
        """
        Return an independent tensor with the same shape, dtype and contents.
        """
        return Tensor.from_numpy(self._data, dtype=self._dtype)

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        if dtype is None:
            return self.to_numpy()
        return self._data.astype(dtype)
