"""
Optimizer-related exceptions for KeyOptim.

This module defines the custom errors raised by optimizers and by the tensor
buffers they update. Both concrete errors are fatal: they are raised before any
state is mutated, and the library never attempts local recovery.

- `ShapeMismatchError` signals that a parameter, gradient or optimizer-state
  tensor disagrees in shape with its counterpart.
- `InvalidHyperparameterError` signals an out-of-range configuration value and
  is raised once, at configuration time.

Both subclass `ValueError` so callers that already guard against `ValueError`
keep working.
"""

from __future__ import annotations

from typing import Optional


class OptimizerError(Exception):
    """
    Base class for all KeyOptim errors.
    """


class ShapeMismatchError(OptimizerError, ValueError):
    """
    Raised when tensors that must be shape-matched disagree.

    Attributes
    ----------
    index : Optional[int]
        Position of the offending parameter in the batch passed to the
        optimizer, if known.
    dim : Optional[int]
        First dimension at which the shapes disagree. None when the tensors
        differ in rank (or when only list lengths disagree).
    expected : Optional[tuple[int, ...]]
        Shape the tensor was required to have.
    actual : Optional[tuple[int, ...]]
        Shape that was actually provided.
    """

    def __init__(
        self,
        message: str,
        *,
        index: Optional[int] = None,
        dim: Optional[int] = None,
        expected: Optional[tuple[int, ...]] = None,
        actual: Optional[tuple[int, ...]] = None,
    ) -> None:
        super().__init__(message)
        self.index = index
        self.dim = dim
        self.expected = expected
        self.actual = actual

    @classmethod
    def for_shapes(
        cls,
        what: str,
        expected: tuple[int, ...],
        actual: tuple[int, ...],
        *,
        index: Optional[int] = None,
    ) -> "ShapeMismatchError":
        """
        Build a diagnostic naming the parameter index and mismatching dimension.

        Parameters
        ----------
        what : str
            Human-readable name of the offending tensor (e.g., "gradient").
        expected : tuple[int, ...]
            Reference shape (usually the parameter's).
        actual : tuple[int, ...]
            Offending shape.
        index : Optional[int], optional
            Parameter index within the current step call.

        Returns
        -------
        ShapeMismatchError
            The error instance (not raised).
        """
        expected = tuple(expected)
        actual = tuple(actual)
        dim = first_mismatching_dim(expected, actual)

        where = f"parameter {index}: " if index is not None else ""
        if dim is None:
            detail = f"rank {len(actual)} does not match rank {len(expected)}"
        else:
            detail = (
                f"dimension {dim} is {actual[dim]}, expected {expected[dim]}"
            )
        message = (
            f"{where}{what} shape {actual} does not match {expected} ({detail})"
        )
        return cls(message, index=index, dim=dim, expected=expected, actual=actual)


class InvalidHyperparameterError(OptimizerError, ValueError):
    """
    Raised when an optimizer hyperparameter is outside its valid range.

    Attributes
    ----------
    name : str
        Hyperparameter name (e.g., "beta1").
    value : object
        The rejected value.
    """

    def __init__(self, name: str, value: object, constraint: str) -> None:
        """
        Initialize the InvalidHyperparameterError.

        Parameters
        ----------
        name : str
            Hyperparameter name.
        value : object
            The rejected value.
        constraint : str
            Description of the valid range (e.g., "must be in [0, 1)").
        """
        super().__init__(f"{name} {constraint}, got {value!r}")
        self.name = name
        self.value = value


def first_mismatching_dim(
    expected: tuple[int, ...], actual: tuple[int, ...]
) -> Optional[int]:
    """
    Return the first dimension where two shapes disagree.

    Returns None if the ranks differ or the shapes are identical.
    """
    if len(expected) != len(actual):
        return None
    for i, (a, b) in enumerate(zip(expected, actual)):
        if a != b:
            return i
    return None
