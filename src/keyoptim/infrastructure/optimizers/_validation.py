"""
Batch validation shared by the optimizer update functions.

Every update function validates the whole batch of (parameter, gradient,
state) triples before writing anything, so a `ShapeMismatchError` or a
`TypeError` for an unusable buffer always leaves parameters, states and the
step counter untouched.
"""

from __future__ import annotations

import logging
from typing import Any, List, Sequence, Tuple

import numpy as np

from ...domain._errors import ShapeMismatchError
from ..tensor._tensor import Tensor

logger = logging.getLogger(__name__)


def as_buffer(x: Any, what: str = "parameter") -> np.ndarray:
    """
    Return the writable NumPy array behind a tensor or ndarray.

    Raises
    ------
    TypeError
        If `x` is neither a `Tensor` nor an `np.ndarray`; in-place updates
        need a mutable buffer.
    """
    if isinstance(x, Tensor):
        return x.data
    if isinstance(x, np.ndarray):
        return x
    raise TypeError(f"{what} must be a Tensor or numpy.ndarray, got {type(x)!r}")


def as_readonly(x: Any) -> np.ndarray:
    """
    Return a NumPy view of a gradient-like input (Tensor or array-like).
    """
    if isinstance(x, Tensor):
        return x.data
    return np.asarray(x)


def check_lengths(**named: Sequence[Any]) -> int:
    """
    Ensure all named sequences have the same length and return it.
    """
    lengths = {k: len(v) for k, v in named.items()}
    distinct = set(lengths.values())
    if len(distinct) > 1:
        detail = ", ".join(f"{k}={n}" for k, n in lengths.items())
        logger.debug("rejecting step: length mismatch (%s)", detail)
        raise ShapeMismatchError(f"batch length mismatch: {detail}")
    return distinct.pop() if distinct else 0


def check_shape(
    what: str, expected: Tuple[int, ...], actual: Tuple[int, ...], index: int
) -> None:
    """
    Raise `ShapeMismatchError` if `actual` differs from `expected`.
    """
    if tuple(expected) != tuple(actual):
        err = ShapeMismatchError.for_shapes(what, expected, actual, index=index)
        logger.debug("rejecting step: %s", err)
        raise err


def check_writable_float(what: str, arr: np.ndarray, index: int) -> None:
    """
    Raise `TypeError` unless `arr` can take an in-place floating-point update.
    """
    if not np.issubdtype(arr.dtype, np.floating):
        err = TypeError(
            f"parameter {index}: {what} must have a floating dtype, got {arr.dtype}"
        )
    elif not arr.flags.writeable:
        err = TypeError(f"parameter {index}: {what} buffer is read-only")
    else:
        return
    logger.debug("rejecting step: %s", err)
    raise err


def check_real_gradient(arr: np.ndarray, index: int) -> None:
    """
    Raise `TypeError` unless the gradient holds real (integer or float) values.
    """
    if not (
        np.issubdtype(arr.dtype, np.floating) or np.issubdtype(arr.dtype, np.integer)
    ):
        err = TypeError(
            f"parameter {index}: gradient must have a real numeric dtype, "
            f"got {arr.dtype}"
        )
        logger.debug("rejecting step: %s", err)
        raise err


def collect_buffers(
    parameters: Sequence[Any],
    gradients: Sequence[Any],
    states: Sequence[Sequence[Any]],
    state_names: Sequence[str],
) -> List[Tuple[np.ndarray, np.ndarray, Tuple[np.ndarray, ...]]]:
    """
    Validate a batch and return its backing arrays.

    Parameters
    ----------
    parameters : Sequence[Tensor or np.ndarray]
        Parameters to update in place.
    gradients : Sequence[Tensor or array-like]
        One gradient per parameter.
    states : Sequence[Sequence[Tensor or np.ndarray]]
        Per-parameter state buffers, each group ordered like `state_names`.
    state_names : Sequence[str]
        Names used in diagnostics (e.g., ``("velocity", "variance")``).

    Returns
    -------
    list
        ``(param_array, grad_array, state_arrays)`` per index.

    Raises
    ------
    ShapeMismatchError
        If lengths or any pairwise shape disagree.
    TypeError
        If a parameter or state buffer is not a writable floating-point
        array, or a gradient is not real-valued.
    """
    check_lengths(parameters=parameters, gradients=gradients, states=states)

    out = []
    for i, (p, g, group) in enumerate(zip(parameters, gradients, states)):
        p_nd = as_buffer(p, "parameter")
        check_writable_float("parameter", p_nd, i)
        g_nd = as_readonly(g)
        check_real_gradient(g_nd, i)
        check_shape("gradient", p_nd.shape, g_nd.shape, i)

        group = tuple(group)
        if len(group) != len(state_names):
            raise ShapeMismatchError(
                f"parameter {i}: expected {len(state_names)} state buffers "
                f"{tuple(state_names)}, got {len(group)}",
                index=i,
            )
        s_nds = []
        for name, s in zip(state_names, group):
            s_nd = as_buffer(s, name)
            check_writable_float(name, s_nd, i)
            check_shape(name, p_nd.shape, s_nd.shape, i)
            s_nds.append(s_nd)
        out.append((p_nd, g_nd, tuple(s_nds)))
    return out


def warn_if_non_finite(op: str, arrays: Sequence[np.ndarray], t: int) -> None:
    """
    Emit a `RuntimeWarning` if any updated parameter holds NaN or Inf.
    """
    import warnings

    for i, a in enumerate(arrays):
        if not np.all(np.isfinite(a)):
            warnings.warn(
                f"{op}: parameter {i} contains non-finite values after step {t}",
                RuntimeWarning,
                stacklevel=3,
            )
            return
