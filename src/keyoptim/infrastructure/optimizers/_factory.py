"""
Name-based optimizer construction.

`create_optimizer` selects an update policy by name, so training scripts can
switch between SGD, Adam and Yogi from configuration without importing the
concrete classes.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable

from ...domain._optimizers import IOptimizer
from .._parameter import Parameter
from ._adam import Adam
from ._sgd import SGD
from ._yogi import Yogi

OptimizerFactory = Callable[..., IOptimizer]

_REGISTRY: Dict[str, OptimizerFactory] = {
    "sgd": SGD,
    "adam": Adam,
    "yogi": Yogi,
}


def register_optimizer(name: str, factory: OptimizerFactory) -> None:
    """
    Register an optimizer factory under `name` (case-insensitive).

    Raises
    ------
    ValueError
        If the name is already registered.
    """
    key = name.lower()
    if key in _REGISTRY:
        raise ValueError(f"optimizer {name!r} is already registered")
    _REGISTRY[key] = factory


def available_optimizers() -> list[str]:
    return sorted(_REGISTRY)


def create_optimizer(
    name: str,
    params: Iterable[Parameter],
    **kwargs: Any,
) -> IOptimizer:
    """
    Construct an optimizer by name.

    Parameters
    ----------
    name : str
        One of `available_optimizers()` (case-insensitive).
    params : Iterable[Parameter]
        Parameters to optimize.
    **kwargs
        Forwarded to the optimizer constructor (e.g., ``lr``, ``betas``,
        ``eps``, ``momentum``, ``counter``).

    Raises
    ------
    ValueError
        If `name` is not registered.
    InvalidHyperparameterError
        If a hyperparameter is out of range.
    """
    try:
        factory = _REGISTRY[name.lower()]
    except KeyError:
        raise ValueError(
            f"unknown optimizer {name!r}; expected one of {available_optimizers()}"
        ) from None
    return factory(params, **kwargs)
