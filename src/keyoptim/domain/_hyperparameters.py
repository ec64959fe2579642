"""
Typed optimizer configuration and the shared step counter.

This module replaces loosely-typed hyperparameter mappings with frozen,
validated dataclasses, and keeps the step counter as a separate object that is
passed explicitly to every update. Keeping the counter out of the configuration
makes the "advance once per step call" rule visible at the call site.

Notes
-----
- Validation happens once, in `__post_init__`. Update functions never
  re-validate configuration.
- This module is backend-agnostic and must not depend on NumPy.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Any, ClassVar, Mapping, Optional

from ._errors import InvalidHyperparameterError


def _check_positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidHyperparameterError(name, value, "must be > 0")


def _check_unit_interval(name: str, value: float) -> None:
    # [0, 1): beta == 1 would make bias correction divide by zero.
    if not (0.0 <= value < 1.0):
        raise InvalidHyperparameterError(name, value, "must be in [0, 1)")


def _check_non_negative(name: str, value: float) -> None:
    if not math.isfinite(value) or value < 0.0:
        raise InvalidHyperparameterError(name, value, "must be >= 0")


def _coerce_fields(obj: Any) -> None:
    # frozen dataclass: bypass __setattr__
    for f in fields(obj):
        value = getattr(obj, f.name)
        try:
            coerced = float(value)
        except (TypeError, ValueError):
            raise InvalidHyperparameterError(
                f.name, value, "must be a real number"
            ) from None
        object.__setattr__(obj, f.name, coerced)


def _from_mapping(cls, mapping: Mapping[str, Any], defaults):
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(mapping) - known)
    if unknown:
        raise InvalidHyperparameterError(
            unknown[0], mapping[unknown[0]], f"is not one of {sorted(known)}"
        )
    base = defaults if defaults is not None else cls()
    return replace(base, **dict(mapping))


@dataclass(frozen=True)
class MomentHyperparameters:
    """
    Hyperparameters shared by the moment-based optimizers (Adam, Yogi).

    Attributes
    ----------
    learning_rate : float
        Step size. Must be > 0.
    beta1 : float
        Decay rate of the first-moment (velocity) estimate, in [0, 1).
    beta2 : float
        Decay rate of the second-moment (variance) estimate, in [0, 1).
    epsilon : float
        Denominator stabilizer. Must be > 0.
    weight_decay : float
        Classical (coupled) L2 coefficient added to the gradient as
        ``g + weight_decay * p``. Must be >= 0. Defaults to 0.0.
    """

    learning_rate: float = 1e-3
    beta1: float = 0.9
    beta2: float = 0.999
    epsilon: float = 1e-6
    weight_decay: float = 0.0

    ADAM_EPSILON: ClassVar[float] = 1e-6
    YOGI_EPSILON: ClassVar[float] = 1e-3

    def __post_init__(self) -> None:
        _coerce_fields(self)

        _check_positive("learning_rate", self.learning_rate)
        _check_unit_interval("beta1", self.beta1)
        _check_unit_interval("beta2", self.beta2)
        _check_positive("epsilon", self.epsilon)
        _check_non_negative("weight_decay", self.weight_decay)

    @classmethod
    def adam_defaults(cls, **overrides: float) -> "MomentHyperparameters":
        """Adam defaults: ``beta1=0.9, beta2=0.999, epsilon=1e-6``."""
        return cls(**{"epsilon": cls.ADAM_EPSILON, **overrides})

    @classmethod
    def yogi_defaults(cls, **overrides: float) -> "MomentHyperparameters":
        """Yogi defaults: Adam's betas with the looser ``epsilon=1e-3``."""
        return cls(**{"epsilon": cls.YOGI_EPSILON, **overrides})

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        defaults: Optional["MomentHyperparameters"] = None,
    ) -> "MomentHyperparameters":
        """
        Build a validated configuration from a plain mapping.

        Parameters
        ----------
        mapping : Mapping[str, Any]
            Field names to values. Keys must be field names of this class.
        defaults : Optional[MomentHyperparameters], optional
            Base configuration the mapping overrides. Defaults to `cls()`.

        Raises
        ------
        InvalidHyperparameterError
            If a key is unknown or a value is out of range.
        """
        return _from_mapping(cls, mapping, defaults)


@dataclass(frozen=True)
class SGDHyperparameters:
    """
    Hyperparameters for minibatch SGD.

    Attributes
    ----------
    learning_rate : float
        Step size. Must be > 0.
    momentum : float
        Heavy-ball momentum coefficient in [0, 1). 0 disables momentum.
    weight_decay : float
        Classical (coupled) L2 coefficient. Must be >= 0.
    """

    learning_rate: float = 1e-3
    momentum: float = 0.0
    weight_decay: float = 0.0

    def __post_init__(self) -> None:
        _coerce_fields(self)

        _check_positive("learning_rate", self.learning_rate)
        _check_unit_interval("momentum", self.momentum)
        _check_non_negative("weight_decay", self.weight_decay)

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        defaults: Optional["SGDHyperparameters"] = None,
    ) -> "SGDHyperparameters":
        """Build a validated configuration from a plain mapping."""
        return _from_mapping(cls, mapping, defaults)


class StepCounter:
    """
    Monotonic optimizer step counter.

    `value` is the number of completed step calls. An update advances the
    counter exactly once per call, before computing bias corrections, so the
    first call uses ``t = 1``.

    A single counter may be shared between several optimizers; the caller is
    then responsible for serializing their step calls.
    """

    __slots__ = ("_value",)

    def __init__(self, value: int = 0) -> None:
        value = int(value)
        if value < 0:
            raise InvalidHyperparameterError("step_count", value, "must be >= 0")
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def advance(self) -> int:
        """
        Increment the counter and return the new value.

        Returns
        -------
        int
            The step index ``t`` (>= 1) to use for the call in progress.
        """
        self._value += 1
        return self._value

    def __repr__(self) -> str:
        return f"StepCounter(value={self._value})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StepCounter):
            return NotImplemented
        return self._value == other._value

    __hash__ = None  # mutable
