"""
Per-parameter optimizer state.

`MomentState` holds the first-moment (`velocity`) and second-moment
(`variance`) accumulators for one parameter. Both are zero-initialized and
keep the parameter's shape for their whole lifetime; only the update functions
in `_moment` write into them.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...domain._tensor import ITensor
from ..tensor._tensor import Tensor


@dataclass
class MomentState:
    """
    First/second moment accumulators for a single parameter.

    Attributes
    ----------
    velocity : Tensor
        Exponential moving average of gradients.
    variance : Tensor
        Second-moment estimate of gradients (rule-dependent).
    """

    velocity: Tensor
    variance: Tensor

    @classmethod
    def zeros_like(cls, param: ITensor) -> "MomentState":
        """
        Create zero-filled state matching `param`'s shape and dtype.
        """
        return cls(velocity=Tensor.zeros_like(param), variance=Tensor.zeros_like(param))

    @property
    def shape(self) -> tuple[int, ...]:
        return self.velocity.shape

    def snapshot(self) -> "MomentState":
        """
        Return an independent copy of this state.
        """
        return MomentState(velocity=self.velocity.clone(), variance=self.variance.clone())


@dataclass
class MomentumState:
    """
    Heavy-ball momentum buffer used by SGD.
    """

    buffer: Tensor

    @classmethod
    def zeros_like(cls, param: ITensor) -> "MomentumState":
        return cls(buffer=Tensor.zeros_like(param))

    @property
    def shape(self) -> tuple[int, ...]:
        return self.buffer.shape
