from ._errors import (
    OptimizerError,
    ShapeMismatchError,
    InvalidHyperparameterError,
)
from ._hyperparameters import MomentHyperparameters, SGDHyperparameters, StepCounter
from ._tensor import ITensor
from ._parameter import IParameter
from ._optimizers import IOptimizer

__all__ = [
    OptimizerError.__name__,
    ShapeMismatchError.__name__,
    InvalidHyperparameterError.__name__,
    MomentHyperparameters.__name__,
    SGDHyperparameters.__name__,
    StepCounter.__name__,
    ITensor.__name__,
    IParameter.__name__,
    IOptimizer.__name__,
]
