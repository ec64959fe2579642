"""
KeyOptim: gradient-based optimizers (minibatch SGD, Adam, Yogi) over explicit,
NumPy-backed tensors.
"""

import logging

from .domain import (
    OptimizerError,
    ShapeMismatchError,
    InvalidHyperparameterError,
    MomentHyperparameters,
    SGDHyperparameters,
    StepCounter,
    IOptimizer,
)
from .infrastructure import (
    Tensor,
    Parameter,
    MomentState,
    MomentumState,
    moment_step,
    adam_step,
    yogi_step,
    sgd_step,
    Adam,
    Yogi,
    SGD,
    create_optimizer,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "OptimizerError",
    "ShapeMismatchError",
    "InvalidHyperparameterError",
    "MomentHyperparameters",
    "SGDHyperparameters",
    "StepCounter",
    "IOptimizer",
    "Tensor",
    "Parameter",
    "MomentState",
    "MomentumState",
    "moment_step",
    "adam_step",
    "yogi_step",
    "sgd_step",
    "Adam",
    "Yogi",
    "SGD",
    "create_optimizer",
]
