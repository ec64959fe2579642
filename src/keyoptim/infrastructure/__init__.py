from .tensor import Tensor
from ._parameter import Parameter
from .optimizers import (
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

__all__ = [
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
