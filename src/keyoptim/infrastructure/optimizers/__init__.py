from ._state import MomentState, MomentumState
from ._moment import (
    VARIANCE_RULES,
    adam_step,
    adam_variance,
    moment_step,
    yogi_step,
    yogi_variance,
)
from ._sgd_update import sgd_step
from ._base import ParameterOptimizer
from ._adam import Adam
from ._yogi import Yogi
from ._sgd import SGD
from ._factory import available_optimizers, create_optimizer, register_optimizer

__all__ = [
    "MomentState",
    "MomentumState",
    "VARIANCE_RULES",
    "adam_step",
    "adam_variance",
    "moment_step",
    "yogi_step",
    "yogi_variance",
    "sgd_step",
    "ParameterOptimizer",
    "Adam",
    "Yogi",
    "SGD",
    "available_optimizers",
    "create_optimizer",
    "register_optimizer",
]
