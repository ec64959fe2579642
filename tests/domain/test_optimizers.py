import unittest

from keyoptim.domain._optimizers import IOptimizer
from keyoptim.domain._parameter import IParameter
from keyoptim.domain._tensor import ITensor
from keyoptim.infrastructure.optimizers import SGD, Adam, Yogi
from keyoptim.infrastructure._parameter import Parameter
from keyoptim.infrastructure.tensor import Tensor


class TestOptimizerProtocol(unittest.TestCase):
    def test_sgd_conforms_to_ioptimizer(self):
        p = Parameter(shape=(1,), requires_grad=True)
        opt = SGD([p], lr=1e-3)
        self.assertIsInstance(opt, IOptimizer)

    def test_adam_conforms_to_ioptimizer(self):
        p = Parameter(shape=(1,), requires_grad=True)
        opt = Adam([p], lr=1e-3)
        self.assertIsInstance(opt, IOptimizer)

    def test_yogi_conforms_to_ioptimizer(self):
        p = Parameter(shape=(1,), requires_grad=True)
        opt = Yogi([p], lr=1e-3)
        self.assertIsInstance(opt, IOptimizer)


class TestTensorProtocols(unittest.TestCase):
    def test_tensor_conforms_to_itensor(self):
        self.assertIsInstance(Tensor((2, 2)), ITensor)

    def test_parameter_conforms_to_iparameter(self):
        p = Parameter((3,))
        self.assertIsInstance(p, IParameter)
        self.assertIsInstance(p, ITensor)


if __name__ == "__main__":
    unittest.main()
