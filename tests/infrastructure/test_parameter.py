from unittest import TestCase
import unittest

import numpy as np

from keyoptim.domain._errors import ShapeMismatchError
from keyoptim.infrastructure.tensor import Tensor
from keyoptim.infrastructure._parameter import Parameter


class TestParameterInfrastructure(TestCase):

    def test_parameter_initialization_inherits_tensor_contract(self):
        """Parameter should behave like Tensor for shape/dtype."""
        p = Parameter((2, 3), requires_grad=True)

        self.assertIsInstance(p, Tensor)
        self.assertEqual(p.shape, (2, 3))
        self.assertEqual(p.dtype, np.float32)

    def test_parameter_requires_grad_default_true(self):
        """requires_grad should default to True unless specified."""
        p = Parameter((2, 2))
        self.assertIsInstance(p.requires_grad, bool)
        self.assertTrue(p.requires_grad)

    def test_parameter_requires_grad_can_toggle(self):
        """requires_grad should be publicly mutable via property setter."""
        p = Parameter((2, 2), requires_grad=True)

        p.requires_grad = False
        self.assertFalse(p.requires_grad)

        p.requires_grad = True
        self.assertTrue(p.requires_grad)

    def test_parameter_grad_initially_none(self):
        """grad should start as None."""
        self.assertIsNone(Parameter((2, 2)).grad)

    def test_from_numpy_keeps_parameter_type(self):
        p = Parameter.from_numpy([1.0, 2.0], requires_grad=False, name="w")
        self.assertIsInstance(p, Parameter)
        self.assertFalse(p.requires_grad)
        self.assertEqual(p.name, "w")
        self.assertIn("'w'", repr(p))

    def test_set_grad_accepts_tensor_and_array(self):
        p = Parameter((2,))
        g = Tensor.from_numpy([0.5, -0.5])
        p.set_grad(g)
        self.assertIs(p.grad, g)

        p.set_grad(np.array([1.0, 2.0]))
        self.assertIsInstance(p.grad, Tensor)
        self.assertEqual(p.grad.dtype, np.float32)
        np.testing.assert_array_equal(p.grad.to_numpy(), [1.0, 2.0])

    def test_set_grad_shape_mismatch(self):
        p = Parameter((2,))
        with self.assertRaises(ShapeMismatchError):
            p.set_grad(np.zeros((3,)))
        self.assertIsNone(p.grad)

    def test_set_grad_none_clears(self):
        p = Parameter((1,))
        p.set_grad([1.0])
        p.set_grad(None)
        self.assertIsNone(p.grad)

    def test_zero_grad_clears(self):
        p = Parameter((1,))
        p.set_grad([1.0])
        p.zero_grad()
        self.assertIsNone(p.grad)

    def test_accumulate_grad_sums_contributions(self):
        p = Parameter((2,))
        first = Tensor.from_numpy([1.0, 1.0])
        p.accumulate_grad(first)
        p.accumulate_grad(np.array([0.5, -1.0]))

        np.testing.assert_allclose(p.grad.to_numpy(), [1.5, 0.0])
        # the first contribution is copied, not aliased
        np.testing.assert_array_equal(first.to_numpy(), [1.0, 1.0])

    def test_accumulate_grad_ignored_when_frozen(self):
        p = Parameter((2,), requires_grad=False)
        p.accumulate_grad(np.ones(2))
        self.assertIsNone(p.grad)

    def test_accumulate_grad_shape_mismatch(self):
        p = Parameter((2,))
        with self.assertRaises(ShapeMismatchError):
            p.accumulate_grad(np.ones(3))


if __name__ == "__main__":
    unittest.main()
