"""
Behavioral tests for the moment-based update core (`moment_step`).
"""

import unittest
import warnings

import numpy as np

from keyoptim.domain._errors import ShapeMismatchError
from keyoptim.domain._hyperparameters import MomentHyperparameters, StepCounter
from keyoptim.infrastructure.optimizers import (
    MomentState,
    adam_step,
    moment_step,
    yogi_step,
)
from keyoptim.infrastructure.tensor import Tensor


def _f64(values) -> Tensor:
    return Tensor.from_numpy(values, dtype=np.float64)


def _states_for(params):
    return [MomentState.zeros_like(p) for p in params]


class TestMomentStepBasics(unittest.TestCase):
    def setUp(self):
        self.hp = MomentHyperparameters.adam_defaults(learning_rate=0.01)

    def test_concrete_scalar_scenario(self):
        p = _f64(1.0)
        st = MomentState.zeros_like(p)
        counter = StepCounter()

        t = adam_step([p], [1.0], [st], self.hp, counter)

        self.assertEqual(t, 1)
        self.assertAlmostEqual(st.velocity.item(), 0.1, places=12)
        self.assertAlmostEqual(st.variance.item(), 0.001, places=12)
        self.assertAlmostEqual(p.item(), 1.0 - 0.01 * 1.0 / (1.0 + 1e-6), places=12)
        self.assertAlmostEqual(p.item(), 0.99, places=6)

        # remaining two steps of the [1.0, 1.0, 1.0] sequence keep v_hat = s_hat = 1
        adam_step([p], [1.0], [st], self.hp, counter)
        adam_step([p], [1.0], [st], self.hp, counter)
        self.assertEqual(counter.value, 3)
        self.assertAlmostEqual(p.item(), 1.0 - 3 * 0.01 / (1.0 + 1e-6), places=10)

    def test_zero_gradients_leave_parameters_unchanged(self):
        for rule in ("adam", "yogi"):
            with self.subTest(rule=rule):
                params = [_f64([1.0, -2.0]), _f64([[0.5, 0.25]])]
                before = [p.to_numpy() for p in params]
                states = _states_for(params)
                counter = StepCounter()

                for _ in range(3):
                    moment_step(
                        params,
                        [np.zeros(2), np.zeros((1, 2))],
                        states,
                        self.hp,
                        counter,
                        rule=rule,
                    )

                for p, b in zip(params, before):
                    np.testing.assert_array_equal(p.to_numpy(), b)
                self.assertEqual(counter.value, 3)

    def test_first_step_bias_correction_recovers_gradient(self):
        g = np.array([0.3, -1.5, 4.0, -0.01])
        lr, eps = 0.05, 1e-6
        for rule in ("adam", "yogi"):
            with self.subTest(rule=rule):
                hp = MomentHyperparameters(learning_rate=lr, epsilon=eps)
                p = _f64(np.zeros(4))
                st = MomentState.zeros_like(p)

                moment_step([p], [g], [st], hp, StepCounter(), rule=rule)

                v_hat = st.velocity.to_numpy() / (1 - hp.beta1)
                s_hat = st.variance.to_numpy() / (1 - hp.beta2)
                np.testing.assert_allclose(v_hat, g, rtol=1e-12)
                np.testing.assert_allclose(s_hat, g * g, rtol=1e-12)
                np.testing.assert_allclose(
                    p.to_numpy(), -lr * g / (np.abs(g) + eps), rtol=1e-12
                )

    def test_counter_advances_once_per_call_regardless_of_batch_size(self):
        counter = StepCounter()
        for n_params in (0, 1, 5):
            params = [_f64(np.ones(3)) for _ in range(n_params)]
            states = _states_for(params)
            grads = [np.ones(3)] * n_params
            start = counter.value
            for _ in range(4):
                moment_step(params, grads, states, self.hp, counter)
            self.assertEqual(counter.value - start, 4)

    def test_all_parameters_in_a_call_share_the_step_index(self):
        """
        Identical parameters in one call must see identical bias corrections.
        """
        params = [_f64([1.0]), _f64([1.0]), _f64([1.0])]
        states = _states_for(params)
        counter = StepCounter()
        for g in (0.5, -0.25, 2.0):
            moment_step(params, [[g]] * 3, states, self.hp, counter)

        values = [p.item() for p in params]
        self.assertEqual(values[0], values[1])
        self.assertEqual(values[1], values[2])

        single = _f64([1.0])
        single_state = MomentState.zeros_like(single)
        single_counter = StepCounter()
        for g in (0.5, -0.25, 2.0):
            moment_step([single], [[g]], [single_state], self.hp, single_counter)
        self.assertEqual(single.item(), values[0])

    def test_resumed_counter_drives_bias_correction(self):
        p = _f64([0.0])
        st = MomentState.zeros_like(p)
        t = adam_step([p], [[1.0]], [st], self.hp, StepCounter(9))
        self.assertEqual(t, 10)
        v_hat = 0.1 / (1 - 0.9**10)
        s_hat = 0.001 / (1 - 0.999**10)
        np.testing.assert_allclose(
            p.to_numpy(), [-0.01 * v_hat / (np.sqrt(s_hat) + 1e-6)], rtol=1e-12
        )

    def test_deterministic_trajectories(self):
        rng = np.random.default_rng(1234)
        grads = rng.normal(size=(25, 2, 3)) * np.logspace(-3, 2, 25)[:, None, None]

        def run(rule):
            p = _f64(np.full((2, 3), 0.5))
            st = MomentState.zeros_like(p)
            counter = StepCounter()
            trajectory = []
            for g in grads:
                moment_step([p], [g], [st], self.hp, counter, rule=rule)
                trajectory.append(p.to_numpy())
            return np.stack(trajectory)

        for rule in ("adam", "yogi"):
            with self.subTest(rule=rule):
                np.testing.assert_array_equal(run(rule), run(rule))

    def test_accepts_plain_arrays_and_state_pairs(self):
        p = np.array([1.0, 1.0])
        velocity = np.zeros(2)
        variance = np.zeros(2)
        adam_step([p], [np.array([1.0, -1.0])], [(velocity, variance)], self.hp, StepCounter())
        np.testing.assert_allclose(velocity, [0.1, -0.1])
        np.testing.assert_allclose(variance, [0.001, 0.001])
        np.testing.assert_allclose(p, [0.99, 1.01], rtol=1e-6)

    def test_gradients_are_not_modified(self):
        hp = MomentHyperparameters(learning_rate=0.1, weight_decay=0.5)
        p = _f64([2.0])
        g = _f64([1.0])
        adam_step([p], [g], _states_for([p]), hp, StepCounter())
        np.testing.assert_array_equal(g.to_numpy(), [1.0])

    def test_custom_variance_rule(self):
        calls = []

        def frozen_variance(variance, g2, beta2):
            calls.append(beta2)
            variance[...] = 1.0

        p = _f64([0.0])
        st = MomentState.zeros_like(p)
        moment_step([p], [[1.0]], [st], self.hp, StepCounter(), rule=frozen_variance)
        self.assertEqual(calls, [0.999])
        self.assertEqual(st.variance.item(), 1.0)

    def test_unknown_rule_raises_before_advancing(self):
        counter = StepCounter()
        with self.assertRaises(ValueError):
            moment_step([], [], [], self.hp, counter, rule="adagrad")
        self.assertEqual(counter.value, 0)

    def test_parameter_must_be_mutable_buffer(self):
        with self.assertRaises(TypeError):
            adam_step([[1.0]], [[1.0]], [(np.zeros(1), np.zeros(1))], self.hp, StepCounter())

    def test_non_finite_update_warns(self):
        p = _f64([1.0])
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            adam_step([p], [[np.nan]], _states_for([p]), self.hp, StepCounter())
        self.assertTrue(any(issubclass(w.category, RuntimeWarning) for w in caught))


class TestMomentStepInvalidBatch(unittest.TestCase):
    def setUp(self):
        self.hp = MomentHyperparameters()
        self.params = [_f64([1.0, 2.0]), _f64([[3.0, 4.0], [5.0, 6.0]])]
        self.states = _states_for(self.params)
        # give the states a history so "untouched" is meaningful
        self.counter = StepCounter()
        adam_step(self.params, [[0.1, 0.2], np.ones((2, 2))], self.states, self.hp, self.counter)
        self.before_params = [p.to_numpy() for p in self.params]
        self.before_states = [s.snapshot() for s in self.states]

    def assert_untouched(self):
        for p, b in zip(self.params, self.before_params):
            np.testing.assert_array_equal(p.to_numpy(), b)
        for s, b in zip(self.states, self.before_states):
            np.testing.assert_array_equal(s.velocity.to_numpy(), b.velocity.to_numpy())
            np.testing.assert_array_equal(s.variance.to_numpy(), b.variance.to_numpy())
        self.assertEqual(self.counter.value, 1)

    def test_gradient_shape_mismatch(self):
        grads = [[1.0, 1.0], np.ones((2, 3))]
        for rule in ("adam", "yogi"):
            with self.subTest(rule=rule):
                with self.assertRaises(ShapeMismatchError) as cm:
                    moment_step(self.params, grads, self.states, self.hp, self.counter, rule=rule)
                self.assertEqual(cm.exception.index, 1)
                self.assertEqual(cm.exception.dim, 1)
                self.assertEqual(cm.exception.expected, (2, 2))
                self.assertEqual(cm.exception.actual, (2, 3))
                self.assert_untouched()

    def test_state_shape_mismatch(self):
        states = [self.states[0], MomentState.zeros_like(_f64(np.zeros((2, 1))))]
        with self.assertRaises(ShapeMismatchError) as cm:
            adam_step(self.params, [[1.0, 1.0], np.ones((2, 2))], states, self.hp, self.counter)
        self.assertEqual(cm.exception.index, 1)
        self.assertIn("velocity", str(cm.exception))
        self.assert_untouched()

    def test_length_mismatch(self):
        with self.assertRaises(ShapeMismatchError):
            yogi_step(self.params, [[1.0, 1.0]], self.states, self.hp, self.counter)
        self.assert_untouched()

    def test_integer_parameter_rejected_before_any_write(self):
        params = [self.params[0], Tensor.from_numpy([[3, 4], [5, 6]], dtype=np.int64)]
        states = [self.states[0], MomentState.zeros_like(params[1])]
        with self.assertRaises(TypeError) as cm:
            adam_step(params, [[1.0, 1.0], np.ones((2, 2))], states, self.hp, self.counter)
        self.assertIn("parameter 1", str(cm.exception))
        self.assertIn("floating", str(cm.exception))
        self.assert_untouched()

    def test_read_only_parameter_rejected_before_any_write(self):
        frozen = np.array([[3.0, 4.0], [5.0, 6.0]])
        frozen.flags.writeable = False
        params = [self.params[0], frozen]
        with self.assertRaises(TypeError) as cm:
            yogi_step(params, [[1.0, 1.0], np.ones((2, 2))], self.states, self.hp, self.counter)
        self.assertIn("read-only", str(cm.exception))
        self.assert_untouched()

    def test_read_only_state_rejected_before_any_write(self):
        self.states[1].variance.data.flags.writeable = False
        with self.assertRaises(TypeError) as cm:
            adam_step(self.params, [[1.0, 1.0], np.ones((2, 2))], self.states, self.hp, self.counter)
        self.assertIn("variance", str(cm.exception))
        self.assert_untouched()

    def test_non_numeric_gradient_rejected(self):
        grads = [[1.0, 1.0], np.full((2, 2), "x")]
        with self.assertRaises(TypeError):
            adam_step(self.params, grads, self.states, self.hp, self.counter)
        self.assert_untouched()


class TestAdamVersusYogi(unittest.TestCase):
    """
    Adam's variance relaxes toward g^2 at a rate proportional to (s - g^2);
    Yogi's moves by (1 - beta2) * g^2 in the direction of g^2. With gradients
    kept just below the running variance, Adam's denominator stays inflated
    while Yogi's follows the gradients down.
    """

    def test_variance_increment_is_bounded_for_yogi(self):
        beta2 = 0.9
        hp = MomentHyperparameters(learning_rate=0.01, beta2=beta2, epsilon=1e-3)
        p = _f64([0.0])
        st = MomentState.zeros_like(p)
        counter = StepCounter()
        sequence = [1.0] * 20 + [1000.0] + [1.0] * 20

        previous = 0.0
        for g in sequence:
            yogi_step([p], [[g]], [st], hp, counter)
            current = st.variance.item()
            self.assertLessEqual(abs(current - previous), (1 - beta2) * g * g + 1e-9)
            previous = current

    def test_yogi_keeps_moving_where_adam_stalls(self):
        beta2, alpha, steps, lr = 0.5, 0.99, 200, 0.01
        hp = MomentHyperparameters(
            learning_rate=lr, beta1=0.0, beta2=beta2, epsilon=1e-200
        )

        # Adversarial sequence: after the first step every squared gradient is
        # 99% of Yogi's current variance estimate.
        s_yogi = (1 - beta2) * 1.0
        grads = [1.0]
        for _ in range(steps - 1):
            g = np.sqrt(alpha * s_yogi)
            grads.append(g)
            s_yogi -= (1 - beta2) * g * g

        def run(step_fn):
            p = _f64([0.0])
            st = MomentState.zeros_like(p)
            counter = StepCounter()
            moves = []
            for g in grads:
                before = p.item()
                step_fn([p], [[g]], [st], hp, counter)
                moves.append(abs(p.item() - before))
            return np.asarray(moves), st.variance.item()

        adam_moves, adam_var = run(adam_step)
        yogi_moves, yogi_var = run(yogi_step)

        # identical first step
        self.assertAlmostEqual(adam_moves[0], yogi_moves[0], places=15)

        # Yogi keeps taking steps larger than lr; Adam's shrink every step
        self.assertTrue(np.all(yogi_moves[-50:] > lr))
        self.assertTrue(np.all(np.diff(adam_moves[-100:]) < 0))
        self.assertLess(adam_moves[-1], 0.2 * lr)
        self.assertGreater(yogi_moves[-1] / adam_moves[-1], 5.0)
        self.assertGreater(adam_var / yogi_var, 50.0)


if __name__ == "__main__":
    unittest.main()
