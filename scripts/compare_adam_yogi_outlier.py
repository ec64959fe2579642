"""
scripts/compare_adam_yogi_outlier.py

Adam vs. Yogi trajectory comparison (NOT a unit test) for KeyOptim.

Feeds both optimizers the same scalar gradient sequence and prints, every
`--report-every` steps, the parameter value, the last update magnitude and
the second-moment estimate of each.

Sequences
---------
- `tracking` (default): after the first step each squared gradient is
  `--alpha` times Yogi's current variance estimate. Adam's variance lags far
  above the gradients and its steps shrink; Yogi's follows them down.
- `outlier`: constant gradient of 1.0 with a single spike of `--spike` at
  `--spike-at`.

Usage
-----
python scripts/compare_adam_yogi_outlier.py
python scripts/compare_adam_yogi_outlier.py --sequence outlier --steps 300 --beta2 0.99
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable, List

import numpy as np

# -------------------------
# Make repo_root/src importable
# -------------------------
THIS_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
SRC_DIR = os.path.join(ROOT_DIR, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from keyoptim.domain._hyperparameters import MomentHyperparameters, StepCounter
from keyoptim.infrastructure.optimizers import MomentState, adam_step, yogi_step
from keyoptim.infrastructure.tensor import Tensor


def tracking_sequence(steps: int, alpha: float, beta2: float) -> List[float]:
    s = (1.0 - beta2) * 1.0
    out = [1.0]
    for _ in range(steps - 1):
        g = float(np.sqrt(alpha * s))
        out.append(g)
        s -= (1.0 - beta2) * g * g
    return out


def outlier_sequence(steps: int, spike: float, spike_at: int) -> List[float]:
    out = [1.0] * steps
    if 0 <= spike_at < steps:
        out[spike_at] = spike
    return out


def run(
    step_fn: Callable, grads: List[float], hp: MomentHyperparameters
) -> List[tuple[float, float, float]]:
    p = Tensor.from_numpy(0.0, dtype=np.float64)
    st = MomentState.zeros_like(p)
    counter = StepCounter()
    rows = []
    for g in grads:
        before = p.item()
        step_fn([p], [g], [st], hp, counter)
        rows.append((p.item(), abs(p.item() - before), st.variance.item()))
    return rows


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--sequence", choices=("tracking", "outlier"), default="tracking")
    ap.add_argument("--steps", type=int, default=200)
    ap.add_argument("--lr", type=float, default=0.01)
    ap.add_argument("--beta1", type=float, default=0.0)
    ap.add_argument("--beta2", type=float, default=0.5)
    ap.add_argument("--eps", type=float, default=1e-200)
    ap.add_argument("--alpha", type=float, default=0.99)
    ap.add_argument("--spike", type=float, default=1000.0)
    ap.add_argument("--spike-at", type=int, default=50)
    ap.add_argument("--report-every", type=int, default=20)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    hp = MomentHyperparameters(
        learning_rate=args.lr, beta1=args.beta1, beta2=args.beta2, epsilon=args.eps
    )
    if args.sequence == "tracking":
        grads = tracking_sequence(args.steps, args.alpha, args.beta2)
    else:
        grads = outlier_sequence(args.steps, args.spike, args.spike_at)

    adam = run(adam_step, grads, hp)
    yogi = run(yogi_step, grads, hp)

    print(f"sequence={args.sequence} steps={args.steps} {hp}")
    print(
        f"{'step':>6} | {'adam p':>12} {'adam |dp|':>12} {'adam s':>12} | "
        f"{'yogi p':>12} {'yogi |dp|':>12} {'yogi s':>12}"
    )
    for i, (a, y) in enumerate(zip(adam, yogi), start=1):
        if i == 1 or i % args.report_every == 0 or i == len(grads):
            print(
                f"{i:>6} | {a[0]:>12.6f} {a[1]:>12.3e} {a[2]:>12.3e} | "
                f"{y[0]:>12.6f} {y[1]:>12.3e} {y[2]:>12.3e}"
            )


if __name__ == "__main__":
    main()
