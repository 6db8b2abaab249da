from __future__ import annotations

import unittest
import numpy as np

from stridegrad.infrastructure.graph import Graph
from stridegrad.infrastructure.optimizers import SGD
from stridegrad.infrastructure.tensor import StridedTensor


def _mse(pred: np.ndarray, target: np.ndarray) -> float:
    return float(np.mean((pred - target) ** 2))


class TestGraphXORTraining(unittest.TestCase):
    def test_xor_training_one_hidden_layer(self):
        # ---------------- Dataset ----------------
        x_np = np.array(
            [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]],
            dtype=np.float32,
        )
        y_np = np.array([[0.0], [1.0], [1.0], [0.0]], dtype=np.float32)

        # ---------------- Model ----------------
        hidden_dim = 8
        rng = np.random.default_rng(0)
        w1_t = StridedTensor.from_numpy(
            rng.uniform(-1.0, 1.0, (2, hidden_dim)).astype(np.float32)
        )
        w2_t = StridedTensor.from_numpy(
            rng.uniform(-1.0, 1.0, (hidden_dim, 1)).astype(np.float32)
        )

        g = Graph()
        x = g.leaf(StridedTensor.from_numpy(x_np), name="x")
        # Bias row is broadcast over the batch as ones @ b1
        ones = g.leaf(StridedTensor.ones((4, 1)), name="ones")
        b1 = g.parameter(StridedTensor.zeros((1, hidden_dim)), name="b1")
        w1 = g.parameter(w1_t, name="w1")
        w2 = g.parameter(w2_t, name="w2")
        h = g.sigmoid(g.add(g.matmul(x, w1), g.matmul(ones, b1)))
        pred = g.sigmoid(g.matmul(h, w2), name="pred")

        # ---------------- Loss (MSE gradient fed through a target leaf) ----------------
        # d(mean((p - y)^2))/dp = 2 (p - y) / N, applied by scaling the
        # output via a weighting leaf multiplied onto the prediction.
        weight = g.leaf(StridedTensor.zeros((4, 1)), name="dloss")
        g.mul(pred, weight)

        opt = SGD(lr=2.0, graph=g)

        # ---------------- Training loop ----------------
        losses = []
        for _ in range(3000):
            opt.zero_grad()
            g.forward()
            p = g.value(pred).to_numpy()
            losses.append(_mse(p, y_np))

            # MUL backward reads its inputs, so the fresh loss gradient is picked up
            g.set_value(weight, StridedTensor.from_numpy(2.0 * (p - y_np) / len(y_np)))
            g.backward()
            opt.step(g.parameters())

        self.assertLess(losses[-1], losses[0])
        self.assertLess(losses[-1], 0.75 * losses[0])

        # Parameters were trained in place through the caller's tensors
        self.assertIs(g.value(w1), w1_t)
        self.assertIs(g.value(w2), w2_t)


if __name__ == "__main__":
    unittest.main()
