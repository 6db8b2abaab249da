"""
Stochastic Gradient Descent (SGD) optimizer implementation.

This module provides a minimal SGD optimizer for stridegrad. The optimizer
updates parameter nodes in place using their accumulated gradients and a
fixed learning rate, optionally applying classical L2 regularization (coupled
weight decay).

Design notes
------------
- Parameters are passed to every `step` call (typically
  ``graph.parameters()``); the optimizer keeps only its hyperparameters.
- Updates are written into the parameter tensor's storage, so any reference
  the caller holds to that tensor observes the new values.
- `zero_grad` delegates to the bound graph's `zero_grad`; the reset logic
  lives in one place.
- Parameters whose gradient was never materialized are skipped with a
  `RuntimeWarning`.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Iterable, Optional

from ...domain._errors import GraphError
from ..graph import Graph, Node


@dataclass
class SGD:
    """
    Stochastic Gradient Descent (SGD) optimizer.

    Update rule
    -----------
    For each parameter ``p`` with gradient ``g``:

    - If ``weight_decay > 0`` (classical L2 regularization):
        ``g <- g + weight_decay * p``
    - Parameter update:
        ``p <- p - lr * g``

    Parameters
    ----------
    lr : float, optional
        Learning rate. Must be positive. Defaults to 1e-2.
    weight_decay : float, optional
        Classical L2 weight decay coefficient (coupled). Must be non-negative.
        Defaults to 0.0.
    graph : Optional[Graph], optional
        Graph whose gradients `zero_grad` resets.
    """

    lr: float = 1e-2
    weight_decay: float = 0.0
    graph: Optional[Graph] = None

    def __init__(
        self,
        lr: float = 1e-2,
        *,
        weight_decay: float = 0.0,
        graph: Optional[Graph] = None,
    ) -> None:
        """
        Construct an SGD optimizer.

        Raises
        ------
        ValueError
            If ``lr <= 0`` or ``weight_decay < 0``.
        """
        self.lr = float(lr)
        self.weight_decay = float(weight_decay)
        self.graph = graph

        if self.lr <= 0.0:
            raise ValueError(f"lr must be > 0, got {self.lr}")
        if self.weight_decay < 0.0:
            raise ValueError(f"weight_decay must be >= 0, got {self.weight_decay}")

    def zero_grad(self) -> None:
        """
        Reset gradients by delegating to the bound graph.

        Raises
        ------
        GraphError
            If the optimizer was constructed without a graph.
        """
        if self.graph is None:
            raise GraphError("SGD.zero_grad() needs a graph; pass graph= at construction")
        self.graph.zero_grad()

    def step(self, parameters: Iterable[Node]) -> None:
        """
        Apply one SGD update to each parameter node in place.

        Parameters
        ----------
        parameters : Iterable[Node]
            Trainable nodes, usually ``graph.parameters()``.

        Raises
        ------
        TypeError
            If a parameter's value has an integer dtype; the fractional update
            cannot be written back into its storage.

        Notes
        -----
        A zero gradient (e.g., right after `zero_grad`) leaves the value
        unchanged; it is not an error.
        """
        for p in parameters:
            g = p.grad
            if g is None:
                warnings.warn(
                    f"SGD.step(): parameter {p.label} has no gradient; skipped",
                    RuntimeWarning,
                    stacklevel=2,
                )
                continue

            # Optional L2 weight decay (decoupled is AdamW; this is classical)
            if self.weight_decay != 0.0:
                g = g + (self.weight_decay * p.value)

            # In-place update: p <- p - lr * g
            p.value -= g * self.lr
