"""
Domain-level optimizer contracts for stridegrad.

This module defines the `IOptimizer` protocol, which specifies the minimal
interface required for optimizer implementations (e.g., SGD).

Notes
-----
- Domain contracts are backend-agnostic and must not depend on NumPy or
  infrastructure implementations.
- Optimizers receive the parameter nodes explicitly on every `step` call and
  hold nothing between calls except their hyperparameters.
- Learning rate is an optimizer concern only; it never appears in the
  graph's backward contract.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class IOptimizer(Protocol):
    """
    Optimizer interface contract.

    Required methods
    ----------------
    - `step(parameters)` applies one optimization update in place.
    - `zero_grad()` resets gradients by delegating to the owning graph.
    """

    def step(self, parameters: Iterable[object]) -> None:
        """
        Apply one optimization step to the given parameter nodes.

        The parameter type is left unconstrained to keep the domain layer
        decoupled from the graph implementation; infrastructure optimizers
        accept the `Node` objects returned by `Graph.parameters()`.
        """
        ...

    def zero_grad(self) -> None:
        """Reset gradients of the graph this optimizer is bound to."""
        ...
