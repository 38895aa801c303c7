"""
Objective protocols consumed by the atom set algorithms.

Two capability sets:
- ``Objective``: evaluate and differentiate f(x). Enough for projected
  gradient refinement.
- ``LeastSquaresObjective``: additionally exposes A and b of
  f(x) = ½||Ax - b||², required by support pruning for its closed-form
  per-atom scores and least-squares refits.

The algorithms borrow an objective for the duration of one call and never
mutate it.
"""

from __future__ import annotations
from typing import Protocol, runtime_checkable
import numpy as np


@runtime_checkable
class Objective(Protocol):
    """Differentiable objective f: R^d -> R."""

    def evaluate(self, x: np.ndarray) -> float:
        """Objective value f(x)."""
        ...

    def gradient(self, x: np.ndarray) -> np.ndarray:
        """Gradient ∇f(x), same shape as x."""
        ...


@runtime_checkable
class LeastSquaresObjective(Objective, Protocol):
    """Objective of the form f(x) = ½||Ax - b||²."""

    def design_matrix(self) -> np.ndarray:
        """Design matrix A of shape (m, d)."""
        ...

    def target(self) -> np.ndarray:
        """Target vector b of shape (m,)."""
        ...
