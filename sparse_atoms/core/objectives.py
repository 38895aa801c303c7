"""
Concrete objectives for atomic decomposition.

LeastSquaresFunction is the squared loss f(x) = ½||Ax - b||² used alongside
the forward-backward greedy atom algorithms of Rao, Shah & Wright (2015).
It is decomposable over the rows of A, so mini-batch optimizers can evaluate
it one block of rows at a time.

References:
- Rao, N., Shah, P., & Wright, S. (2015). Forward-backward greedy algorithms
  for atomic norm regularization. IEEE Transactions on Signal Processing,
  63(21), 5798-5811.
"""

from __future__ import annotations
from typing import Callable
import numpy as np

from ..exceptions import DimensionMismatchError


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr = np.array(arr, dtype=float, copy=True)
    arr.setflags(write=False)
    return arr


class LeastSquaresFunction:
    """Squared loss f(x) = ½||Ax - b||².

    Stores read-only copies of A and b, so one instance can be shared between
    several atom sets.

    Args:
        A: Design matrix (m, d)
        b: Target vector (m,)
    """

    def __init__(self, A: np.ndarray, b: np.ndarray):
        A = np.asarray(A, dtype=float)
        b = np.asarray(b, dtype=float).ravel()
        if A.ndim != 2:
            raise DimensionMismatchError(f"A must be 2D, got {A.ndim}D")
        if A.shape[0] != b.shape[0]:
            raise DimensionMismatchError(
                f"A has {A.shape[0]} rows but b has {b.shape[0]} entries"
            )
        self._A = _frozen(A)
        self._b = _frozen(b)

    def design_matrix(self) -> np.ndarray:
        return self._A

    def target(self) -> np.ndarray:
        return self._b

    @property
    def n_features(self) -> int:
        """Dimension d of the solution space."""
        return self._A.shape[1]

    def residual(self, x: np.ndarray) -> np.ndarray:
        """Residual Ax - b."""
        return self._A @ np.asarray(x, dtype=float).ravel() - self._b

    def evaluate(self, x: np.ndarray) -> float:
        r = self.residual(x)
        return 0.5 * float(r @ r)

    def gradient(self, x: np.ndarray) -> np.ndarray:
        return self._A.T @ self.residual(x)

    # Decomposable interface: row i of A is one separable sub-function.

    def num_functions(self) -> int:
        """Number of separable sub-functions (rows of A)."""
        return self._A.shape[0]

    def _rows(self, begin: int, batch_size: int) -> slice:
        if begin < 0 or batch_size < 1 or begin + batch_size > self.num_functions():
            raise IndexError(
                f"batch [{begin}, {begin + batch_size}) outside "
                f"[0, {self.num_functions()})"
            )
        return slice(begin, begin + batch_size)

    def evaluate_batch(self, x: np.ndarray, begin: int, batch_size: int = 1) -> float:
        """Sum of sub-function values for rows begin .. begin+batch_size-1."""
        rows = self._rows(begin, batch_size)
        r = self._A[rows] @ np.asarray(x, dtype=float).ravel() - self._b[rows]
        return 0.5 * float(r @ r)

    def gradient_batch(self, x: np.ndarray, begin: int, batch_size: int = 1) -> np.ndarray:
        """Gradient of the same row block."""
        rows = self._rows(begin, batch_size)
        r = self._A[rows] @ np.asarray(x, dtype=float).ravel() - self._b[rows]
        return self._A[rows].T @ r


class CallableObjective:
    """Adapts a value function and a gradient function to ``Objective``.

    Usable by projected gradient refinement; support pruning needs a
    ``LeastSquaresObjective`` instead.
    """

    def __init__(self,
                 value_fn: Callable[[np.ndarray], float],
                 grad_fn: Callable[[np.ndarray], np.ndarray]):
        self.value_fn = value_fn
        self.grad_fn = grad_fn

    def evaluate(self, x: np.ndarray) -> float:
        return float(self.value_fn(x))

    def gradient(self, x: np.ndarray) -> np.ndarray:
        return np.asarray(self.grad_fn(x), dtype=float)
