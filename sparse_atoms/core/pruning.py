"""
Greedy backward deletion of atoms (support pruning).

Implements Algorithm 2 of Rao, Shah & Wright (2015). For the least-squares
objective f(x) = ½||Ax - b||², each atom φᵢ with coefficient cᵢ gets a
closed-form energy score

    sᵢ = ½ ||Aφᵢ||² cᵢ²

computed once on entry. Each round estimates the objective increase of
removing atom i as

    gapᵢ = sᵢ - cᵢ ⟨φᵢ, ∇f(x)⟩

tries deleting the cheapest atom, refits the remaining coefficients by least
squares and keeps the deletion only while the refitted objective stays at or
below the threshold F.

References:
- Rao, N., Shah, P., & Wright, S. (2015). Forward-backward greedy algorithms
  for atomic norm regularization. IEEE Transactions on Signal Processing,
  63(21), 5798-5811.
- Golub, G. H., & Van Loan, C. F. (2013). Matrix computations (4th ed.).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import logging

import numpy as np
from scipy import linalg

from ..config import RefitSolver
from ..exceptions import DimensionMismatchError, EmptySupportError, SingularRefitError
from .interfaces import LeastSquaresObjective

logger = logging.getLogger(__name__)


def _check_conditioning(s: np.ndarray, cond_limit: float) -> None:
    """Reject a refit whose singular values ``s`` (descending) are ill-conditioned."""
    if s[-1] <= 0 or s[0] / s[-1] > cond_limit:
        raise SingularRefitError(
            f"refit matrix condition number exceeds {cond_limit:.1e}"
        )


def solve_least_squares(M: np.ndarray,
                        b: np.ndarray,
                        solver: RefitSolver = 'qr',
                        cond_limit: float = 1e10) -> np.ndarray:
    """Least-squares solution of M c ≈ b with a conditioning guard.

    Args:
        M: System matrix (m, k)
        b: Right-hand side (m,)
        solver: 'qr' (reduced QR), 'lstsq' (LAPACK gelsd) or 'svd'
        cond_limit: Largest acceptable 2-norm condition number of M

    Returns:
        Coefficients (k,)

    Raises:
        SingularRefitError: M is underdetermined, ill-conditioned, LAPACK
            fails, or the solution is not finite
    """
    m, k = M.shape
    if k > m:
        raise SingularRefitError(f"underdetermined refit: {k} atoms for {m} equations")

    # Each strategy checks conditioning from its own factorization;
    # cond(R) == cond(M) for the reduced QR.
    try:
        if solver == 'qr':
            Q, R = linalg.qr(M, mode='economic')
            _check_conditioning(linalg.svdvals(R), cond_limit)
            c = linalg.solve_triangular(R, Q.T @ b)
        elif solver == 'lstsq':
            c, _, _, s = linalg.lstsq(M, b, lapack_driver='gelsd')
            _check_conditioning(s, cond_limit)
        elif solver == 'svd':
            U, s, Vt = linalg.svd(M, full_matrices=False)
            _check_conditioning(s, cond_limit)
            c = Vt.T @ ((U.T @ b) / s)
        else:
            raise ValueError(f"solver must be 'qr', 'lstsq' or 'svd', got {solver!r}")
    except linalg.LinAlgError as e:
        raise SingularRefitError(f"refit failed: {e}") from e

    if not np.all(np.isfinite(c)):
        raise SingularRefitError("refit produced non-finite coefficients")
    return c


@dataclass
class PruneResult:
    """Outcome of one pruning pass."""
    atoms: np.ndarray
    coeffs: np.ndarray
    removed: List[int] = field(default_factory=list)   # indices at time of removal
    n_trials: int = 0
    objective: Optional[float] = None                  # after the last accepted deletion
    stop_reason: str = 'rejected'                      # 'rejected', 'singular', 'empty', 'max_deletions'


@dataclass
class SupportPruner:
    """Greedy deletion of atoms that contribute little to the objective.

    Parameters:
        threshold: Objective ceiling F tolerated after a deletion
        solver: Least-squares refit strategy
        cond_limit: Conditioning guard for the refit
        max_deletions: Trial cap; defaults to the atom count on entry
    """
    threshold: float
    solver: RefitSolver = 'qr'
    cond_limit: float = 1e10
    max_deletions: Optional[int] = None

    def prune(self,
              objective: LeastSquaresObjective,
              atoms: np.ndarray,
              coeffs: np.ndarray,
              on_trial=None) -> PruneResult:
        """Run one pruning pass.

        Args:
            objective: Least-squares objective exposing A and b
            atoms: Atom matrix (d, k), left untouched
            coeffs: Coefficients (k,), left untouched
            on_trial: Optional callback ``on_trial(index, f_new, accepted)``

        Returns:
            PruneResult with the surviving atoms and refitted coefficients.
            When the first trial is rejected these are copies of the inputs.
        """
        if not isinstance(objective, LeastSquaresObjective):
            raise TypeError(
                "support pruning needs an objective with design_matrix() and target()"
            )

        atoms = np.array(atoms, dtype=float, copy=True)
        coeffs = np.array(coeffs, dtype=float, copy=True)
        d, k = atoms.shape
        if k == 0:
            raise EmptySupportError("cannot prune an empty atom set")

        A = np.asarray(objective.design_matrix(), dtype=float)
        b = np.asarray(objective.target(), dtype=float).ravel()
        if A.shape[1] != d:
            raise DimensionMismatchError(
                f"design matrix has {A.shape[1]} columns, atoms have dimension {d}"
            )

        scores = 0.5 * np.sum((A @ atoms) ** 2, axis=0) * coeffs ** 2

        result = PruneResult(atoms=atoms, coeffs=coeffs)
        max_deletions = self.max_deletions if self.max_deletions is not None else k

        while result.n_trials < max_deletions:
            x = atoms @ coeffs
            g = np.asarray(objective.gradient(x), dtype=float).ravel()

            gap = scores - coeffs * (atoms.T @ g)
            ind = int(np.argmin(gap))

            new_atoms = np.delete(atoms, ind, axis=1)
            result.n_trials += 1

            if new_atoms.shape[1] == 0:
                new_coeffs = np.zeros(0)
                f_new = objective.evaluate(np.zeros(d))
            else:
                try:
                    new_coeffs = solve_least_squares(
                        A @ new_atoms, b, self.solver, self.cond_limit
                    )
                except SingularRefitError as e:
                    logger.debug("trial deletion of atom %d rejected: %s", ind, e)
                    if on_trial is not None:
                        on_trial(ind, None, False)
                    result.stop_reason = 'singular'
                    break
                f_new = objective.evaluate(new_atoms @ new_coeffs)

            accepted = f_new <= self.threshold
            logger.debug("trial deletion of atom %d: F_new=%.6g threshold=%.6g %s",
                         ind, f_new, self.threshold, "accepted" if accepted else "rejected")
            if on_trial is not None:
                on_trial(ind, f_new, accepted)

            if not accepted:
                result.stop_reason = 'rejected'
                break

            atoms, coeffs = new_atoms, new_coeffs
            scores = np.delete(scores, ind)
            result.removed.append(ind)
            result.objective = f_new

            if atoms.shape[1] == 0:
                result.stop_reason = 'empty'
                break
        else:
            result.stop_reason = 'max_deletions'

        result.atoms = atoms
        result.coeffs = coeffs
        return result
