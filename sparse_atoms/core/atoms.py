"""
Active atom set for sparse atomic decomposition.

Keeps an ordered collection of atoms (columns of Φ, shape (d, k)) with one
coefficient each, so that the current solution is x = Φc. New atoms go to
the front. The set grows through ``add_atom``, shrinks through
``prune_support`` and has its coefficients refined in place through
``projected_gradient_enhancement``.

Typical use inside a forward-backward greedy loop:

    >>> atoms = AtomSet()
    >>> atoms.add_atom(np.array([1.0, 0.0]), 2.0)
    >>> atoms.add_atom(np.array([0.0, 1.0]), 1.0)
    >>> atoms.recover_vector()
    array([2., 1.])

Storage is never handed out by reference: reads return copies and writes
replace whole values, so the atom/coefficient count invariant always holds.

Not thread-safe; concurrent writers need external locking.
"""

from __future__ import annotations
from typing import Optional
import logging
import warnings

import numpy as np

from .. import jsonlog
from ..config import ProjectionVariant, PruneConfig, RefinementConfig, RefitSolver
from ..exceptions import DimensionMismatchError, EmptySupportError
from .interfaces import LeastSquaresObjective, Objective
from .pruning import SupportPruner
from .refinement import ProjectedGradientRefiner

logger = logging.getLogger(__name__)


class AtomSet:
    """Ordered atoms and their coefficients.

    ``history`` holds the trace of the most recent call only: the trials of
    the last ``prune_support`` and the objective values of the last
    ``projected_gradient_enhancement``. Each call resets its entry.

    Args:
        verbose: Emit JSON event records (see ``sparse_atoms.jsonlog``)
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self._atoms: Optional[np.ndarray] = None   # (d, k); None while empty
        self._coeffs = np.zeros(0)
        self.history = {'prune_trials': [], 'refine_values': []}

    # ------------------------------------------------------------------ state

    def __len__(self) -> int:
        return self._coeffs.shape[0]

    @property
    def n_atoms(self) -> int:
        return len(self)

    @property
    def dimension(self) -> Optional[int]:
        """Atom dimension d, or None while the set has never held an atom."""
        return None if self._atoms is None else self._atoms.shape[0]

    @property
    def atoms(self) -> np.ndarray:
        """Copy of the atom matrix (d, k).

        (0, 0) before the first atom is added; (d, 0) once pruning has
        removed every atom, since the dimension is kept.
        """
        if self._atoms is None:
            return np.zeros((0, 0))
        return self._atoms.copy()

    @property
    def coefficients(self) -> np.ndarray:
        """Copy of the coefficient vector (k,)."""
        return self._coeffs.copy()

    def atom(self, index: int) -> np.ndarray:
        """Copy of atom ``index`` (0 is the most recently added)."""
        if not -len(self) <= index < len(self):
            raise IndexError(f"atom index {index} out of range for {len(self)} atoms")
        return self._atoms[:, index].copy()

    def set_coefficients(self, values) -> None:
        """Replace all coefficients at once."""
        values = np.array(values, dtype=float, copy=True).ravel()
        if values.shape[0] != len(self):
            raise DimensionMismatchError(
                f"got {values.shape[0]} coefficients for {len(self)} atoms"
            )
        self._coeffs = values

    # ------------------------------------------------------------- operations

    def add_atom(self, atom, coeff: float = 0.0) -> None:
        """Insert ``atom`` with coefficient ``coeff`` at the front of the set."""
        v = np.array(atom, dtype=float, copy=True).ravel()

        if self._atoms is None or len(self) == 0:
            if self._atoms is not None and self._atoms.shape[0] != v.shape[0]:
                raise DimensionMismatchError(
                    f"atom has dimension {v.shape[0]}, set has dimension {self._atoms.shape[0]}"
                )
            self._atoms = v.reshape(-1, 1)
            self._coeffs = np.array([float(coeff)])
            return

        if v.shape[0] != self._atoms.shape[0]:
            raise DimensionMismatchError(
                f"atom has dimension {v.shape[0]}, set has dimension {self._atoms.shape[0]}"
            )
        self._atoms = np.column_stack([v, self._atoms])
        self._coeffs = np.concatenate([[float(coeff)], self._coeffs])

    def recover_vector(self) -> np.ndarray:
        """Current solution x = Φc; empty vector for an empty set."""
        if len(self) == 0:
            return np.zeros(0)
        return self._atoms @ self._coeffs

    def prune_support(self,
                      threshold: float,
                      objective: LeastSquaresObjective,
                      solver: RefitSolver = 'qr',
                      cond_limit: float = 1e10,
                      max_deletions: Optional[int] = None) -> None:
        """Greedily delete atoms while the refitted objective stays <= threshold.

        Stops at the first rejected deletion, leaving the set exactly as it
        was before that trial. A rank-deficient or ill-conditioned refit
        counts as a rejection.

        Args:
            threshold: Objective ceiling F after a deletion
            objective: Least-squares objective exposing A and b
            solver: Refit strategy, 'qr', 'lstsq' or 'svd'
            cond_limit: Condition number above which a refit is rejected
            max_deletions: Trial cap; defaults to the current atom count

        Raises:
            EmptySupportError: the set has no atoms
            DimensionMismatchError: A does not match the atom dimension
        """
        config = PruneConfig(threshold=threshold, solver=solver,
                             cond_limit=cond_limit, max_deletions=max_deletions)
        if len(self) == 0:
            raise EmptySupportError("cannot prune an empty atom set")

        pruner = SupportPruner(config.threshold, config.solver,
                               config.cond_limit, config.max_deletions)
        self.history['prune_trials'] = []

        def on_trial(index, f_new, accepted):
            self.history['prune_trials'].append(
                {'index': index, 'objective': f_new, 'accepted': accepted}
            )
            if self.verbose:
                jsonlog.log("prune_trial", index=index, objective=f_new, accepted=accepted)

        result = pruner.prune(objective, self._atoms, self._coeffs, on_trial=on_trial)
        self._atoms = result.atoms
        self._coeffs = result.coeffs

        logger.debug("pruning removed %d atoms in %d trials (%s)",
                     len(result.removed), result.n_trials, result.stop_reason)
        if self.verbose:
            jsonlog.log("prune_done", n_atoms=len(self), removed=result.removed,
                        objective=result.objective, stop_reason=result.stop_reason)

        if result.stop_reason == 'empty':
            warnings.warn(
                f"Pruning removed every atom: threshold {threshold} is never exceeded",
                RuntimeWarning,
            )

    def projected_gradient_enhancement(self,
                                       objective: Objective,
                                       tau: float,
                                       step_size: float,
                                       max_iterations: int = 100,
                                       tolerance: float = 1e-3,
                                       projection: ProjectionVariant = 'reference') -> int:
        """Refine coefficients by projected gradient descent onto the L1 ball.

        Atoms are fixed; only coefficients change. Each step is accepted
        unconditionally. Running out of iterations is not an error.

        Args:
            objective: Objective providing evaluate/gradient in R^d
            tau: L1 radius bounding the coefficients
            step_size: Gradient step length
            max_iterations: Iteration cap; 1 means no step is taken
            tolerance: Stop once the objective decreases by less than this
            projection: L1-ball threshold rule, 'reference' or 'euclidean'

        Returns:
            Number of gradient/projection steps performed

        Raises:
            EmptySupportError: the set has no atoms
        """
        config = RefinementConfig(tau=tau, step_size=step_size,
                                  max_iterations=max_iterations,
                                  tolerance=tolerance, projection=projection)
        if len(self) == 0:
            raise EmptySupportError("cannot refine coefficients of an empty atom set")

        refiner = ProjectedGradientRefiner(tau=config.tau, step_size=config.step_size,
                                           max_iter=config.max_iterations,
                                           tol=config.tolerance,
                                           projection=config.projection)
        self._coeffs, n_steps = refiner.refine(objective, self._atoms, self._coeffs)
        self.history['refine_values'] = refiner.history['objective']

        if self.verbose:
            jsonlog.log("refine_done", n_steps=n_steps,
                        objective=refiner.history['objective'][-1],
                        l1_norm=float(np.abs(self._coeffs).sum()))
        return n_steps

    def __repr__(self) -> str:
        return f"AtomSet(n_atoms={len(self)}, dimension={self.dimension})"
