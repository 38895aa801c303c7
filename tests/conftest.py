"""
Test configuration and fixtures for atomic decomposition tests.

Provides common least-squares problems, atom sets and assertion helpers.
"""

import numpy as np
import pytest
from scipy import linalg

from sparse_atoms import AtomSet, LeastSquaresFunction


@pytest.fixture
def random_seed():
    """Fixed random seed for reproducible tests."""
    return 42


@pytest.fixture
def tolerance():
    """Standard numerical tolerance."""
    return 1e-10


@pytest.fixture
def relaxed_tolerance():
    """Relaxed tolerance for iterative algorithms."""
    return 1e-3


@pytest.fixture
def identity_objective():
    """f(x) = ½||x - b||² in R^3 with b = (1, 2, 0)."""
    return LeastSquaresFunction(np.eye(3), np.array([1.0, 2.0, 0.0]))


@pytest.fixture
def duplicate_atom_set():
    """Atoms [e1, e2, e1] with coefficients [0.5, 2, 0.5]; x = (1, 2, 0).

    The front atom duplicates the back one, so one of them is redundant.
    """
    atoms = AtomSet()
    atoms.add_atom(np.array([1.0, 0.0, 0.0]), 0.5)
    atoms.add_atom(np.array([0.0, 1.0, 0.0]), 2.0)
    atoms.add_atom(np.array([1.0, 0.0, 0.0]), 0.5)
    return atoms


@pytest.fixture
def sparse_recovery_problem(random_seed):
    """Overdetermined least-squares problem with a 3-sparse ground truth.

    A is (40, 12) Gaussian, x_true has three non-zero entries and b = A x_true.
    """
    rng = np.random.default_rng(random_seed)
    m, d = 40, 12
    A = rng.standard_normal((m, d)) / np.sqrt(m)
    x_true = np.zeros(d)
    support = np.array([1, 5, 9])
    x_true[support] = np.array([1.5, -2.0, 1.0])
    b = A @ x_true
    return {
        'objective': LeastSquaresFunction(A, b),
        'A': A,
        'b': b,
        'x_true': x_true,
        'support': support,
        'n_features': d,
    }


def standard_basis(d, i):
    """Unit vector e_i in R^d."""
    e = np.zeros(d)
    e[i] = 1.0
    return e


def create_test_atoms(n_features, n_atoms, seed=42):
    """Orthonormal atoms (n_features, n_atoms) via QR, n_atoms <= n_features."""
    rng = np.random.default_rng(seed)
    Q, _ = linalg.qr(rng.standard_normal((n_features, n_atoms)), mode='economic')
    return Q


def assert_l1_feasible(coeffs, tau, slack=1e-10):
    """Assert that coefficients lie in the L1 ball of radius tau."""
    l1 = np.sum(np.abs(coeffs))
    assert l1 <= tau + slack, f"||c||_1 = {l1:.12f} exceeds tau = {tau}"


def assert_state_unchanged(atom_set, atoms_before, coeffs_before):
    """Assert that atoms and coefficients are bitwise identical to a snapshot."""
    assert atom_set.atoms.shape == atoms_before.shape
    assert atom_set.atoms.tobytes() == atoms_before.tobytes()
    assert atom_set.coefficients.tobytes() == coeffs_before.tobytes()
