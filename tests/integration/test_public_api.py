"""
Integration tests for the public API: top-level imports, docstring examples
and a full grow / refine / prune cycle through AtomSet.
"""

import doctest
import warnings

import numpy as np
import pytest

import sparse_atoms
from sparse_atoms import AtomSet, LeastSquaresFunction
from sparse_atoms.core import atoms as atoms_module
from sparse_atoms.core import projection as projection_module


def test_version_exposed():
    assert isinstance(sparse_atoms.__version__, str)


def test_all_names_importable():
    for name in sparse_atoms.__all__:
        assert hasattr(sparse_atoms, name), name


@pytest.mark.parametrize("module", [atoms_module, projection_module])
def test_docstring_examples(module):
    failures, _ = doctest.testmod(module, optionflags=doctest.NORMALIZE_WHITESPACE)
    assert failures == 0


def test_grow_refine_prune_cycle():
    """Spurious atoms added during growth are pruned after refinement."""
    rng = np.random.default_rng(11)
    A = rng.standard_normal((30, 5))
    x_true = np.array([0.0, 1.0, 0.0, -0.5, 0.0])
    objective = LeastSquaresFunction(A, A @ x_true)

    atoms = AtomSet()
    atoms.add_atom(np.array([0.0, 1.0, 0.0, 0.0, 0.0]))
    atoms.add_atom(np.array([0.0, 0.0, 0.0, 1.0, 0.0]))
    # not in the support of x_true
    atoms.add_atom(np.array([0.0, 0.0, 1.0, 0.0, 0.0]))
    atoms.add_atom(np.array([1.0, 0.0, 0.0, 0.0, 0.0]))

    step_size = 1.0 / np.linalg.norm(A @ atoms.atoms, 2) ** 2
    n_steps = atoms.projected_gradient_enhancement(
        objective, tau=10.0, step_size=step_size, max_iterations=2000, tolerance=1e-16
    )
    assert n_steps > 0
    assert np.sum(np.abs(atoms.coefficients)) <= 10.0

    with warnings.catch_warnings():
        warnings.simplefilter("error", RuntimeWarning)
        atoms.prune_support(1e-8, objective)

    assert len(atoms) == 2
    assert objective.evaluate(atoms.recover_vector()) <= 1e-8
    np.testing.assert_allclose(atoms.recover_vector(), x_true, atol=1e-6)
