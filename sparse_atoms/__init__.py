from .__about__ import __version__

from .core.atoms import AtomSet
from .core.interfaces import Objective, LeastSquaresObjective
from .core.objectives import LeastSquaresFunction, CallableObjective
from .core.projection import SimplexProjector, project_l1_ball
from .core.refinement import ProjectedGradientRefiner
from .core.pruning import SupportPruner, PruneResult, solve_least_squares

from .config import PruneConfig, RefinementConfig
from .exceptions import (
    AtomDecompositionError, DimensionMismatchError,
    EmptySupportError, SingularRefitError,
)

__all__ = [
    # Version
    "__version__",

    # Active set
    "AtomSet",

    # Objectives
    "Objective", "LeastSquaresObjective",
    "LeastSquaresFunction", "CallableObjective",

    # Algorithms
    "SimplexProjector", "project_l1_ball",
    "ProjectedGradientRefiner",
    "SupportPruner", "PruneResult", "solve_least_squares",

    # Configuration
    "PruneConfig", "RefinementConfig",

    # Errors
    "AtomDecompositionError", "DimensionMismatchError",
    "EmptySupportError", "SingularRefitError",
]
