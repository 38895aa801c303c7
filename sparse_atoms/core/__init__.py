"""
Atomic decomposition core: atom set, support pruning, projected gradient
refinement and L1-ball projection.
"""

from .interfaces import Objective, LeastSquaresObjective
from .objectives import LeastSquaresFunction, CallableObjective
from .projection import SimplexProjector, project_l1_ball
from .refinement import ProjectedGradientRefiner
from .pruning import SupportPruner, PruneResult, solve_least_squares
from .atoms import AtomSet

__all__ = [
    'Objective', 'LeastSquaresObjective',
    'LeastSquaresFunction', 'CallableObjective',
    'SimplexProjector', 'project_l1_ball',
    'ProjectedGradientRefiner',
    'SupportPruner', 'PruneResult', 'solve_least_squares',
    'AtomSet',
]
