"""Error taxonomy for atomic decomposition."""


class AtomDecompositionError(ValueError):
    """Base exception for atom set errors."""
    pass


class DimensionMismatchError(AtomDecompositionError):
    """Atom, coefficient or design matrix shapes disagree."""
    pass


class EmptySupportError(AtomDecompositionError):
    """Operation needs at least one active atom."""
    pass


class SingularRefitError(AtomDecompositionError):
    """Least-squares refit is rank deficient or ill-conditioned.

    Raised by the refit inside support pruning and handled there: the trial
    deletion that produced it is rejected.
    """
    pass
