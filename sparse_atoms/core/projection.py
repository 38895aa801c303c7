"""
Projection of a coefficient vector onto the L1 ball {c : ||c||₁ <= tau}.

Signs are split off, |c| is projected onto the scaled simplex of mass tau by
sorting and cumulative sums, and the result is soft-thresholded with the sign
restored (Duchi et al., 2008).

Two threshold rules are available:
- 'reference': the pivot is found with divisor (rho + 1) but the threshold is
  computed with divisor rho. This thresholds harder than the Euclidean
  projection, so the result lies strictly inside the ball. Default.
- 'euclidean': divisor (rho + 1) for both, the exact Euclidean projection.

References:
- Duchi, J., Shalev-Shwartz, S., Singer, Y., & Chandra, T. (2008). Efficient
  projections onto the l1-ball for learning in high dimensions. ICML.
"""

from __future__ import annotations
import numpy as np

from ..config import ProjectionVariant


def _soft_thresh(c: np.ndarray, theta: float) -> np.ndarray:
    return np.sign(c) * np.maximum(np.abs(c) - theta, 0.0)


def project_l1_ball(coeffs: np.ndarray,
                    tau: float,
                    variant: ProjectionVariant = 'reference') -> np.ndarray:
    """Project ``coeffs`` onto the L1 ball of radius ``tau``.

    Args:
        coeffs: Coefficient vector (k,)
        tau: Ball radius, non-negative
        variant: Threshold rule, 'reference' or 'euclidean'

    Returns:
        New array; ``coeffs`` itself is never modified

    Example:
        >>> project_l1_ball(np.array([0.7, 0.5, -0.9]), 1.0)
        array([ 0.15,  0.  , -0.35])
    """
    if tau < 0:
        raise ValueError(f"L1 ball radius must be non-negative, got {tau}")
    if variant not in ('reference', 'euclidean'):
        raise ValueError(f"variant must be 'reference' or 'euclidean', got {variant!r}")

    c = np.array(coeffs, dtype=float, copy=True).ravel()
    magnitudes = np.abs(c)

    # Already inside the ball.
    if magnitudes.sum() <= tau:
        return c

    sorted_mag = np.sort(magnitudes)[::-1]
    cum = np.cumsum(sorted_mag)

    # Largest index whose entry survives the threshold. Index 0 always
    # qualifies once tau > 0, so the scan falls back to 0.
    rho = 0
    for j in range(len(sorted_mag) - 1, -1, -1):
        if sorted_mag[j] - (cum[j] - tau) / (j + 1) > 0:
            rho = j
            break

    if variant == 'euclidean' or rho == 0:
        theta = (cum[rho] - tau) / (rho + 1)
    else:
        theta = (cum[rho] - tau) / rho

    return _soft_thresh(c, theta)


class SimplexProjector:
    """Stateless callable wrapper around ``project_l1_ball``.

    Example:
        >>> project = SimplexProjector(tau=1.0)
        >>> project(np.array([2.0, 0.0]))
        array([1., 0.])
    """

    def __init__(self, tau: float, variant: ProjectionVariant = 'reference'):
        if tau < 0:
            raise ValueError(f"L1 ball radius must be non-negative, got {tau}")
        self.tau = tau
        self.variant = variant

    def __call__(self, coeffs: np.ndarray) -> np.ndarray:
        return project_l1_ball(coeffs, self.tau, self.variant)

    def __repr__(self) -> str:
        return f"SimplexProjector(tau={self.tau}, variant={self.variant!r})"
