"""
Parameter models for the two refinement operations on an AtomSet.

Validated with pydantic so bad scalars fail before any atom or coefficient is
touched. ``pydantic.ValidationError`` subclasses ``ValueError``.
"""

from __future__ import annotations
from typing import Literal, Optional

from pydantic import BaseModel, Field, PositiveInt

# Shared with core.projection and core.pruning
ProjectionVariant = Literal["reference", "euclidean"]
RefitSolver = Literal["qr", "lstsq", "svd"]


class RefinementConfig(BaseModel):
    """Projected gradient enhancement parameters."""
    tau: float = Field(..., ge=0.0)             # L1 radius of the coefficient ball
    step_size: float = Field(..., gt=0.0)
    max_iterations: PositiveInt = 100
    tolerance: float = Field(1e-3, ge=0.0)
    projection: ProjectionVariant = "reference"


class PruneConfig(BaseModel):
    """Support pruning parameters."""
    threshold: float                            # objective ceiling after a deletion
    solver: RefitSolver = "qr"
    cond_limit: float = Field(1e10, gt=0.0)
    max_deletions: Optional[PositiveInt] = None  # defaults to the atom count
