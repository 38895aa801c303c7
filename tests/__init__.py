"""
Test suite for the sparse atomic decomposition core.

Validates the atom set bookkeeping, the L1-ball projection, projected gradient
refinement and greedy support pruning against:
- Rao, Shah & Wright (2015) - Forward-backward greedy algorithms for atomic
  norm regularization
- Duchi et al. (2008) - Efficient projections onto the l1-ball
"""
