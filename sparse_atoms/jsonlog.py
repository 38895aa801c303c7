"""
Structured JSON event records for atomic decomposition runs.

Each record is a single JSON object on stdout:
    {"ts": 1640995200.0, "event": "prune_done", "n_atoms": 12, "objective": 0.031}

Enabled per AtomSet through ``verbose=True``; regular diagnostics go through
the standard ``logging`` module instead.
"""

import json, sys, time

import numpy as np


def _plain(value):
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    return value


def log(event: str, **fields):
    """
    Log a structured JSON event with timestamp and arbitrary fields.

    Args:
        event: Event name (e.g. "prune_trial", "refine_done")
        **fields: Additional key-value pairs; numpy scalars and arrays are
            converted to plain Python values

    Example:
        >>> log("prune_done", n_atoms=3, removed=[0])
        {"ts": 1640995200.0, "event": "prune_done", "n_atoms": 3, "removed": [0]}
    """
    rec = {"ts": time.time(), "event": event}
    rec.update({k: _plain(v) for k, v in fields.items()})
    sys.stdout.write(json.dumps(rec) + "\n")
    sys.stdout.flush()
