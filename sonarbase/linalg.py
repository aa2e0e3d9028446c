"""Small linear-algebra helpers on numpy arrays."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

__all__ = ["is_not_nan", "is_finite", "guarantee_spd"]


def is_not_nan(x: ArrayLike) -> bool:
    """Return True if no element of ``x`` is NaN."""
    arr = np.asarray(x, dtype=np.float64)
    return bool(np.all(arr == arr))


def is_finite(x: ArrayLike) -> bool:
    """Return True if every element of ``x`` is finite."""
    arr = np.asarray(x, dtype=np.float64)
    with np.errstate(invalid="ignore"):
        return is_not_nan(arr - arr)


def guarantee_spd(a: ArrayLike) -> np.ndarray:
    """Rebuild ``a`` from its thin SVD with negative singular values clamped to zero."""
    arr = np.asarray(a, dtype=np.float64)
    u, s, vh = np.linalg.svd(arr, full_matrices=False)
    s = np.where(s < 0.0, 0.0, s)
    return u @ np.diag(s) @ vh