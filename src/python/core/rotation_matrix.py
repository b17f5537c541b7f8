"""
===============================================================================
QUATERNION ALGEBRA - Rotation Matrix Helpers
===============================================================================

A rotation matrix here is a plain 3x3 float64 numpy array in row-major order:

    R = | R[0,0]  R[0,1]  R[0,2] |
        | R[1,0]  R[1,1]  R[1,2] |
        | R[2,0]  R[2,1]  R[2,2] |

It carries no identity beyond its nine values. Every function in this package
that produces one returns a fresh array owned by the caller, so mutating it
never affects a quaternion or another matrix.

Nothing on the conversion path checks that a matrix is a *proper* rotation
(R^T R = I, det(R) = +1). Callers who need that guarantee can ask
is_rotation_matrix() before converting.
===============================================================================
"""

import numpy as np
from numpy.typing import NDArray

from core.constants import MATRIX_SHAPE, ORTHOGONALITY_TOLERANCE


RotationMatrix = NDArray[np.float64]
"""Type alias for a (3, 3) float64 rotation matrix."""


def as_rotation_matrix(matrix) -> RotationMatrix:
    """
    Coerce a nested 3x3 sequence (or array) into a float64 matrix.

    Only the shape is checked; the values are taken as-is.

    Parameters
    ----------
    matrix : array_like
        Any 3x3 nested sequence of real numbers.

    Returns
    -------
    np.ndarray
        New (3, 3) float64 array.

    Raises
    ------
    ValueError
        If the input does not have shape (3, 3).
    """
    arr = np.array(matrix, dtype=np.float64)

    if arr.shape != MATRIX_SHAPE:
        raise ValueError(f"Rotation matrix must be 3x3, got shape {arr.shape}")

    return arr


def identity_matrix() -> RotationMatrix:
    """Return a new 3x3 identity matrix (the zero rotation)."""
    return np.eye(3, dtype=np.float64)


def is_rotation_matrix(matrix, tolerance: float = ORTHOGONALITY_TOLERANCE) -> bool:
    """
    Check whether a matrix is a proper rotation.

    A proper rotation is orthogonal (R^T R = I) with determinant +1; a
    determinant of -1 would be a reflection.

    Parameters
    ----------
    matrix : array_like
        3x3 matrix to test.
    tolerance : float
        Allowed Frobenius-norm deviation of R^T R from I, and allowed
        deviation of det(R) from 1.

    Returns
    -------
    bool
        True if the matrix is a proper rotation within tolerance.
    """
    R = as_rotation_matrix(matrix)

    if not np.all(np.isfinite(R)):
        return False

    orthogonality_error = np.linalg.norm(R.T @ R - np.eye(3))
    if orthogonality_error > tolerance:
        return False

    return abs(np.linalg.det(R) - 1.0) <= tolerance


def format_matrix(matrix) -> str:
    """
    Render a matrix row by row, one line per row, values separated by spaces.

    Uses Python's default float repr so the printed numbers round-trip.
    """
    R = as_rotation_matrix(matrix)
    return "\n".join(" ".join(repr(float(v)) for v in row) for row in R)
