"""
===============================================================================
QUATERNION ALGEBRA - Quaternion Value Type
===============================================================================

Quaternion arithmetic and conversion to/from 3x3 rotation matrices.
Quaternions encode 3D orientation with 4 parameters and no gimbal lock,
which is why they are used instead of Euler angles wherever rotations are
composed repeatedly.

Convention
----------
We use the scalar-first convention:

    q = [q_w, q_x, q_y, q_z] = q_w + q_x*i + q_y*j + q_z*k

where q_w is the scalar (real) part and [q_x, q_y, q_z] is the vector
(imaginary) part, following Hamilton's original formulation.

Value semantics
---------------
A Quaternion is a plain value. Its components are fixed at construction and
every operation returns a new instance. The constructor does NOT normalize:
arithmetic on arbitrary (non-unit) quaternions is fully supported, and only
the rotation-matrix conversion assumes a unit input.

Equality is exact IEEE-754 comparison of all four components. For
tolerance-based comparison use is_close().

Double cover
------------
q and -q represent the same 3D rotation. Conversions from a rotation matrix
return one of the two; which one depends on the branch taken.

References
----------
    [1] Kuipers, "Quaternions and Rotation Sequences", Princeton, 1999.
    [2] Shepperd, "Quaternion from Rotation Matrix", JGCD 1(3), 1978.

===============================================================================
"""

import numbers

import numpy as np
from typing import Tuple, Union

from core.constants import (
    AXIS_NORM_MINIMUM, COMPARISON_TOLERANCE, QUATERNION_SIZE,
    UNIT_NORM_TOLERANCE
)
from core.rotation_matrix import RotationMatrix, as_rotation_matrix


class ZeroNormError(ZeroDivisionError):
    """Raised when an operation needs to divide by a quaternion's zero norm."""


class Quaternion:
    """
    Quaternion value type for 3D rotation representation.

    A unit quaternion q = [w, x, y, z] parameterizes a rotation by angle theta
    about unit axis n as:

        q = [cos(theta/2), sin(theta/2) * n_x, sin(theta/2) * n_y, sin(theta/2) * n_z]

    The product of two unit quaternions corresponds to the composition of the
    two rotations.

    Attributes
    ----------
    w : float
        Scalar (real) component of the quaternion.
    x : float
        First imaginary component (i-axis).
    y : float
        Second imaginary component (j-axis).
    z : float
        Third imaginary component (k-axis).

    Examples
    --------
    >>> q1 = Quaternion(1, 2, 3, 4)
    >>> q2 = Quaternion(5, 6, 7, 8)
    >>> q1 * q2
    Quaternion(w=-60.0, x=12.0, y=30.0, z=24.0)
    """

    # Make numpy scalars defer to our reflected operators (np.float64 * q).
    __array_ufunc__ = None

    def __init__(self, w: float, x: float, y: float, z: float) -> None:
        """
        Initialize a quaternion with scalar-first convention.

        Parameters
        ----------
        w : float
            Scalar part.
        x : float
            i-component of the vector part.
        y : float
            j-component of the vector part.
        z : float
            k-component of the vector part.

        Notes
        -----
        Any real values are accepted, including NaN and infinities; they
        propagate through the arithmetic under IEEE-754 rules.
        """
        self._q = np.array([w, x, y, z], dtype=np.float64)
        self._q.flags.writeable = False

    # =========================================================================
    # PROPERTIES - Read access to quaternion components
    # =========================================================================

    @property
    def w(self) -> float:
        """Scalar (real) part of the quaternion."""
        return float(self._q[0])

    @property
    def x(self) -> float:
        """First imaginary component (i-axis)."""
        return float(self._q[1])

    @property
    def y(self) -> float:
        """Second imaginary component (j-axis)."""
        return float(self._q[2])

    @property
    def z(self) -> float:
        """Third imaginary component (k-axis)."""
        return float(self._q[3])

    @property
    def scalar(self) -> float:
        """Scalar part of the quaternion (alias for w)."""
        return self.w

    @property
    def vector(self) -> np.ndarray:
        """Vector (imaginary) part [x, y, z] as a new 3-element array."""
        return self._q[1:4].copy()

    @property
    def components(self) -> np.ndarray:
        """
        Full quaternion as a 4-element numpy array [w, x, y, z].

        Returns
        -------
        np.ndarray
            Writable copy of the components.
        """
        return self._q.copy()

    @property
    def norm_squared(self) -> float:
        """Sum of squared components, w^2 + x^2 + y^2 + z^2."""
        return float(np.dot(self._q, self._q))

    @property
    def norm(self) -> float:
        """
        Euclidean norm (magnitude) of the quaternion as a 4-vector.

        Returns
        -------
        float
            sqrt(w^2 + x^2 + y^2 + z^2). Never negative; NaN only if a
            component is NaN.
        """
        return float(np.sqrt(self.norm_squared))

    # =========================================================================
    # STATIC FACTORY METHODS
    # =========================================================================

    @staticmethod
    def identity() -> 'Quaternion':
        """
        Create the identity quaternion [1, 0, 0, 0].

        The identity quaternion is the multiplicative identity element
        (q * identity = q) and represents zero rotation.
        """
        return Quaternion(1.0, 0.0, 0.0, 0.0)

    @staticmethod
    def from_axis_angle(axis, angle: float) -> 'Quaternion':
        """
        Create a unit quaternion from an axis-angle representation.

            q = [cos(theta/2), sin(theta/2) * n]

        Parameters
        ----------
        axis : array_like
            3-element rotation axis vector. Normalized internally.
        angle : float
            Rotation angle in radians.

        Returns
        -------
        Quaternion
            Unit quaternion representing the rotation.

        Raises
        ------
        ValueError
            If axis is not a 3-vector or has near-zero magnitude.
        """
        axis = np.asarray(axis, dtype=np.float64)

        if axis.shape != (3,):
            raise ValueError(f"Rotation axis must be a 3-vector, got shape {axis.shape}")

        axis_norm = np.linalg.norm(axis)

        if axis_norm < AXIS_NORM_MINIMUM:
            raise ValueError(
                "Rotation axis has near-zero magnitude. "
                "Cannot define a rotation about a zero vector."
            )

        n = axis / axis_norm

        half_angle = angle / 2.0
        sin_half = np.sin(half_angle)

        return Quaternion(np.cos(half_angle), sin_half * n[0], sin_half * n[1], sin_half * n[2])

    @staticmethod
    def from_rotation_matrix(matrix) -> 'Quaternion':
        """
        Create a quaternion from a 3x3 rotation matrix.

        Uses the trace-branching form of Shepperd's method. When the trace is
        positive, w is the largest component and is extracted first;
        otherwise the component matching the largest diagonal entry is
        extracted first. This keeps the square root argument away from zero
        near 180-degree rotations.

        Branch order (strict inequalities; ties fall through):
            1. trace > 0
            2. R[0,0] > R[1,1] and R[0,0] > R[2,2]
            3. R[1,1] > R[2,2]
            4. otherwise

        Parameters
        ----------
        matrix : array_like
            3x3 rotation matrix, row-major. It is NOT checked for
            orthonormality.

        Returns
        -------
        Quaternion
            Quaternion for the rotation. Which of q / -q comes back depends on
            the branch.

        Raises
        ------
        ValueError
            If matrix is not 3x3.

        Notes
        -----
        The branch picks the largest of trace and the diagonal entries, so
        for any finite matrix the square root argument is at least 1. A
        matrix that is not a proper rotation therefore still yields finite
        numbers, just not a meaningful rotation. NaN or infinite entries
        propagate into the result as NaN; no exception is raised.
        """
        R = as_rotation_matrix(matrix)

        trace = R[0, 0] + R[1, 1] + R[2, 2]

        if trace > 0.0:
            s = 0.5 / np.sqrt(trace + 1.0)
            w = 0.25 / s
            x = (R[2, 1] - R[1, 2]) * s
            y = (R[0, 2] - R[2, 0]) * s
            z = (R[1, 0] - R[0, 1]) * s
        elif R[0, 0] > R[1, 1] and R[0, 0] > R[2, 2]:
            s = 2.0 * np.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2])
            w = (R[2, 1] - R[1, 2]) / s
            x = 0.25 * s
            y = (R[0, 1] + R[1, 0]) / s
            z = (R[0, 2] + R[2, 0]) / s
        elif R[1, 1] > R[2, 2]:
            s = 2.0 * np.sqrt(1.0 + R[1, 1] - R[0, 0] - R[2, 2])
            w = (R[0, 2] - R[2, 0]) / s
            x = (R[0, 1] + R[1, 0]) / s
            y = 0.25 * s
            z = (R[1, 2] + R[2, 1]) / s
        else:
            s = 2.0 * np.sqrt(1.0 + R[2, 2] - R[0, 0] - R[1, 1])
            w = (R[1, 0] - R[0, 1]) / s
            x = (R[0, 2] + R[2, 0]) / s
            y = (R[1, 2] + R[2, 1]) / s
            z = 0.25 * s

        return Quaternion(w, x, y, z)

    # =========================================================================
    # QUATERNION ARITHMETIC
    # =========================================================================

    def add(self, other: 'Quaternion') -> 'Quaternion':
        """Component-wise sum self + other."""
        q = self._q + other._q
        return Quaternion(q[0], q[1], q[2], q[3])

    def subtract(self, other: 'Quaternion') -> 'Quaternion':
        """Component-wise difference self - other."""
        q = self._q - other._q
        return Quaternion(q[0], q[1], q[2], q[3])

    def multiply(self, other: 'Quaternion') -> 'Quaternion':
        """
        Multiply this quaternion by another (Hamilton product).

        Quaternion multiplication is NOT commutative: q1 * q2 != q2 * q1
        in general. For unit quaternions, self * other rotates first by
        'other' and then by 'self'.

        The Hamilton product formula is:

            (a1 + b1*i + c1*j + d1*k) * (a2 + b2*i + c2*j + d2*k) =

            (a1*a2 - b1*b2 - c1*c2 - d1*d2) +
            (a1*b2 + b1*a2 + c1*d2 - d1*c2) i +
            (a1*c2 - b1*d2 + c1*a2 + d1*b2) j +
            (a1*d2 + b1*c2 - c1*b2 + d1*a2) k

        Parameters
        ----------
        other : Quaternion
            The right-hand quaternion in the product.

        Returns
        -------
        Quaternion
            The Hamilton product self * other.
        """
        a1, b1, c1, d1 = self.w, self.x, self.y, self.z
        a2, b2, c2, d2 = other.w, other.x, other.y, other.z

        w = a1 * a2 - b1 * b2 - c1 * c2 - d1 * d2
        x = a1 * b2 + b1 * a2 + c1 * d2 - d1 * c2
        y = a1 * c2 - b1 * d2 + c1 * a2 + d1 * b2
        z = a1 * d2 + b1 * c2 - c1 * b2 + d1 * a2

        return Quaternion(w, x, y, z)

    def scale(self, factor: float) -> 'Quaternion':
        """Multiply all four components by a real scalar."""
        q = self._q * float(factor)
        return Quaternion(q[0], q[1], q[2], q[3])

    def conjugate(self) -> 'Quaternion':
        """
        Return the quaternion conjugate.

        For q = [w, x, y, z], the conjugate is q* = [w, -x, -y, -z].
        For unit quaternions the conjugate is the reverse rotation.
        """
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def inverse(self) -> 'Quaternion':
        """
        Return the multiplicative inverse.

            q^{-1} = q* / |q|^2

        Each component of the conjugate is scaled by 1 / |q|^2.

        Returns
        -------
        Quaternion
            The inverse, such that q * q^{-1} = identity (up to rounding).

        Raises
        ------
        ZeroNormError
            If |q|^2 is exactly 0.0. There is no tolerance band: a tiny but
            nonzero quaternion returns a very large finite inverse.
        """
        norm_sq = self.norm_squared

        if norm_sq == 0.0:
            raise ZeroNormError("Cannot invert a quaternion with zero norm.")

        return self.conjugate().scale(1.0 / norm_sq)

    def normalize(self) -> 'Quaternion':
        """
        Return a new unit-magnitude quaternion q / |q|.

        Raises
        ------
        ZeroNormError
            If the quaternion is exactly zero.
        """
        n = self.norm

        if n == 0.0:
            raise ZeroNormError("Cannot normalize a quaternion with zero norm.")

        q = self._q / n
        return Quaternion(q[0], q[1], q[2], q[3])

    # =========================================================================
    # CONVERSION METHODS
    # =========================================================================

    def to_rotation_matrix(self) -> RotationMatrix:
        """
        Convert to a 3x3 rotation matrix.

        The elements of R in terms of quaternion components are:

            R = | 1-2(y^2+z^2)    2(xy-wz)      2(xz+wy)   |
                | 2(xy+wz)      1-2(x^2+z^2)    2(yz-wx)   |
                | 2(xz-wy)      2(yz+wx)      1-2(x^2+y^2) |

        The quaternion is assumed to be unit-norm and is NOT normalized
        first; for a non-unit quaternion the result is not orthogonal.
        Call normalize() beforehand if needed.

        Returns
        -------
        np.ndarray
            New (3, 3) float64 array.
        """
        w, x, y, z = self.w, self.x, self.y, self.z

        # Pre-compute products that appear multiple times
        xx = x * x
        yy = y * y
        zz = z * z
        xy = x * y
        xz = x * z
        yz = y * z
        wx = w * x
        wy = w * y
        wz = w * z

        return np.array([
            [1.0 - 2.0 * (yy + zz),  2.0 * (xy - wz),        2.0 * (xz + wy)],
            [2.0 * (xy + wz),         1.0 - 2.0 * (xx + zz),  2.0 * (yz - wx)],
            [2.0 * (xz - wy),         2.0 * (yz + wx),         1.0 - 2.0 * (xx + yy)]
        ], dtype=np.float64)

    def to_axis_angle(self) -> Tuple[np.ndarray, float]:
        """
        Convert a unit quaternion to (axis, angle).

        Returns
        -------
        tuple of (np.ndarray, float)
            Unit rotation axis and angle in radians in [0, 2*pi]. For the
            identity rotation the axis is undefined; [0, 0, 1] is returned.
        """
        vec = self.vector
        vec_norm = np.linalg.norm(vec)
        angle = 2.0 * np.arctan2(vec_norm, self.w)

        if vec_norm < AXIS_NORM_MINIMUM:
            return (np.array([0.0, 0.0, 1.0]), float(angle))

        return (vec / vec_norm, float(angle))

    # =========================================================================
    # COMPARISON
    # =========================================================================

    def is_unit(self, tolerance: float = UNIT_NORM_TOLERANCE) -> bool:
        """True if |q| is within tolerance of 1.0."""
        return abs(self.norm - 1.0) < tolerance

    def is_close(self, other: 'Quaternion', atol: float = COMPARISON_TOLERANCE,
                 same_rotation: bool = False) -> bool:
        """
        Tolerance-based comparison.

        Parameters
        ----------
        other : Quaternion
            Quaternion to compare against.
        atol : float
            Maximum Euclidean distance between the component vectors.
        same_rotation : bool
            If True, -other also matches (q and -q are the same rotation).

        Returns
        -------
        bool
            True if the quaternions are within atol of each other.
        """
        diff = np.linalg.norm(self._q - other._q)

        if same_rotation:
            diff = min(diff, np.linalg.norm(self._q + other._q))

        return bool(diff <= atol)

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __add__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return self.add(other)
        return NotImplemented

    def __sub__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return self.subtract(other)
        return NotImplemented

    def __mul__(self, other: Union['Quaternion', float, int]) -> 'Quaternion':
        """
        Multiplication operator.

        - Quaternion * Quaternion -> Hamilton product
        - Quaternion * scalar -> component-wise scaling
        """
        if isinstance(other, Quaternion):
            return self.multiply(other)
        elif isinstance(other, numbers.Real):
            return self.scale(other)
        return NotImplemented

    def __rmul__(self, other: Union[float, int]) -> 'Quaternion':
        """Right-multiplication by a scalar: scalar * Quaternion."""
        if isinstance(other, numbers.Real):
            return self.scale(other)
        return NotImplemented

    def __neg__(self) -> 'Quaternion':
        """
        Negate all components.

        -q represents the same rotation as q.
        """
        return Quaternion(-self.w, -self.x, -self.y, -self.z)

    def __eq__(self, other: object) -> bool:
        """
        Exact component-wise equality.

        No tolerance and no q/-q folding: two quaternions are equal iff
        w, x, y and z each compare equal under IEEE-754 (so NaN never equals
        anything, and 0.0 equals -0.0).
        """
        if not isinstance(other, Quaternion):
            return NotImplemented
        return bool(np.array_equal(self._q, other._q))

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        """Hash of the exact components; equal quaternions hash equal."""
        return hash(tuple(float(c) for c in self._q))

    def __iter__(self):
        """Iterate over (w, x, y, z) so a quaternion unpacks like a tuple."""
        return iter((self.w, self.x, self.y, self.z))

    def __len__(self) -> int:
        return QUATERNION_SIZE

    def __repr__(self) -> str:
        """
        String representation exposing all four components.

        Format: Quaternion(w=..., x=..., y=..., z=...), with each value in
        Python's shortest round-trippable float form.
        """
        return (f"Quaternion(w={self.w!r}, x={self.x!r}, "
                f"y={self.y!r}, z={self.z!r})")

    __str__ = __repr__
