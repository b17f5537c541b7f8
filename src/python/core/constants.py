"""
===============================================================================
QUATERNION ALGEBRA - Numeric Constants and Tolerances
===============================================================================
Central place for the comparison tolerances and fixed shapes shared by the
quaternion and rotation-matrix modules.

Exact-equality semantics (``==`` on quaternions, the zero-norm check in the
inverse) use no tolerance; the values below are only used by the explicit
"close enough" helpers.
===============================================================================
"""


# =============================================================================
# TOLERANCES
# =============================================================================
UNIT_NORM_TOLERANCE = 1e-8             # |norm - 1| allowed by is_unit()
COMPARISON_TOLERANCE = 1e-9            # default atol for is_close()
ORTHOGONALITY_TOLERANCE = 1e-6         # |R^T R - I| allowed by is_rotation_matrix()
AXIS_NORM_MINIMUM = 1e-12              # shortest axis accepted by from_axis_angle()

# =============================================================================
# SHAPES
# =============================================================================
QUATERNION_SIZE = 4
MATRIX_SHAPE = (3, 3)
