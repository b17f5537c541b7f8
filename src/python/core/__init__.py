"""
===============================================================================
QUATERNION ALGEBRA - Core Module
===============================================================================
Quaternion value type and the 3x3 rotation-matrix helpers it converts to and
from.

Submodules:
    constants        -- Comparison tolerances and fixed shapes
    rotation_matrix  -- RotationMatrix alias, coercion and validity checks
    quaternion       -- Quaternion class and ZeroNormError
===============================================================================
"""
