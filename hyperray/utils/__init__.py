"""JAX utilities for hyperray."""

from .math_utils import acosh_snapped, boost_matrix, rotation_matrix

__all__ = [
    "acosh_snapped",
    "boost_matrix",
    "rotation_matrix",
]
