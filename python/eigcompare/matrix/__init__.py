"""
Matrix primitives: generation, conditioning, decomposition checks.
"""

from eigcompare.matrix.condition import (
    singular_values,
    condition_number,
    is_well_conditioned,
)
from eigcompare.matrix.generate import (
    ConditionedMatrix,
    random_matrix,
    generate_conditioned,
)
from eigcompare.matrix.decomposition import (
    EigenDecomposition,
    as_square_matrix,
    reconstruct,
    relative_error,
)

__all__ = [
    "singular_values",
    "condition_number",
    "is_well_conditioned",
    "ConditionedMatrix",
    "random_matrix",
    "generate_conditioned",
    "EigenDecomposition",
    "as_square_matrix",
    "reconstruct",
    "relative_error",
]
