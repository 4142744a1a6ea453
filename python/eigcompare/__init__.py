"""
eigcompare — native vs library eigendecomposition comparison.

Generates a random square matrix, decomposes it with LAPACK dgeev and
with a library solver (LAPACK-backed or self-contained QR), checks both
by reconstruction and reports timing and accuracy side by side.

Usage:
    from eigcompare import make_backends, Harness, Reporter
    import sys

    native, library = make_backends(use_native_internally=True)
    result = Harness(native, library, Reporter(sys.stdout)).run(100)

    # Or piece by piece:
    from eigcompare.matrix import condition_number, relative_error
    from eigcompare.backends.qr import eig
"""
__version__ = "0.1.0"

from eigcompare.errors import (  # noqa: E402
    EigCompareError,
    UsageError,
    DecompositionError,
    ReconstructionError,
)
from eigcompare.matrix import (  # noqa: E402
    EigenDecomposition,
    condition_number,
    random_matrix,
    generate_conditioned,
    relative_error,
)
from eigcompare.backends import (  # noqa: E402
    DecompositionBackend,
    NativeBackend,
    LibraryBackend,
    make_backends,
)
from eigcompare.report import ComparisonResult, Reporter, compare  # noqa: E402
from eigcompare.harness import Harness  # noqa: E402

__all__ = [
    "EigCompareError",
    "UsageError",
    "DecompositionError",
    "ReconstructionError",
    "EigenDecomposition",
    "condition_number",
    "random_matrix",
    "generate_conditioned",
    "relative_error",
    "DecompositionBackend",
    "NativeBackend",
    "LibraryBackend",
    "make_backends",
    "ComparisonResult",
    "Reporter",
    "compare",
    "Harness",
]
