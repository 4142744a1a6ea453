"""
Decomposition backends.

Usage:
    from eigcompare.backends import make_backends

    native, library = make_backends(use_native_internally=False)
    run = native.run(matrix)

The library backend's mode defaults to the EIGCOMPARE_LIBRARY_LAPACK
environment variable ("0" selects the pure numpy QR solver).
"""
import os

from eigcompare.backends.base import BackendRun, DecompositionBackend
from eigcompare.backends.native import NativeBackend
from eigcompare.backends.library import LibraryBackend


def _library_lapack_default() -> bool:
    return os.environ.get("EIGCOMPARE_LIBRARY_LAPACK", "1") != "0"


def make_backends(use_native_internally: bool = None):
    """Build the (native, library) pair once, at harness construction time."""
    if use_native_internally is None:
        use_native_internally = _library_lapack_default()
    return NativeBackend(), LibraryBackend(use_native_internally=use_native_internally)


__all__ = [
    "BackendRun",
    "DecompositionBackend",
    "NativeBackend",
    "LibraryBackend",
    "make_backends",
]
