"""Tests for decomposition backends."""
import numpy as np
import pytest

from eigcompare.backends import (
    BackendRun,
    LibraryBackend,
    NativeBackend,
    make_backends,
)
from eigcompare.errors import DecompositionError

ALL_BACKENDS = [
    NativeBackend(),
    LibraryBackend(use_native_internally=True),
    LibraryBackend(use_native_internally=False),
]
IDS = ["native", "library-lapack", "library-qr"]


def failing_dgeev(code):
    """dgeev stand-in that reports the given status code."""

    def routine(a, compute_vl=1, compute_vr=1, overwrite_a=0):
        n = a.shape[0]
        return np.zeros(n), np.zeros(n), np.zeros((n, n)), np.zeros((n, n)), code

    return routine


@pytest.mark.parametrize("backend", ALL_BACKENDS, ids=IDS)
def test_input_not_mutated(backend):
    rng = np.random.RandomState(42)
    a = rng.uniform(-1, 1, size=(6, 6))
    before = a.copy()
    backend.decompose(a)
    np.testing.assert_array_equal(a, before)


@pytest.mark.parametrize("backend", ALL_BACKENDS, ids=IDS)
def test_read_only_input_accepted(backend):
    a = np.diag([1.0, 2.0, 3.0])
    a.setflags(write=False)
    result = backend.decompose(a)
    np.testing.assert_allclose(sorted(result.eigenvalues), [1.0, 2.0, 3.0], atol=1e-12)


@pytest.mark.parametrize("backend", ALL_BACKENDS, ids=IDS)
def test_idempotent(backend):
    """Same matrix twice: same eigenvalues (up to order), same eigenvector subspaces."""
    rng = np.random.RandomState(3)
    a = rng.uniform(-1, 1, size=(5, 5))
    a = a + a.T
    first = backend.decompose(a).canonical()
    second = backend.decompose(a).canonical()
    np.testing.assert_allclose(first.eigenvalues, second.eigenvalues, atol=1e-12)
    # Distinct eigenvalues: each column spans the same line
    overlap = np.abs(np.sum(first.eigenvectors * second.eigenvectors, axis=0))
    np.testing.assert_allclose(overlap, 1.0, atol=1e-10)


@pytest.mark.parametrize("backend", ALL_BACKENDS, ids=IDS)
def test_run_reports_duration(backend):
    run = backend.run(np.eye(3))
    assert isinstance(run, BackendRun)
    assert run.ok
    assert run.label == backend.label
    assert run.duration >= 0.0
    assert run.decomposition.n == 3


@pytest.mark.parametrize("backend", ALL_BACKENDS, ids=IDS)
def test_non_square_rejected(backend):
    with pytest.raises(ValueError):
        backend.decompose(np.ones((2, 3)))


@pytest.mark.parametrize("code", [3, -4])
def test_native_nonzero_status_raises(code):
    backend = NativeBackend(routine=failing_dgeev(code))
    with pytest.raises(DecompositionError) as excinfo:
        backend.decompose(np.eye(2))
    assert excinfo.value.code == code
    assert excinfo.value.backend == backend.label
    assert str(code) in str(excinfo.value)


def test_native_failure_folded_into_run():
    backend = NativeBackend(routine=failing_dgeev(2))
    run = backend.run(np.eye(2))
    assert not run.ok
    assert run.decomposition is None
    assert run.error.code == 2
    with pytest.raises(DecompositionError):
        run.unwrap()


def test_native_passes_dgeev_packing_through():
    """Rotation: wr = [0, 0], wi = [1, -1], V holds re/im parts in adjacent columns."""
    a = np.array([[0.0, -1.0], [1.0, 0.0]])
    result = NativeBackend().decompose(a)
    np.testing.assert_allclose(result.eigenvalues, [0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(sorted(result.eigenvalues_imag), [-1.0, 1.0])
    assert result.n_complex == 2
    # Packed re/im columns form a real basis, so V is invertible
    assert abs(np.linalg.det(result.eigenvectors)) > 1e-8


@pytest.mark.parametrize("use_lapack", [True, False])
def test_library_projects_complex_to_real(use_lapack):
    """Conjugate eigenvectors collapse onto one real vector; imag parts kept separately."""
    a = np.array([[0.0, -1.0], [1.0, 0.0]])
    result = LibraryBackend(use_native_internally=use_lapack).decompose(a)
    assert result.eigenvectors.dtype == np.float64
    np.testing.assert_allclose(result.eigenvalues, [0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(sorted(result.eigenvalues_imag), [-1.0, 1.0], atol=1e-12)
    assert result.n_complex == 2


def test_library_qr_nonconvergence():
    """A zero sweep budget cannot converge a matrix with a nonzero subdiagonal."""
    from eigcompare.backends import qr

    with pytest.raises(DecompositionError) as excinfo:
        qr.eig(np.array([[1.0, 2.0], [3.0, 4.0]]), max_iter_per_eigenvalue=0)
    assert excinfo.value.code == 2


def test_library_labels():
    assert "with LAPACK" in LibraryBackend(True).label
    assert "without LAPACK" in LibraryBackend(False).label


def test_make_backends_env_default(monkeypatch):
    monkeypatch.setenv("EIGCOMPARE_LIBRARY_LAPACK", "0")
    native, library = make_backends()
    assert isinstance(native, NativeBackend)
    assert library.use_native_internally is False

    monkeypatch.delenv("EIGCOMPARE_LIBRARY_LAPACK")
    _, library = make_backends()
    assert library.use_native_internally is True

    _, library = make_backends(use_native_internally=False)
    assert library.use_native_internally is False


def test_library_linalg_error_becomes_decomposition_error(monkeypatch):
    from scipy import linalg

    def broken_eig(a, **kwargs):
        raise linalg.LinAlgError("eig algorithm did not converge")

    monkeypatch.setattr(linalg, "eig", broken_eig)
    backend = LibraryBackend(use_native_internally=True)

    with pytest.raises(DecompositionError) as excinfo:
        backend.decompose(np.eye(3))
    assert excinfo.value.backend == "SciPy Library (with LAPACK)"
    assert excinfo.value.code is None
    assert "did not converge" in str(excinfo.value)

    run = backend.run(np.eye(3))
    assert not run.ok
    assert run.error.backend == backend.label
