"""
Shared test matrices with known properties.

Every matrix here has a mathematically provable characteristic
that numpy.linalg agrees on. No ambiguous cases.
"""
import numpy as np
import pytest


@pytest.fixture
def diag_2x2():
    """[[2, 0], [0, 3]]: eigenvalues {2, 3}, condition number 1.5."""
    return np.array([[2.0, 0.0], [0.0, 3.0]])


@pytest.fixture
def scalar_5():
    """1x1 matrix [5]: eigenvalue 5, eigenvector [1]."""
    return np.array([[5.0]])


@pytest.fixture
def diagonal_distinct():
    """Diagonal with distinct positive entries: eigenvalues = diagonal."""
    return np.diag([0.5, 1.0, 2.0, 4.0, 8.0])


@pytest.fixture
def known_singular_values():
    """Q1 diag(s) Q2^T with orthogonal Q1, Q2: condition number = 100 / 0.25."""
    rng = np.random.RandomState(42)
    q1, _ = np.linalg.qr(rng.randn(6, 6))
    q2, _ = np.linalg.qr(rng.randn(6, 6))
    s = np.array([100.0, 40.0, 10.0, 3.0, 1.0, 0.25])
    return q1 @ np.diag(s) @ q2.T, s


@pytest.fixture
def rank_deficient():
    """Rank 2 matrix of order 4: singular, condition number >= 1e6."""
    rng = np.random.RandomState(42)
    a = rng.uniform(-1, 1, size=(4, 2))
    b = rng.uniform(-1, 1, size=(2, 4))
    return a @ b


@pytest.fixture
def symmetric_random():
    """Symmetric 10x10: real eigenvalues, orthogonal eigenvectors."""
    rng = np.random.RandomState(42)
    a = rng.uniform(-1, 1, size=(10, 10))
    return a + a.T


@pytest.fixture
def nonsymmetric_random():
    """Uniform [-1, 1] 12x12: generic, almost surely has complex pairs."""
    rng = np.random.RandomState(7)
    return rng.uniform(-1, 1, size=(12, 12))


@pytest.fixture
def rotation():
    """90 degree rotation: eigenvalues +i and -i, no real eigenvector."""
    return np.array([[0.0, -1.0], [1.0, 0.0]])
