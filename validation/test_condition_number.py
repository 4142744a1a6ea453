"""
Condition number validation against numpy.linalg.cond.

Ground truth: numpy.linalg.cond (2-norm, SVD based)

Known values:
- Identity:               1
- diag(2, 3):             1.5
- Q1 diag(s) Q2^T:        s_max / s_min
- Rank-deficient:         >= 1e6 (inf or huge)
"""
import math

import numpy as np
import pytest

from eigcompare.matrix.condition import condition_number


class TestConditionVsNumpy:
    """Compare against numpy.linalg.cond."""

    def test_identity(self):
        assert condition_number(np.eye(7)) == pytest.approx(1.0)

    def test_diag_2x2(self, diag_2x2):
        assert condition_number(diag_2x2) == pytest.approx(1.5, rel=1e-14)

    def test_known_singular_values(self, known_singular_values):
        m, s = known_singular_values
        assert condition_number(m) == pytest.approx(s.max() / s.min(), rel=1e-10)

    def test_random_vs_numpy(self):
        rng = np.random.RandomState(42)
        for n in (1, 2, 5, 20):
            m = rng.uniform(-1, 1, size=(n, n))
            assert condition_number(m) == pytest.approx(np.linalg.cond(m), rel=1e-8)

    def test_always_at_least_one(self):
        rng = np.random.RandomState(0)
        for _ in range(20):
            m = rng.uniform(-1, 1, size=(5, 5))
            assert condition_number(m) >= 1.0

    def test_rank_deficient_above_threshold(self, rank_deficient):
        assert condition_number(rank_deficient) >= 1e6

    def test_zero_matrix_is_inf(self):
        assert condition_number(np.zeros((3, 3))) == math.inf
