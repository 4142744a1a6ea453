"""
Random Matrix Generation

Uniform [-1, 1] square matrices with an operator-driven regeneration
loop for poorly conditioned draws.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from eigcompare.config import EIGCOMPARE_CONFIG as cfg
from eigcompare.matrix.condition import condition_number, is_well_conditioned

logger = logging.getLogger(__name__)

# (condition_number, attempt) -> None / bool
ConditionObserver = Callable[[float, int], None]
RegenerateDecision = Callable[[float, int], bool]


@dataclass(frozen=True)
class ConditionedMatrix:
    """Generated matrix plus every condition number seen on the way."""

    matrix: np.ndarray
    condition_number: float
    history: Tuple[float, ...]

    @property
    def attempts(self) -> int:
        return len(self.history)


def random_matrix(n: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """
    Draw an n x n matrix with independent entries uniform in [low, high].

    Parameters
    ----------
    n : int
        Matrix order, must be >= 1
    rng : np.random.Generator, optional
        Source of randomness (default: fresh default_rng())

    Returns
    -------
    np.ndarray
        Read-only float64 matrix (n x n)
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
        raise ValueError(f"Matrix size must be a positive integer, got {n!r}")

    if rng is None:
        rng = np.random.default_rng()

    matrix = rng.uniform(cfg.conditioning.low, cfg.conditioning.high, size=(n, n))
    matrix.setflags(write=False)
    return matrix


def generate_conditioned(
    n: int,
    confirm: RegenerateDecision,
    rng: Optional[np.random.Generator] = None,
    threshold: float = None,
    observer: Optional[ConditionObserver] = None,
) -> ConditionedMatrix:
    """
    Generate a random matrix, offering regeneration while it is poorly conditioned.

    Parameters
    ----------
    n : int
        Matrix order
    confirm : callable
        confirm(cond, attempt) -> bool. Called each time the current matrix
        exceeds the threshold. True regenerates, False keeps the matrix.
    rng : np.random.Generator, optional
        Source of randomness
    threshold : float, optional
        Condition number threshold (default: cfg.conditioning.threshold)
    observer : callable, optional
        observer(cond, attempt), called for every generated matrix before
        the decision. attempt 0 is the first matrix.

    Returns
    -------
    ConditionedMatrix

    Notes
    -----
    There is no cap on attempts. The loop ends when a matrix is at or
    below the threshold or when confirm returns False, in which case the
    last (poorly conditioned) matrix is returned.
    """
    if threshold is None:
        threshold = cfg.conditioning.threshold
    if rng is None:
        rng = np.random.default_rng()

    history = []
    attempt = 0

    while True:
        matrix = random_matrix(n, rng)
        cond = condition_number(matrix)
        history.append(cond)
        logger.debug("attempt %d: condition number %g", attempt, cond)

        if observer is not None:
            observer(cond, attempt)

        if is_well_conditioned(cond, threshold):
            break
        if not confirm(cond, attempt):
            logger.warning(
                "Using poorly conditioned matrix (cond=%g > %g)", cond, threshold
            )
            break
        attempt += 1

    return ConditionedMatrix(matrix=matrix, condition_number=cond, history=tuple(history))
