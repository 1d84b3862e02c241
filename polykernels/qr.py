"""QR decomposition by modified Gram-Schmidt."""

from __future__ import annotations

import sys
import time
from typing import Optional, TextIO, Tuple

import numpy as np

from polykernels.common import Dataset, grid_entries, parse_dataset, write_dump

# (m, n): A is m x n
GRAMSCHMIDT_SIZES = {
    Dataset.MINI: (20, 30),
    Dataset.SMALL: (60, 80),
    Dataset.MEDIUM: (200, 240),
    Dataset.LARGE: (1000, 1200),
    Dataset.EXTRALARGE: (2000, 2600),
}


def init_gramschmidt(m: int, n: int) -> np.ndarray:
    """Return ``A`` of shape (m, n) with ``A[i][j] = ((i*j) % m) / m * 100 + 10``."""
    i = np.arange(m)[:, None]
    j = np.arange(n)[None, :]
    return ((i * j) % m) / float(m) * 100.0 + 10.0


def kernel_gramschmidt(A) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(R, Q)`` with ``A = Q R``, ``R`` upper triangular (n x n) and ``Q`` m x n.

    Columns that become zero give NaN entries, as the plain algorithm does.
    """
    A = np.array(A, dtype=float)
    if A.ndim != 2:
        raise ValueError("A must be a 2-D array")
    m, n = A.shape
    R = np.zeros((n, n))
    Q = np.zeros((m, n))
    with np.errstate(divide="ignore", invalid="ignore"):
        for k in range(n):
            R[k, k] = np.sqrt(np.dot(A[:, k], A[:, k]))
            Q[:, k] = A[:, k] / R[k, k]
            if k + 1 < n:
                R[k, k + 1:] = Q[:, k] @ A[:, k + 1:]
                A[:, k + 1:] -= np.outer(Q[:, k], R[k, k + 1:])
    return R, Q


def print_gramschmidt(R, Q, out: TextIO) -> None:
    """Dump ``R`` and then ``Q``."""
    R = np.asarray(R)
    Q = np.asarray(Q)
    n = R.shape[0]
    write_dump(out, "R", grid_entries(R, n))
    write_dump(out, "Q", grid_entries(Q, n))


def run_gramschmidt(dataset, out: Optional[TextIO]) -> float:
    """Run the Gram-Schmidt benchmark, dump the result and return the kernel time in seconds."""
    m, n = GRAMSCHMIDT_SIZES[parse_dataset(dataset)]
    A = init_gramschmidt(m, n)
    start = time.perf_counter()
    R, Q = kernel_gramschmidt(A)
    elapsed = time.perf_counter() - start
    print_gramschmidt(R, Q, out if out is not None else sys.stdout)
    return elapsed