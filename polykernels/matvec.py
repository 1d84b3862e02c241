"""Matrix-vector kernels: A^T A x (atax), BiCG sub-kernel (bicg) and two transposed products (mvt)."""

from __future__ import annotations

import sys
import time
from typing import Optional, TextIO, Tuple

import numpy as np

from polykernels.common import Dataset, parse_dataset, vector_entries, write_dump

# (m, n)
ATAX_SIZES = {
    Dataset.MINI: (38, 42),
    Dataset.SMALL: (116, 124),
    Dataset.MEDIUM: (390, 410),
    Dataset.LARGE: (1900, 2100),
    Dataset.EXTRALARGE: (1800, 2200),
}
BICG_SIZES = dict(ATAX_SIZES)

MVT_SIZES = {
    Dataset.MINI: 40,
    Dataset.SMALL: 120,
    Dataset.MEDIUM: 400,
    Dataset.LARGE: 2000,
    Dataset.EXTRALARGE: 4000,
}


def _as_matrix(matrix) -> np.ndarray:
    array = np.array(matrix, dtype=float)
    if array.ndim != 2:
        raise ValueError("expected a 2-D array")
    return array


def _as_vector(vector, size: int, name: str) -> np.ndarray:
    array = np.array(vector, dtype=float)
    if array.shape != (size,):
        raise ValueError(f"{name} must be a vector of length {size}")
    return array


def _grid(rows: int, cols: int) -> Tuple[np.ndarray, np.ndarray]:
    return np.arange(rows)[:, None], np.arange(cols)[None, :]


def init_atax(m: int, n: int) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(A, x)``: ``A`` of shape (m, n) with ``A[i][j] = ((i+j) % n) / (5m)``
    and ``x[i] = 1 + i/n``."""
    x = 1.0 + np.arange(n) / float(n)
    i, j = _grid(m, n)
    A = ((i + j) % n) / float(5 * m)
    return A, x


def kernel_atax(A, x) -> np.ndarray:
    """Return ``y = A^T (A x)``."""
    A = _as_matrix(A)
    x = _as_vector(x, A.shape[1], "x")
    tmp = A @ x
    return A.T @ tmp


def print_atax(y, out: TextIO) -> None:
    """Dump the atax result vector."""
    write_dump(out, "y", vector_entries(y))


def run_atax(dataset, out: Optional[TextIO]) -> float:
    """Run the atax benchmark, dump the result and return the kernel time in seconds."""
    m, n = ATAX_SIZES[parse_dataset(dataset)]
    A, x = init_atax(m, n)
    start = time.perf_counter()
    y = kernel_atax(A, x)
    elapsed = time.perf_counter() - start
    print_atax(y, out if out is not None else sys.stdout)
    return elapsed


def init_bicg(m: int, n: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return ``(A, r, p)``: ``A`` of shape (n, m) with ``A[i][j] = (i*(j+1) % n) / n``,
    ``r[i] = (i % n) / n`` and ``p[i] = (i % m) / m``."""
    p = (np.arange(m) % m) / float(m)
    r = (np.arange(n) % n) / float(n)
    i, j = _grid(n, m)
    A = (i * (j + 1) % n) / float(n)
    return A, r, p


def kernel_bicg(A, r, p) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(s, q)`` with ``s = A^T r`` and ``q = A p``."""
    A = _as_matrix(A)
    n, m = A.shape
    r = _as_vector(r, n, "r")
    p = _as_vector(p, m, "p")
    return r @ A, A @ p


def print_bicg(s, q, out: TextIO) -> None:
    """Dump the two bicg result vectors."""
    write_dump(out, "s", vector_entries(s))
    write_dump(out, "q", vector_entries(q))


def run_bicg(dataset, out: Optional[TextIO]) -> float:
    """Run the bicg benchmark, dump the result and return the kernel time in seconds."""
    m, n = BICG_SIZES[parse_dataset(dataset)]
    A, r, p = init_bicg(m, n)
    start = time.perf_counter()
    s, q = kernel_bicg(A, r, p)
    elapsed = time.perf_counter() - start
    print_bicg(s, q, out if out is not None else sys.stdout)
    return elapsed


def init_mvt(n: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Return ``(x1, x2, y_1, y_2, A)`` filled with the benchmark's starting values."""
    idx = np.arange(n)
    x1 = (idx % n) / float(n)
    x2 = ((idx + 1) % n) / float(n)
    y_1 = ((idx + 3) % n) / float(n)
    y_2 = ((idx + 4) % n) / float(n)
    i, j = _grid(n, n)
    A = (i * j % n) / float(n)
    return x1, x2, y_1, y_2, A


def kernel_mvt(x1, x2, y_1, y_2, A) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(x1 + A y_1, x2 + A^T y_2)``."""
    A = _as_matrix(A)
    n = A.shape[0]
    if A.shape != (n, n):
        raise ValueError("A must be square")
    x1 = _as_vector(x1, n, "x1")
    x2 = _as_vector(x2, n, "x2")
    y_1 = _as_vector(y_1, n, "y_1")
    y_2 = _as_vector(y_2, n, "y_2")
    return x1 + A @ y_1, x2 + A.T @ y_2


def print_mvt(x1, x2, out: TextIO) -> None:
    """Dump the two mvt result vectors."""
    write_dump(out, "x1", vector_entries(x1))
    write_dump(out, "x2", vector_entries(x2))


def run_mvt(dataset, out: Optional[TextIO]) -> float:
    """Run the mvt benchmark, dump the result and return the kernel time in seconds."""
    n = MVT_SIZES[parse_dataset(dataset)]
    x1, x2, y_1, y_2, A = init_mvt(n)
    start = time.perf_counter()
    x1, x2 = kernel_mvt(x1, x2, y_1, y_2, A)
    elapsed = time.perf_counter() - start
    print_mvt(x1, x2, out if out is not None else sys.stdout)
    return elapsed