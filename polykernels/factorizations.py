"""Cholesky factorization, LU factorization and an LU-based linear solve."""

from __future__ import annotations

import sys
import time
from typing import Iterator, Optional, TextIO, Tuple

import numpy as np

from polykernels.common import (
    VALUES_PER_LINE,
    Dataset,
    grid_entries,
    parse_dataset,
    vector_entries,
    write_dump,
)

CHOLESKY_SIZES = {
    Dataset.MINI: 40,
    Dataset.SMALL: 120,
    Dataset.MEDIUM: 400,
    Dataset.LARGE: 2000,
    Dataset.EXTRALARGE: 4000,
}
LU_SIZES = dict(CHOLESKY_SIZES)
LUDCMP_SIZES = dict(CHOLESKY_SIZES)


def _as_square(matrix) -> np.ndarray:
    array = np.array(matrix, dtype=float)
    if array.ndim != 2 or array.shape[0] != array.shape[1]:
        raise ValueError("A must be a square 2-D array")
    return array


def make_spd_matrix(n: int) -> np.ndarray:
    """Return ``L L^T`` where ``L`` is unit lower triangular with ``L[i][j] = 1 - j/n`` below the diagonal."""
    i = np.arange(n)[:, None]
    j = np.arange(n)[None, :]
    lower = np.where(j <= i, 1.0 - j / float(n), 0.0)
    np.fill_diagonal(lower, 1.0)
    return lower @ lower.T


def init_cholesky(n: int) -> np.ndarray:
    """Return the symmetric positive definite starting matrix."""
    return make_spd_matrix(n)


def kernel_cholesky(A) -> np.ndarray:
    """Return ``A`` with its lower triangle replaced by the Cholesky factor ``L`` (``A = L L^T``).

    The strict upper triangle is left as it was. A matrix that is not
    positive definite gives NaN entries.
    """
    A = _as_square(A)
    n = A.shape[0]
    with np.errstate(divide="ignore", invalid="ignore"):
        for j in range(n):
            A[j, j] = np.sqrt(A[j, j] - np.dot(A[j, :j], A[j, :j]))
            if j + 1 < n:
                A[j + 1:, j] = (A[j + 1:, j] - A[j + 1:, :j] @ A[j, :j]) / A[j, j]
    return A


def _lower_entries(A) -> Iterator[Optional[float]]:
    A = np.asarray(A)
    n = A.shape[0]
    for i, row in enumerate(A):
        for j, value in enumerate(row[: i + 1]):
            if (i * n + j) % VALUES_PER_LINE == 0:
                yield None
            yield float(value)


def print_cholesky(A, out: TextIO) -> None:
    """Dump the lower triangle of the Cholesky result."""
    write_dump(out, "A", _lower_entries(A))


def run_cholesky(dataset, out: Optional[TextIO]) -> float:
    """Run the Cholesky benchmark, dump the result and return the kernel time in seconds."""
    n = CHOLESKY_SIZES[parse_dataset(dataset)]
    A = init_cholesky(n)
    start = time.perf_counter()
    A = kernel_cholesky(A)
    elapsed = time.perf_counter() - start
    print_cholesky(A, out if out is not None else sys.stdout)
    return elapsed


def init_lu(n: int) -> np.ndarray:
    """Return the starting matrix, the same one the Cholesky benchmark uses."""
    return make_spd_matrix(n)


def kernel_lu(A) -> np.ndarray:
    """Return the LU factors of ``A`` packed in one matrix, without pivoting.

    The strict lower triangle holds the unit lower factor ``L``, the upper
    triangle including the diagonal holds ``U``.
    """
    A = _as_square(A)
    n = A.shape[0]
    with np.errstate(divide="ignore", invalid="ignore"):
        for k in range(n - 1):
            A[k + 1:, k] /= A[k, k]
            A[k + 1:, k + 1:] -= np.outer(A[k + 1:, k], A[k, k + 1:])
    return A


def print_lu(A, out: TextIO) -> None:
    """Dump the packed LU factors."""
    A = np.asarray(A)
    write_dump(out, "A", grid_entries(A, A.shape[0]))


def run_lu(dataset, out: Optional[TextIO]) -> float:
    """Run the LU benchmark, dump the result and return the kernel time in seconds."""
    n = LU_SIZES[parse_dataset(dataset)]
    A = init_lu(n)
    start = time.perf_counter()
    A = kernel_lu(A)
    elapsed = time.perf_counter() - start
    print_lu(A, out if out is not None else sys.stdout)
    return elapsed


def init_ludcmp(n: int) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(A, b)``: the Cholesky starting matrix and ``b[i] = (i+1)/n/2 + 4``."""
    b = (np.arange(n) + 1) / float(n) / 2.0 + 4.0
    return make_spd_matrix(n), b


def kernel_ludcmp(A, b) -> np.ndarray:
    """Solve ``A x = b`` by LU factorization and forward and back substitution."""
    LU = kernel_lu(A)
    n = LU.shape[0]
    b = np.asarray(b, dtype=float)
    if b.shape != (n,):
        raise ValueError(f"b must be a vector of length {n}")
    y = np.empty(n)
    for i in range(n):
        y[i] = b[i] - np.dot(LU[i, :i], y[:i])
    x = np.empty(n)
    with np.errstate(divide="ignore", invalid="ignore"):
        for i in reversed(range(n)):
            x[i] = (y[i] - np.dot(LU[i, i + 1:], x[i + 1:])) / LU[i, i]
    return x


def print_ludcmp(x, out: TextIO) -> None:
    """Dump the solution vector."""
    write_dump(out, "x", vector_entries(x))


def run_ludcmp(dataset, out: Optional[TextIO]) -> float:
    """Run the ludcmp benchmark, dump the result and return the kernel time in seconds."""
    n = LUDCMP_SIZES[parse_dataset(dataset)]
    A, b = init_ludcmp(n)
    start = time.perf_counter()
    x = kernel_ludcmp(A, b)
    elapsed = time.perf_counter() - start
    print_ludcmp(x, out if out is not None else sys.stdout)
    return elapsed