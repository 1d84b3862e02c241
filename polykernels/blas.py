"""Level-2/3 BLAS-style kernels: general matrix product (gemm), vector
multiplication and matrix addition (gemver), and summed matrix-vector
products (gesummv)."""

from __future__ import annotations

import sys
import time
from typing import Optional, TextIO, Tuple

import numpy as np

from polykernels.common import Dataset, grid_entries, parse_dataset, vector_entries, write_dump

ALPHA = 1.5
BETA = 1.2

# (ni, nj, nk): C is ni x nj, A is ni x nk, B is nk x nj
GEMM_SIZES = {
    Dataset.MINI: (20, 25, 30),
    Dataset.SMALL: (60, 70, 80),
    Dataset.MEDIUM: (200, 220, 240),
    Dataset.LARGE: (1000, 1100, 1200),
    Dataset.EXTRALARGE: (2000, 2300, 2600),
}

GEMVER_SIZES = {
    Dataset.MINI: 40,
    Dataset.SMALL: 120,
    Dataset.MEDIUM: 400,
    Dataset.LARGE: 2000,
    Dataset.EXTRALARGE: 4000,
}

GESUMMV_SIZES = {
    Dataset.MINI: 30,
    Dataset.SMALL: 90,
    Dataset.MEDIUM: 250,
    Dataset.LARGE: 1300,
    Dataset.EXTRALARGE: 2800,
}


def _as_matrix(matrix, name: str) -> np.ndarray:
    array = np.array(matrix, dtype=float)
    if array.ndim != 2:
        raise ValueError(f"{name} must be a 2-D array")
    return array


def _as_vector(vector, size: int, name: str) -> np.ndarray:
    array = np.array(vector, dtype=float)
    if array.shape != (size,):
        raise ValueError(f"{name} must be a vector of length {size}")
    return array


def _grid(rows: int, cols: int) -> Tuple[np.ndarray, np.ndarray]:
    return np.arange(rows)[:, None], np.arange(cols)[None, :]


def init_gemm(ni: int, nj: int, nk: int):
    """Return ``(alpha, beta, C, A, B)`` with the benchmark's starting values."""
    i, j = _grid(ni, nj)
    C = ((i * j + 1) % ni) / float(ni)
    i, j = _grid(ni, nk)
    A = (i * (j + 1) % nk) / float(nk)
    i, j = _grid(nk, nj)
    B = (i * (j + 2) % nj) / float(nj)
    return ALPHA, BETA, C, A, B


def kernel_gemm(alpha: float, beta: float, C, A, B) -> np.ndarray:
    """Return ``alpha * A B + beta * C``."""
    C = _as_matrix(C, "C")
    A = _as_matrix(A, "A")
    B = _as_matrix(B, "B")
    ni, nj = C.shape
    if A.shape[0] != ni or B.shape[1] != nj or A.shape[1] != B.shape[0]:
        raise ValueError("C, A and B have incompatible shapes")
    return beta * C + alpha * (A @ B)


def print_gemm(C, out: TextIO) -> None:
    """Dump the gemm result matrix."""
    C = np.asarray(C)
    write_dump(out, "C", grid_entries(C, C.shape[0]))


def run_gemm(dataset, out: Optional[TextIO]) -> float:
    """Run the gemm benchmark, dump the result and return the kernel time in seconds."""
    ni, nj, nk = GEMM_SIZES[parse_dataset(dataset)]
    alpha, beta, C, A, B = init_gemm(ni, nj, nk)
    start = time.perf_counter()
    C = kernel_gemm(alpha, beta, C, A, B)
    elapsed = time.perf_counter() - start
    print_gemm(C, out if out is not None else sys.stdout)
    return elapsed


def init_gemver(n: int):
    """Return ``(alpha, beta, A, u1, v1, u2, v2, w, x, y, z)`` with the starting values."""
    fn = float(n)
    idx = np.arange(n, dtype=float)
    step = (idx + 1) / fn
    u1 = idx.copy()
    u2 = step / 2.0
    v1 = step / 4.0
    v2 = step / 6.0
    y = step / 8.0
    z = step / 9.0
    x = np.zeros(n)
    w = np.zeros(n)
    i, j = _grid(n, n)
    A = (i * j % n) / fn
    return ALPHA, BETA, A, u1, v1, u2, v2, w, x, y, z


def kernel_gemver(alpha: float, beta: float, A, u1, v1, u2, v2, w, x, y, z):
    """Return ``(A, x, w)`` after the rank-2 update and the two matrix-vector products.

    ``A' = A + u1 v1^T + u2 v2^T``, ``x' = x + beta A'^T y + z`` and
    ``w' = w + alpha A' x'``.
    """
    A = _as_matrix(A, "A")
    n = A.shape[0]
    if A.shape != (n, n):
        raise ValueError("A must be square")
    u1, v1, u2, v2, w, x, y, z = (
        _as_vector(vec, n, name)
        for vec, name in zip(
            (u1, v1, u2, v2, w, x, y, z),
            ("u1", "v1", "u2", "v2", "w", "x", "y", "z"),
        )
    )
    A = A + np.outer(u1, v1) + np.outer(u2, v2)
    x = x + beta * (A.T @ y)
    x = x + z
    w = w + alpha * (A @ x)
    return A, x, w


def print_gemver(w, out: TextIO) -> None:
    """Dump the gemver result vector."""
    write_dump(out, "w", vector_entries(w))


def run_gemver(dataset, out: Optional[TextIO]) -> float:
    """Run the gemver benchmark, dump the result and return the kernel time in seconds."""
    n = GEMVER_SIZES[parse_dataset(dataset)]
    alpha, beta, A, u1, v1, u2, v2, w, x, y, z = init_gemver(n)
    start = time.perf_counter()
    _, _, w = kernel_gemver(alpha, beta, A, u1, v1, u2, v2, w, x, y, z)
    elapsed = time.perf_counter() - start
    print_gemver(w, out if out is not None else sys.stdout)
    return elapsed


def init_gesummv(n: int):
    """Return ``(alpha, beta, A, B, x)`` with the benchmark's starting values."""
    fn = float(n)
    x = (np.arange(n) % n) / fn
    i, j = _grid(n, n)
    A = ((i * j + 1) % n) / fn
    B = ((i * j + 2) % n) / fn
    return ALPHA, BETA, A, B, x


def kernel_gesummv(alpha: float, beta: float, A, B, x) -> np.ndarray:
    """Return ``alpha * A x + beta * B x``."""
    A = _as_matrix(A, "A")
    B = _as_matrix(B, "B")
    n = A.shape[0]
    if A.shape != (n, n) or B.shape != (n, n):
        raise ValueError("A and B must be square matrices of the same size")
    x = _as_vector(x, n, "x")
    return alpha * (A @ x) + beta * (B @ x)


def print_gesummv(y, out: TextIO) -> None:
    """Dump the gesummv result vector."""
    write_dump(out, "y", vector_entries(y))


def run_gesummv(dataset, out: Optional[TextIO]) -> float:
    """Run the gesummv benchmark, dump the result and return the kernel time in seconds."""
    n = GESUMMV_SIZES[parse_dataset(dataset)]
    alpha, beta, A, B, x = init_gesummv(n)
    start = time.perf_counter()
    y = kernel_gesummv(alpha, beta, A, B, x)
    elapsed = time.perf_counter() - start
    print_gesummv(y, out if out is not None else sys.stdout)
    return elapsed