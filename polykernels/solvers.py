"""Levinson-Durbin recursion and lower-triangular forward substitution."""

from __future__ import annotations

import sys
import time
from typing import Iterator, Optional, TextIO, Tuple

import numpy as np

from polykernels.common import (
    VALUES_PER_LINE,
    Dataset,
    parse_dataset,
    vector_entries,
    write_dump,
)

DURBIN_SIZES = {
    Dataset.MINI: 40,
    Dataset.SMALL: 120,
    Dataset.MEDIUM: 400,
    Dataset.LARGE: 2000,
    Dataset.EXTRALARGE: 4000,
}
TRISOLV_SIZES = dict(DURBIN_SIZES)


def init_durbin(n: int) -> np.ndarray:
    """Return the vector ``r`` with ``r[i] = n + 1 - i``."""
    return (n + 1 - np.arange(n)).astype(float)


def kernel_durbin(r) -> np.ndarray:
    """Solve the Yule-Walker system for ``r`` by the Levinson-Durbin recursion."""
    r = np.asarray(r, dtype=float)
    if r.ndim != 1 or r.size == 0:
        raise ValueError("r must be a non-empty vector")
    n = r.size
    y = np.empty(n)
    y[0] = -r[0]
    beta = 1.0
    alpha = -r[0]
    for k in range(1, n):
        beta = (1.0 - alpha * alpha) * beta
        total = np.dot(r[k - 1::-1], y[:k])
        alpha = -(r[k] + total) / beta
        y[:k] = y[:k] + alpha * y[k - 1::-1]
        y[k] = alpha
    return y


def print_durbin(y, out: TextIO) -> None:
    """Dump the Durbin solution vector."""
    write_dump(out, "y", vector_entries(y))


def run_durbin(dataset, out: Optional[TextIO]) -> float:
    """Run the Durbin benchmark, dump the result and return the kernel time in seconds."""
    n = DURBIN_SIZES[parse_dataset(dataset)]
    r = init_durbin(n)
    start = time.perf_counter()
    y = kernel_durbin(r)
    elapsed = time.perf_counter() - start
    print_durbin(y, out if out is not None else sys.stdout)
    return elapsed


def init_trisolv(n: int) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(L, b)``: lower-triangular ``L[i][j] = (i+n-j+1)*2/n`` and ``b[i] = i``."""
    i = np.arange(n)[:, None]
    j = np.arange(n)[None, :]
    L = np.tril((i + n - j + 1) * 2.0 / n)
    b = np.arange(n, dtype=float)
    return L, b


def kernel_trisolv(L, b) -> np.ndarray:
    """Solve ``L x = b`` for lower-triangular ``L`` by forward substitution."""
    L = np.asarray(L, dtype=float)
    b = np.asarray(b, dtype=float)
    if L.ndim != 2 or L.shape[0] != L.shape[1] or b.shape != (L.shape[0],):
        raise ValueError("L must be square and b must match its size")
    x = np.empty_like(b)
    for i, (row, rhs) in enumerate(zip(L, b)):
        x[i] = (rhs - np.dot(row[:i], x[:i])) / row[i]
    return x


def _trisolv_entries(x) -> Iterator[Optional[float]]:
    # Line breaks follow the element rather than precede it.
    for i, value in enumerate(np.asarray(x)):
        yield float(value)
        if i % VALUES_PER_LINE == 0:
            yield None


def print_trisolv(x, out: TextIO) -> None:
    """Dump the triangular solve result."""
    write_dump(out, "x", _trisolv_entries(x))


def run_trisolv(dataset, out: Optional[TextIO]) -> float:
    """Run the trisolv benchmark, dump the result and return the kernel time in seconds."""
    n = TRISOLV_SIZES[parse_dataset(dataset)]
    L, b = init_trisolv(n)
    start = time.perf_counter()
    x = kernel_trisolv(L, b)
    elapsed = time.perf_counter() - start
    print_trisolv(x, out if out is not None else sys.stdout)
    return elapsed