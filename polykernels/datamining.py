"""Correlation and covariance matrices of a data set."""

from __future__ import annotations

import sys
import time
from typing import Optional, TextIO, Tuple

import numpy as np

from polykernels.common import Dataset, grid_entries, parse_dataset, write_dump

# (m, n): m columns (variables), n rows (observations)
CORRELATION_SIZES = {
    Dataset.MINI: (28, 32),
    Dataset.SMALL: (80, 100),
    Dataset.MEDIUM: (240, 260),
    Dataset.LARGE: (1200, 1400),
    Dataset.EXTRALARGE: (2600, 3000),
}
COVARIANCE_SIZES = dict(CORRELATION_SIZES)

EPS = 0.1


def _as_data(data) -> np.ndarray:
    array = np.array(data, dtype=float)
    if array.ndim != 2 or array.shape[1] == 0:
        raise ValueError("data must be a 2-D array with at least one column")
    return array


def _mirror_upper(matrix: np.ndarray) -> np.ndarray:
    upper = np.triu(matrix)
    return upper + np.triu(upper, 1).T


def init_correlation(m: int, n: int) -> Tuple[float, np.ndarray]:
    """Return ``(float_n, data)`` with ``data[i][j] = i*j/m + i`` of shape (n, m)."""
    i = np.arange(n, dtype=float)[:, None]
    j = np.arange(m, dtype=float)[None, :]
    return float(n), i * j / m + i


def kernel_correlation(float_n: float, data) -> np.ndarray:
    """Return the m x m correlation matrix of the columns of ``data``.

    Columns whose standard deviation is at most 0.1 are treated as having
    a standard deviation of one.
    """
    data = _as_data(data)
    mean = data.sum(axis=0) / float_n
    stddev = np.sqrt(((data - mean) ** 2).sum(axis=0) / float_n)
    stddev = np.where(stddev <= EPS, 1.0, stddev)
    reduced = (data - mean) / (np.sqrt(float_n) * stddev)
    corr = _mirror_upper(reduced.T @ reduced)
    np.fill_diagonal(corr, 1.0)
    return corr


def print_correlation(corr, out: TextIO) -> None:
    """Dump the correlation matrix."""
    corr = np.asarray(corr)
    write_dump(out, "corr", grid_entries(corr, corr.shape[0]))


def run_correlation(dataset, out: Optional[TextIO]) -> float:
    """Run the correlation benchmark, dump the result and return the kernel time in seconds."""
    m, n = CORRELATION_SIZES[parse_dataset(dataset)]
    float_n, data = init_correlation(m, n)
    start = time.perf_counter()
    corr = kernel_correlation(float_n, data)
    elapsed = time.perf_counter() - start
    print_correlation(corr, out if out is not None else sys.stdout)
    return elapsed


def init_covariance(m: int, n: int) -> Tuple[float, np.ndarray]:
    """Return ``(float_n, data)`` with ``data[i][j] = i*j/m`` of shape (n, m)."""
    i = np.arange(n, dtype=float)[:, None]
    j = np.arange(m, dtype=float)[None, :]
    return float(n), i * j / m


def kernel_covariance(float_n: float, data) -> np.ndarray:
    """Return the m x m sample covariance matrix of the columns of ``data``."""
    data = _as_data(data)
    mean = data.sum(axis=0) / float_n
    centred = data - mean
    return _mirror_upper(centred.T @ centred / (float_n - 1.0))


def print_covariance(cov, out: TextIO) -> None:
    """Dump the covariance matrix."""
    cov = np.asarray(cov)
    write_dump(out, "cov", grid_entries(cov, cov.shape[0]))


def run_covariance(dataset, out: Optional[TextIO]) -> float:
    """Run the covariance benchmark, dump the result and return the kernel time in seconds."""
    m, n = COVARIANCE_SIZES[parse_dataset(dataset)]
    float_n, data = init_covariance(m, n)
    start = time.perf_counter()
    cov = kernel_covariance(float_n, data)
    elapsed = time.perf_counter() - start
    print_covariance(cov, out if out is not None else sys.stdout)
    return elapsed