"""Numerical benchmark kernels with deterministic inputs and reproducible array dumps."""

__version__ = "0.1.0"