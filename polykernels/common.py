"""Shared pieces: dataset sizes, value formatting and array dumps."""

from __future__ import annotations

import enum
from typing import Iterable, Iterator, Optional, TextIO, Union

import numpy as np

VALUES_PER_LINE = 20


class Dataset(enum.Enum):
    """Named problem sizes a benchmark can be run with."""

    MINI = "mini"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRALARGE = "extralarge"


DEFAULT_DATASET = Dataset.LARGE


def parse_dataset(name: Union[str, Dataset, None]) -> Dataset:
    """Turn a dataset name such as ``"mini"`` or ``"MINI_DATASET"`` into a Dataset.

    ``None`` selects the default, LARGE.
    """
    if name is None:
        return DEFAULT_DATASET
    if isinstance(name, Dataset):
        return name
    key = str(name).strip().lower().replace("-", "").replace("_", "")
    if key.endswith("dataset"):
        key = key[: -len("dataset")]
    try:
        return Dataset(key)
    except ValueError:
        raise ValueError(f"unknown dataset: {name!r}") from None


def format_value(value: float) -> str:
    """Format one array element the way dumps show it: two decimals and a space."""
    return f"{float(value):0.2f} "


def grid_entries(matrix, stride: int) -> Iterator[Optional[float]]:
    """Yield the elements of a 2-D array row by row.

    A ``None`` line break comes before every element whose position
    ``i * stride + j`` is a multiple of twenty.
    """
    for i, row in enumerate(np.asarray(matrix)):
        for j, value in enumerate(row):
            if (i * stride + j) % VALUES_PER_LINE == 0:
                yield None
            yield float(value)


def vector_entries(vector) -> Iterator[Optional[float]]:
    """Yield the elements of a 1-D array, with a ``None`` line break before every twentieth."""
    for i, value in enumerate(np.asarray(vector)):
        if i % VALUES_PER_LINE == 0:
            yield None
        yield float(value)


def write_dump(out: TextIO, name: str, entries: Iterable[Optional[float]]) -> None:
    """Write one named array section; ``None`` entries become line breaks."""
    out.write(f"begin dump: {name}")
    for entry in entries:
        out.write("\n" if entry is None else format_value(entry))
    out.write(f"\nend dump: {name}\n")