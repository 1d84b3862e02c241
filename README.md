# polykernels

polykernels is a set of small numerical kernels for benchmarking. It covers dense matrix-vector and matrix-matrix products, triangular solvers, factorizations, a QR decomposition and two data-mining statistics. The computations are done with numpy arrays.

Each kernel has four functions:

- `init_<name>(...)` builds the input arrays for a given problem size. The inputs are always the same for the same size.
- `kernel_<name>(...)` runs the computation and returns the results as new arrays.
- `print_<name>(..., out)` writes the result arrays to a text stream in the dump format described below.
- `run_<name>(dataset, out)` does all three for one named dataset size and returns the kernel time in seconds. If `out` is `None`, the dump goes to standard output.

## Installation

```
pip install .
```

To install with the test tools as well:

```
pip install .[test]
```

## Kernel modules

| Module | Kernels |
| --- | --- |
| `polykernels.datamining` | correlation, covariance |
| `polykernels.blas` | gemm, gemver, gesummv |
| `polykernels.matvec` | atax, bicg, mvt |
| `polykernels.qr` | gramschmidt |
| `polykernels.solvers` | durbin, trisolv |
| `polykernels.factorizations` | cholesky, lu, ludcmp (and the shared input builder `make_spd_matrix`) |

`polykernels.common` holds the parts they all use: the `Dataset` enum, `parse_dataset`, `format_value`, `grid_entries`, `vector_entries` and `write_dump`.

## Datasets

The dataset sizes are `Dataset.MINI`, `SMALL`, `MEDIUM`, `LARGE` and `EXTRALARGE`. Each module gives the concrete dimensions per dataset in tables such as `GEMM_SIZES` or `CORRELATION_SIZES`.

`parse_dataset` accepts a `Dataset`, a name such as `"mini"` or `"MINI_DATASET"`, or `None`, which selects `LARGE`. Any other name raises `ValueError`.

## Usage

```python
import sys

from polykernels.common import Dataset
from polykernels.datamining import init_correlation, kernel_correlation, print_correlation
from polykernels.solvers import run_trisolv

float_n, data = init_correlation(28, 32)
corr = kernel_correlation(float_n, data)
print_correlation(corr, sys.stdout)

seconds = run_trisolv(Dataset.MINI, sys.stdout)
print(f"kernel took {seconds:.6f} s")
```

The kernels check the shapes of their inputs and raise `ValueError` when the shapes do not fit together.

## Dump format

Each `print_*` function writes one section per result array:

```
begin dump: <name>
<values>
end dump: <name>
```

Each value is written with two decimals and a trailing space. For a matrix, a line break comes before the element at row `i`, column `j` when `i * stride + j` is a multiple of 20. For a vector, a line break comes before every twentieth element. The trisolv dump puts its line break after the element, not before it. The cholesky dump lists only the lower triangle.

## What it does not do

This package has no command-line program. To run a benchmark, call its `run_<name>` function from Python. There is no single runner that takes a benchmark by name.