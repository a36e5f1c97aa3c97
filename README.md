# stkdv

Spatio-temporal kernel density estimation (STKDV) for point data with
coordinates `x`, `y` and a timestamp `t`. The package evaluates a
space-time kernel density over a regular `n_x × n_y × n_t` grid and can
write the resulting tensor to a plain text file.

Several algorithms produce the same density tensor at different speeds:

- **SCAN**: direct summation over every point for every grid cell
  (`stkdv.prefix.scan_tensor`), or over the points inside each query's
  time window only (`stkdv.prefix.windowed_scan_tensor`).
- **Range queries**: a kd-tree (`stkdv.kdtree.KDTree`, with
  `stkdv.kdtree.query_box`) or a ball tree (`stkdv.balltree.BallTree`)
  collects the ids of the points within the bandwidths of a query point.
- **SWS**: sliding-window sums along the time axis of each pixel
  (`stkdv.window.SlidingWindow` for Epanechnikov and quartic temporal
  kernels, `stkdv.sws.TriangularWindow` for the triangular one, and
  `stkdv.sws.pixel_series` / `stkdv.sws.sws_tensor` on top of them).
- **PREFIX**: a bucket sweep building statistical planes for a time window
  (`stkdv.bucket.bucket_planes`), from which the Epanechnikov density is
  evaluated for arbitrary query times (`stkdv.prefix.prefix_single`) or for
  the grid's own increasing times with incremental updates
  (`stkdv.prefix.prefix_multiple`).

Kernels are chosen with `stkdv.kernels.KernelType` (`TRIANGULAR`,
`EPANECHNIKOV`, `QUARTIC`, `UNIFORM`) and combined into a product kernel by
`stkdv.kernels.SpaceTimeKernel(s_bandwidth, t_bandwidth, spatial_type,
temporal_type)`.

## Installation

```
pip install .
```

numpy is the only runtime dependency. To run the tests:

```
pip install ".[test]"
pytest
```

## Input format

A dataset file starts with the number of points and reference spatial and
temporal bandwidths, followed by one point per line:

```
<n> <spatial bandwidth> <temporal bandwidth>
<x> <y> <t>
<x> <y> <t>
...
```

`stkdv.dataset.read_dataset` reads such a file into a `Dataset` with
`points`, `s_bandwidth` and `t_bandwidth`.

## Output format

`stkdv.dataset.write_tensor` writes the region and grid size as
`name value` lines (`x_L`, `x_U`, `y_L`, `y_U`, `t_L`, `t_U`, `n_x`, `n_y`,
`n_t`), then one density value per line, either with t fastest or, with
`time_major=True`, with x fastest. `write_tensor_stack` writes a
five-dimensional stack of tensors with `M` and `N` added to the header,
`write_kdv_map` writes only the first time slice, and `read_tensor` reads a
tensor written in x, y, t order back into a numpy array.

## Example

```python
from stkdv.dataset import Grid, bounding_region, read_dataset, write_tensor
from stkdv.kernels import KernelType, SpaceTimeKernel
from stkdv.sws import sws_tensor

data = read_dataset("points.txt")
grid = Grid(bounding_region(data.points), n_x=64, n_y=64, n_t=16)
kernel = SpaceTimeKernel(
    data.s_bandwidth, data.t_bandwidth, KernelType.EPANECHNIKOV, KernelType.EPANECHNIKOV
)
tensor = sws_tensor(data.points, kernel, grid)
write_tensor("density.txt", grid, tensor, time_major=False)
```

Other helpers: `stkdv.dataset.sort_by_time` orders points by timestamp,
`stkdv.dataset.scott_bandwidths` estimates bandwidths with Scott's rule,
`stkdv.prefix.random_timestamps` draws query times from the grid's time
range, and `stkdv.geometry` holds the distance functions for points, boxes
and balls.

## Command line

```
stkdv-compress <data_file> <output_file> <s_ratio> <t_ratio> <kernel> <epsilon>
```

reduces a dataset: the spatial and temporal bandwidths are estimated from
the points (x and y pooled into one spatial sample) and scaled by the two
ratios, the points are grouped into space-time cells sized from the kernel
(0 triangular, 1 Epanechnikov, 2 quartic), the bandwidths and `epsilon`,
and each non-empty cell is written as its centre and the number of points
it holds. The first output line holds the number of cells and the two
bandwidths. The same is available as `stkdv.compress.compress_points` and
`stkdv.compress.write_compressed`.

## What this package does not do

There is no command that runs a full density computation from a dataset
file; use the library functions above and `write_tensor`. There are no
functions for computing tensors over a whole grid of bandwidth pairs at
once, and no multi-threaded evaluation.