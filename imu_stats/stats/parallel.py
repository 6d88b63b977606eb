"""Parallel mapper: apply the window kernel to every window into a pre-sized table.

Work units are independent: each reads its own slice of the shared, read-only
sample array and owns exactly one output slot. Any backend therefore yields
bit-identical tables.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional, Sequence

import numpy as np
from joblib import Parallel, delayed

from imu_stats.data.samples import SampleInput, WindowView, as_sample_array
from imu_stats.data.windowing import WindowSpec, num_windows, window_start
from imu_stats.stats.kernel import compute_window_metrics
from imu_stats.stats.metrics import MetricsTable
from imu_stats.utils.helpers import cfg_get

logger = logging.getLogger(__name__)

BACKENDS = ("sequential", "threads", "processes")


def _fill_slot(table: MetricsTable, samples: np.ndarray, i: int, spec: WindowSpec, clamp_variance: bool) -> None:
    view = WindowView(samples, window_start(i, spec), spec.window_length)
    table.write(i, compute_window_metrics(view, spec.window_length, clamp_variance))


def _resolve_order(order: Optional[Sequence[int]], count: int) -> Sequence[int]:
    if order is None:
        return range(count)
    order = [int(i) for i in order]
    if sorted(order) != list(range(count)):
        raise ValueError(f"order must be a permutation of range({count})")
    return order


def map_windows(
    samples: SampleInput,
    spec: WindowSpec,
    backend: str = "threads",
    n_jobs: int = -1,
    clamp_variance: bool = True,
    order: Optional[Sequence[int]] = None,
) -> MetricsTable:
    """Compute WindowMetrics for every window of ``samples``.

    Args:
        samples: [N, 6] array-like or sequence of Sample
        spec: window length and stride
        backend: "sequential", "threads" (units write their slot in place) or
            "processes" (per-unit results gathered by ordinal after the join)
        n_jobs: joblib worker count, -1 for all cores
        clamp_variance: forwarded to the kernel
        order: optional permutation of window ordinals controlling dispatch
            order only; slot i always holds window i

    Returns:
        MetricsTable with one slot per window
    """

    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend={backend}; expected one of {BACKENDS}")

    X = as_sample_array(samples)
    count = num_windows(len(X), spec)
    dispatch = _resolve_order(order, count)
    table = MetricsTable(count, stride=spec.stride)

    logger.info("map_windows backend=%s n_jobs=%d windows=%d T=%d stride=%d", backend, n_jobs, count, spec.window_length, spec.stride)
    t0 = time.perf_counter()

    if backend == "sequential":
        for i in dispatch:
            _fill_slot(table, X, i, spec, clamp_variance)
    elif backend == "threads":
        Parallel(n_jobs=n_jobs, backend="threading")(
            delayed(_fill_slot)(table, X, i, spec, clamp_variance) for i in dispatch
        )
    else:
        T = spec.window_length
        results = Parallel(n_jobs=n_jobs, backend="loky")(
            delayed(compute_window_metrics)(WindowView(X, window_start(i, spec), T).data, T, clamp_variance)
            for i in dispatch
        )
        for i, metrics in zip(dispatch, results):
            table.write(i, metrics)

    logger.debug("map_windows done windows=%d elapsed=%.6fs", count, time.perf_counter() - t0)
    return table


def map_windows_from_cfg(samples: SampleInput, spec: WindowSpec, cfg: Any) -> MetricsTable:
    return map_windows(
        samples,
        spec,
        backend=cfg_get(cfg, ["parallel", "backend"], "threads"),
        n_jobs=int(cfg_get(cfg, ["parallel", "n_jobs"], -1)),
        clamp_variance=bool(cfg_get(cfg, ["stats", "clamp_variance"], True)),
    )
