"""Window statistics kernel: mean, RMS, population stddev and accel energy."""

from __future__ import annotations

import numpy as np

from imu_stats.data.samples import ACCEL_CHANNELS, NUM_CHANNELS, WindowView
from imu_stats.errors import InvalidWindowError
from imu_stats.stats.metrics import WindowMetrics


def compute_window_metrics(window, window_length: int, clamp_variance: bool = True) -> WindowMetrics:
    """Compute the metric set for exactly one window.

    Args:
        window: ``WindowView`` or array [window_length, 6], read only
        window_length: expected number of samples
        clamp_variance: clamp negative rounding residue of E[x^2] - E[x]^2
            to zero before the square root. With False a near-constant
            channel can yield NaN stddev.

    Returns:
        WindowMetrics for the window
    """

    Xw = window.data if isinstance(window, WindowView) else np.asarray(window, dtype=np.float64)
    if Xw.ndim != 2 or Xw.shape[1] != NUM_CHANNELS:
        raise InvalidWindowError(f"Expected window with shape [T, {NUM_CHANNELS}], got {Xw.shape}")
    if Xw.shape[0] != window_length:
        raise InvalidWindowError(f"Expected window of {window_length} samples, got {Xw.shape[0]}")

    N = float(window_length)
    # row-wise accumulation over the window keeps summation order fixed;
    # the squared temporaries are O(T) scratch
    S = Xw.sum(axis=0)
    Q = (Xw * Xw).sum(axis=0)
    # energy from the accel axes directly, not from Q
    A = Xw[:, : len(ACCEL_CHANNELS)]
    E = float((A * A).sum(axis=1).sum())

    mean = S / N
    mean_sq = Q / N
    var = mean_sq - mean * mean
    if clamp_variance:
        var = np.maximum(var, 0.0)
    with np.errstate(invalid="ignore"):
        stddev = np.sqrt(var)

    return WindowMetrics(mean=mean, rms=np.sqrt(mean_sq), stddev=stddev, accel_energy=E)
