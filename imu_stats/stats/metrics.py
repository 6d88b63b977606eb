"""Per-window metric records and the dense, ordinal-addressed output table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional

import numpy as np
import pandas as pd

from imu_stats.data.samples import CHANNELS, NUM_CHANNELS


@dataclass(frozen=True, eq=False)
class WindowMetrics:
    mean: np.ndarray  # [6]
    rms: np.ndarray  # [6]
    stddev: np.ndarray  # [6] population (divide by N)
    accel_energy: float  # sum of |a|^2 over the window, not divided by N

    def as_dict(self) -> Dict[str, float]:
        out: Dict[str, float] = {}
        for name, values in (("mean", self.mean), ("rms", self.rms), ("stddev", self.stddev)):
            for ch, v in zip(CHANNELS, values):
                out[f"{name}_{ch}"] = float(v)
        out["accel_energy"] = float(self.accel_energy)
        return out


class MetricsTable:
    """Output collection pre-sized to the window count.

    Slot ``i`` belongs to window ordinal ``i``; writers touch only their own
    row of each backing array, so concurrent writes to distinct slots need no
    locking and never reallocate.
    """

    def __init__(self, num_windows: int, stride: Optional[int] = None):
        if num_windows < 0:
            raise ValueError(f"num_windows must be non-negative, got {num_windows}")
        self.stride = stride
        self.mean = np.zeros((num_windows, NUM_CHANNELS), dtype=np.float64)
        self.rms = np.zeros((num_windows, NUM_CHANNELS), dtype=np.float64)
        self.stddev = np.zeros((num_windows, NUM_CHANNELS), dtype=np.float64)
        self.accel_energy = np.zeros(num_windows, dtype=np.float64)

    def __len__(self) -> int:
        return len(self.accel_energy)

    def write(self, i: int, metrics: WindowMetrics) -> None:
        self.mean[i] = metrics.mean
        self.rms[i] = metrics.rms
        self.stddev[i] = metrics.stddev
        self.accel_energy[i] = metrics.accel_energy

    def __getitem__(self, i: int) -> WindowMetrics:
        if not -len(self) <= i < len(self):
            raise IndexError(f"window ordinal {i} outside [0, {len(self)})")
        return WindowMetrics(
            mean=self.mean[i].copy(),
            rms=self.rms[i].copy(),
            stddev=self.stddev[i].copy(),
            accel_energy=float(self.accel_energy[i]),
        )

    def __iter__(self) -> Iterator[WindowMetrics]:
        for i in range(len(self)):
            yield self[i]

    def to_frame(self) -> pd.DataFrame:
        """One row per window; columns window, start (when stride is known), then metrics."""

        cols: Dict[str, np.ndarray] = {"window": np.arange(len(self))}
        if self.stride is not None:
            cols["start"] = np.arange(len(self)) * self.stride
        for name, arr in (("mean", self.mean), ("rms", self.rms), ("stddev", self.stddev)):
            for j, ch in enumerate(CHANNELS):
                cols[f"{name}_{ch}"] = arr[:, j]
        cols["accel_energy"] = self.accel_energy
        return pd.DataFrame(cols)
