"""Sample model and the contiguous sample store shared by all windows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

import numpy as np

CHANNELS: Tuple[str, ...] = ("ax", "ay", "az", "gx", "gy", "gz")
ACCEL_CHANNELS: Tuple[str, ...] = CHANNELS[:3]
NUM_CHANNELS = len(CHANNELS)


@dataclass(frozen=True)
class Sample:
    ax: float  # linear acceleration x
    ay: float
    az: float
    gx: float  # angular velocity x
    gy: float
    gz: float

    def as_tuple(self) -> Tuple[float, float, float, float, float, float]:
        return (self.ax, self.ay, self.az, self.gx, self.gy, self.gz)


SampleInput = Union[np.ndarray, Sequence[Sample], Iterable[Sequence[float]]]


def as_sample_array(samples: SampleInput) -> np.ndarray:
    """Materialize samples as a read-only C-contiguous float64 array [N, 6].

    Accepts a sequence of ``Sample`` or any array-like of rows. An existing
    float64 C-contiguous array is not copied: the result is a frozen view and
    the caller's handle stays writable.
    """

    if isinstance(samples, np.ndarray):
        arr = np.ascontiguousarray(samples, dtype=np.float64).view()
    else:
        rows = [s.as_tuple() if isinstance(s, Sample) else tuple(s) for s in samples]
        arr = np.array(rows, dtype=np.float64).reshape(len(rows), -1) if rows else np.empty((0, NUM_CHANNELS))

    if arr.ndim != 2 or arr.shape[1] != NUM_CHANNELS:
        raise ValueError(f"Expected samples with shape [N, {NUM_CHANNELS}], got {arr.shape}")

    arr.flags.writeable = False
    return arr


@dataclass(frozen=True)
class WindowView:
    """Non-owning reference to ``length`` consecutive rows of a sample array."""

    samples: np.ndarray
    start: int
    length: int

    def __post_init__(self):
        if self.start < 0 or self.length <= 0 or self.start + self.length > len(self.samples):
            raise IndexError(
                f"window [{self.start}, {self.start + self.length}) outside samples of length {len(self.samples)}"
            )

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def data(self) -> np.ndarray:
        # basic slicing: a view on the backing array, never a copy
        return self.samples[self.start : self.end]

    def __len__(self) -> int:
        return self.length
