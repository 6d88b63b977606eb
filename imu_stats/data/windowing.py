from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from imu_stats.errors import PreconditionError
from imu_stats.utils.helpers import cfg_get

logger = logging.getLogger(__name__)


DEFAULT_SAMPLE_RATE_HZ = 100.0
DEFAULT_WINDOW_LENGTH = 200  # 2 s at 100 Hz
DEFAULT_STRIDE = DEFAULT_WINDOW_LENGTH // 2


@dataclass(frozen=True)
class WindowSpec:
    window_length: int = DEFAULT_WINDOW_LENGTH
    stride: int = DEFAULT_STRIDE

    def __post_init__(self):
        for name in ("window_length", "stride"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
            # numpy integers become plain ints
            object.__setattr__(self, name, int(value))

    @property
    def overlap(self) -> int:
        return max(0, self.window_length - self.stride)


def compute_window_spec(cfg: Any) -> WindowSpec:
    """Resolve window length and stride in samples.

    Explicit ``window_length``/``stride`` win; otherwise they are derived from
    ``window_seconds * sample_rate_hz`` and ``hop_ratio``.
    """

    window_length = cfg_get(cfg, ["data", "windowing", "window_length"], None)
    stride = cfg_get(cfg, ["data", "windowing", "stride"], None)

    if window_length is None:
        window_seconds = cfg_get(cfg, ["data", "windowing", "window_seconds"], None)
        if window_seconds is None:
            window_length = DEFAULT_WINDOW_LENGTH
        else:
            rate = float(cfg_get(cfg, ["data", "windowing", "sample_rate_hz"], DEFAULT_SAMPLE_RATE_HZ))
            window_length = int(round(float(window_seconds) * rate))
    if stride is None:
        hop_ratio = float(cfg_get(cfg, ["data", "windowing", "hop_ratio"], 0.5))
        stride = max(1, int(round(int(window_length) * hop_ratio)))

    return WindowSpec(window_length=int(window_length), stride=int(stride))


def num_windows(total_samples: int, spec: WindowSpec) -> int:
    """Count of full windows; raises PreconditionError when there is not even one.

    Samples past the end of the last window are discarded (lossy tail).
    """

    if total_samples < 0:
        raise ValueError(f"total_samples must be non-negative, got {total_samples}")
    if total_samples < spec.window_length:
        raise PreconditionError(total_samples, spec.window_length)
    count = (total_samples - spec.window_length) // spec.stride + 1
    logger.debug(
        "windowing total=%d T=%d stride=%d windows=%d dropped_tail=%d",
        total_samples,
        spec.window_length,
        spec.stride,
        count,
        total_samples - ((count - 1) * spec.stride + spec.window_length),
    )
    return count


def window_start(i: int, spec: WindowSpec, count: Optional[int] = None) -> int:
    """Start offset of window ordinal i; checked against count when given."""
    if i < 0 or (count is not None and i >= count):
        raise IndexError(f"window ordinal {i} outside [0, {count})")
    return i * spec.stride


def iter_window_starts(total_samples: int, spec: WindowSpec) -> Iterator[int]:
    count = num_windows(total_samples, spec)
    for i in range(count):
        yield window_start(i, spec)


def dropped_tail(total_samples: int, spec: WindowSpec) -> int:
    """Number of trailing samples not covered by any window."""
    count = num_windows(total_samples, spec)
    return total_samples - ((count - 1) * spec.stride + spec.window_length)
