"""Window statistics kernel and parallel mapper."""

from imu_stats.stats.kernel import compute_window_metrics
from imu_stats.stats.metrics import MetricsTable, WindowMetrics
from imu_stats.stats.parallel import map_windows

__all__ = ["compute_window_metrics", "MetricsTable", "WindowMetrics", "map_windows"]
