"""Run summary and console report formatting (no computation)."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from imu_stats.data.samples import CHANNELS
from imu_stats.data.windowing import WindowSpec, dropped_tail
from imu_stats.stats.metrics import MetricsTable, WindowMetrics


@dataclass
class RunSummary:
    source: str
    total_samples: int
    num_windows: int
    window_length: int
    stride: int
    dropped_tail: int
    backend: str
    elapsed_s: float


def summarize_run(
    source: str,
    total_samples: int,
    spec: WindowSpec,
    table: MetricsTable,
    backend: str,
    elapsed_s: float,
) -> RunSummary:
    return RunSummary(
        source=source,
        total_samples=int(total_samples),
        num_windows=len(table),
        window_length=spec.window_length,
        stride=spec.stride,
        dropped_tail=dropped_tail(total_samples, spec),
        backend=backend,
        elapsed_s=float(elapsed_s),
    )


def format_summary(summary: RunSummary) -> str:
    lines = [
        "--- Summary ---",
        f"Input: {summary.source}",
        f"Total samples: {summary.total_samples}",
        f"Windows processed: {summary.num_windows}",
        f"Window length (Nw): {summary.window_length} samples",
        f"Stride: {summary.stride} samples",
        f"Tail samples dropped: {summary.dropped_tail}",
        "",
        f"--- Performance ({summary.backend}) ---",
        f"Compute wall clock: {summary.elapsed_s:.6f} s",
    ]
    return "\n".join(lines)


def _row(label: str, values) -> str:
    cells = ",".join(f"{float(v):9.5f}" for v in values)
    return f"  {label:<14}[{cells} ]"


def format_window_metrics(metrics: WindowMetrics, index: Optional[int] = None) -> str:
    """Fixed-width table of one window's metrics (5 decimals, width 9)."""

    title = "--- Window metrics ---" if index is None else f"--- Window {index} metrics ---"
    header = ",".join(f"{ch:>9}" for ch in CHANNELS)
    lines = [
        title,
        f"  {'Channels:':<14}[{header} ]",
        _row("Mean (mu):", metrics.mean),
        _row("Sigma (std):", metrics.stddev),
        _row("RMS:", metrics.rms),
        f"  Energy ||a||: {metrics.accel_energy:.5f}",
    ]
    return "\n".join(lines)


def format_metrics_txt(metrics: WindowMetrics, prefix: str = "") -> str:
    """Serialize one window's metrics to key=value tokens."""

    tokens: List[str] = []
    for k, v in metrics.as_dict().items():
        key = f"{prefix}{k}" if prefix else k
        tokens.append(f"{key}={v:.6f}")
    return " ".join(tokens)


def summary_dict(summary: RunSummary) -> Dict[str, Any]:
    return asdict(summary)
