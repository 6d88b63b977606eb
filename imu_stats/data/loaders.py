from __future__ import annotations

import logging
import os
from typing import Any, List

import numpy as np
import pandas as pd

try:  # required for parquet IO
    import pyarrow.dataset as ds
except Exception as exc:  # pragma: no cover - hard fail
    raise ImportError("pyarrow is required for dataset loading") from exc

from imu_stats.data.samples import CHANNELS, as_sample_array
from imu_stats.utils.helpers import cfg_get

logger = logging.getLogger(__name__)


def _read_csv(path: str, cols: List[str]) -> pd.DataFrame:
    df = pd.read_csv(path, skipinitialspace=True)
    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"{path}: missing columns {missing}; found {list(df.columns)}")
    return df[cols]


def _read_parquet(path: str, cols: List[str]) -> pd.DataFrame:
    dataset = ds.dataset(path, format="parquet")
    missing = [c for c in cols if c not in dataset.schema.names]
    if missing:
        raise ValueError(f"{path}: missing columns {missing}; found {dataset.schema.names}")
    return dataset.to_table(columns=cols).to_pandas()


def load_frame(path: str, cfg: Any) -> pd.DataFrame:
    """Read the sensor (and optional time) columns of a CSV or parquet recording."""

    if not os.path.exists(path):
        raise FileNotFoundError(f"No such input: {path}")

    sensor_cols = list(cfg_get(cfg, ["data", "sensor_columns"], list(CHANNELS)))
    if len(sensor_cols) != len(CHANNELS):
        raise ValueError(f"data.sensor_columns must name {len(CHANNELS)} columns, got {sensor_cols}")
    time_col = cfg_get(cfg, ["data", "time_column"], None)

    cols = list(sensor_cols)
    if time_col:
        cols.append(time_col)

    fmt = cfg_get(cfg, ["data", "format"], None)
    if fmt is None:
        fmt = "parquet" if os.path.isdir(path) or path.endswith((".parquet", ".pq")) else "csv"
    if fmt == "csv":
        df = _read_csv(path, cols)
    elif fmt == "parquet":
        df = _read_parquet(path, cols)
    else:
        raise ValueError(f"Unsupported data.format={fmt}")

    if time_col:
        df = df.sort_values(time_col, kind="stable").reset_index(drop=True)
    return df


def load_samples(path: str, cfg: Any) -> np.ndarray:
    """Load a recording into the read-only [N, 6] sample array (ax, ay, az, gx, gy, gz)."""

    df = load_frame(path, cfg)
    sensor_cols = list(cfg_get(cfg, ["data", "sensor_columns"], list(CHANNELS)))
    drop_na = bool(cfg_get(cfg, ["data", "drop_na"], False))

    n_rows = len(df)
    na_rows = df[sensor_cols].isna().any(axis=1)
    if na_rows.any():
        if not drop_na:
            raise ValueError(f"{path}: {int(na_rows.sum())} rows with missing sensor values (set data.drop_na to drop them)")
        df = df[~na_rows]

    X = df[sensor_cols].to_numpy(dtype=np.float64)
    logger.info("load_samples path=%s rows=%d dropped_na=%d", path, n_rows, n_rows - len(X))
    return as_sample_array(X)
