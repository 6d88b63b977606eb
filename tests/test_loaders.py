"""
Tests for sample loading from CSV and parquet recordings.
"""

import numpy as np
import pandas as pd
import pytest

from imu_stats.data.loaders import load_frame, load_samples

HEADER = "t_ms,clip_id,ax,ay,az,gx,gy,gz,label\n"


def _write_csv(path, rows):
    with open(path, "w") as f:
        f.write(HEADER)
        for r in rows:
            f.write(",".join(str(v) for v in r) + "\n")
    return str(path)


@pytest.fixture
def recording(tmp_path):
    rows = [(10 * i, 7, 0.1 * i, 0.0, 1.0, i, -i, 0.5, "walk") for i in range(25)]
    return _write_csv(tmp_path / "rec.csv", rows)


class TestCsv:

    def test_selects_six_channels_in_order(self, recording):
        X = load_samples(recording, {})
        assert X.shape == (25, 6)
        assert X.dtype == np.float64
        np.testing.assert_allclose(X[3], [0.3, 0.0, 1.0, 3.0, -3.0, 0.5])
        assert not X.flags.writeable

    def test_sorts_by_time_column(self, tmp_path):
        rows = [(30, 1, 3, 0, 0, 0, 0, 0, "x"), (10, 1, 1, 0, 0, 0, 0, 0, "x"), (20, 1, 2, 0, 0, 0, 0, 0, "x")]
        path = _write_csv(tmp_path / "shuffled.csv", rows)
        X = load_samples(path, {"data": {"time_column": "t_ms"}})
        np.testing.assert_array_equal(X[:, 0], [1, 2, 3])

    def test_keeps_file_order_without_time_column(self, tmp_path):
        rows = [(30, 1, 3, 0, 0, 0, 0, 0, "x"), (10, 1, 1, 0, 0, 0, 0, 0, "x")]
        path = _write_csv(tmp_path / "raw.csv", rows)
        np.testing.assert_array_equal(load_samples(path, {})[:, 0], [3, 1])

    def test_custom_sensor_columns(self, tmp_path):
        path = tmp_path / "renamed.csv"
        pd.DataFrame({
            "acc_x": [1.0], "acc_y": [2.0], "acc_z": [3.0],
            "gyr_x": [4.0], "gyr_y": [5.0], "gyr_z": [6.0],
        }).to_csv(path, index=False)
        cfg = {"data": {"sensor_columns": ["acc_x", "acc_y", "acc_z", "gyr_x", "gyr_y", "gyr_z"]}}
        np.testing.assert_array_equal(load_samples(str(path), cfg)[0], [1, 2, 3, 4, 5, 6])

    def test_missing_column(self, tmp_path):
        path = tmp_path / "short.csv"
        pd.DataFrame({"ax": [1.0], "ay": [2.0]}).to_csv(path, index=False)
        with pytest.raises(ValueError, match="missing columns"):
            load_samples(str(path), {})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_samples(str(tmp_path / "nope.csv"), {})


class TestMissingValues:

    @pytest.fixture
    def gappy(self, tmp_path):
        rows = [(0, 1, 1, 0, 0, 0, 0, 0, "x"), (10, 1, "", 0, 0, 0, 0, 0, "x"), (20, 1, 3, 0, 0, 0, 0, 0, "x")]
        return _write_csv(tmp_path / "gappy.csv", rows)

    def test_rejects_nan_by_default(self, gappy):
        with pytest.raises(ValueError, match="drop_na"):
            load_samples(gappy, {})

    def test_drop_na(self, gappy):
        X = load_samples(gappy, {"data": {"drop_na": True}})
        np.testing.assert_array_equal(X[:, 0], [1, 3])


class TestParquet:

    def test_round_trip_frame(self, tmp_path):
        df = pd.DataFrame({
            "t_ms": [20, 0, 10],
            "ax": [3.0, 1.0, 2.0], "ay": [0.0] * 3, "az": [0.0] * 3,
            "gx": [0.0] * 3, "gy": [0.0] * 3, "gz": [9.0] * 3,
        })
        path = tmp_path / "rec.parquet"
        df.to_parquet(path, index=False)
        X = load_samples(str(path), {"data": {"time_column": "t_ms"}})
        np.testing.assert_array_equal(X[:, 0], [1, 2, 3])
        np.testing.assert_array_equal(X[:, 5], [9, 9, 9])

    def test_frame_includes_time_column(self, tmp_path):
        df = pd.DataFrame({c: [0.0] for c in ["ax", "ay", "az", "gx", "gy", "gz"]})
        df["t_ms"] = [5]
        path = tmp_path / "one.parquet"
        df.to_parquet(path, index=False)
        frame = load_frame(str(path), {"data": {"time_column": "t_ms"}})
        assert list(frame.columns) == ["ax", "ay", "az", "gx", "gy", "gz", "t_ms"]

    def test_unsupported_format(self, recording):
        with pytest.raises(ValueError, match="format"):
            load_samples(recording, {"data": {"format": "hdf5"}})
