"""
Tests for the parallel mapper: slot ownership, backend equivalence, dispatch order.
"""

import numpy as np
import pytest

from imu_stats.data.samples import Sample, as_sample_array
from imu_stats.data.windowing import WindowSpec
from imu_stats.errors import PreconditionError
from imu_stats.stats.kernel import compute_window_metrics
from imu_stats.stats.parallel import map_windows, map_windows_from_cfg


@pytest.fixture(scope="module")
def stream():
    rng = np.random.default_rng(7)
    t = np.arange(1234) / 100.0
    X = rng.normal(scale=0.2, size=(1234, 6))
    X[:, 2] += 1.0
    X[:, 4] += 30.0 * np.sin(2 * np.pi * 0.8 * t)
    return as_sample_array(X)


def _assert_tables_identical(a, b):
    assert len(a) == len(b)
    np.testing.assert_array_equal(a.mean, b.mean)
    np.testing.assert_array_equal(a.rms, b.rms)
    np.testing.assert_array_equal(a.stddev, b.stddev)
    np.testing.assert_array_equal(a.accel_energy, b.accel_energy)


class TestEndToEnd:

    def test_unit_accel_scenario(self):
        samples = [Sample(1.0, 0.0, 0.0, 0.0, 0.0, 0.0)] * 1000
        table = map_windows(samples, WindowSpec(200, 100), backend="sequential")
        assert len(table) == 9
        for m in table:
            np.testing.assert_array_equal(m.mean, [1, 0, 0, 0, 0, 0])
            np.testing.assert_array_equal(m.rms, [1, 0, 0, 0, 0, 0])
            np.testing.assert_array_equal(m.stddev, [0, 0, 0, 0, 0, 0])
            assert m.accel_energy == 200.0

    def test_slot_i_holds_window_i(self, stream):
        spec = WindowSpec(200, 100)
        table = map_windows(stream, spec, backend="threads", n_jobs=2)
        X = np.asarray(stream)
        for i in (0, 4, len(table) - 1):
            m = compute_window_metrics(X[i * 100 : i * 100 + 200], 200)
            np.testing.assert_array_equal(table.mean[i], m.mean)
            assert table.accel_energy[i] == m.accel_energy

    def test_tail_is_dropped(self, stream):
        table = map_windows(stream, WindowSpec(200, 100), backend="sequential")
        # 1234 samples -> starts 0..1000, last window ends at 1200
        assert len(table) == 11
        frame = table.to_frame()
        assert frame["start"].iloc[-1] == 1000

    def test_precondition_before_any_work(self):
        with pytest.raises(PreconditionError):
            map_windows(np.zeros((199, 6)), WindowSpec(200, 100), backend="threads")


class TestBackendEquivalence:

    @pytest.mark.parametrize("backend", ["threads", "processes"])
    def test_bit_identical_to_sequential(self, stream, backend):
        spec = WindowSpec(128, 32)
        reference = map_windows(stream, spec, backend="sequential")
        table = map_windows(stream, spec, backend=backend, n_jobs=2)
        _assert_tables_identical(reference, table)

    def test_permuted_dispatch_order(self, stream):
        spec = WindowSpec(200, 50)
        reference = map_windows(stream, spec, backend="sequential")
        count = len(reference)
        order = np.random.default_rng(3).permutation(count).tolist()
        _assert_tables_identical(reference, map_windows(stream, spec, backend="sequential", order=order))
        _assert_tables_identical(reference, map_windows(stream, spec, backend="threads", n_jobs=4, order=order))
        _assert_tables_identical(reference, map_windows(stream, spec, backend="threads", order=order[::-1]))

    def test_order_must_be_permutation(self, stream):
        with pytest.raises(ValueError, match="permutation"):
            map_windows(stream, WindowSpec(200, 100), backend="sequential", order=[0, 0, 1])

    def test_unknown_backend(self, stream):
        with pytest.raises(ValueError, match="backend"):
            map_windows(stream, WindowSpec(200, 100), backend="gpu")


class TestInputs:

    def test_sample_array_is_read_only_view(self):
        X = np.ones((300, 6))
        frozen = as_sample_array(X)
        assert np.shares_memory(frozen, X)
        assert not frozen.flags.writeable
        assert X.flags.writeable

    def test_wrong_channel_count_rejected(self):
        with pytest.raises(ValueError):
            map_windows(np.zeros((300, 5)), WindowSpec(100, 100))

    def test_from_cfg(self, stream):
        cfg = {"parallel": {"backend": "sequential"}, "stats": {"clamp_variance": False}}
        spec = WindowSpec(200, 100)
        _assert_tables_identical(
            map_windows(stream, spec, backend="sequential", clamp_variance=False),
            map_windows_from_cfg(stream, spec, cfg),
        )
