"""Smoke tests for izhinet.viz.

These tests verify that rendering runs without error and returns the
expected types. They do NOT verify visual correctness.
"""

import matplotlib
matplotlib.use("Agg")

import pytest
from matplotlib.figure import Figure
from matplotlib import pyplot as plt

from izhinet.simulation.engine import run_simulation
from izhinet.viz import POLARITY_COLORS, plot_raster, save_raster


@pytest.fixture(scope="module")
def small_result():
    return run_simulation(40, 10, 200, rng_seed=1)


class TestPlotRaster:
    def test_returns_figure(self, small_result):
        fig = plot_raster(small_result)
        assert isinstance(fig, Figure)
        ax = fig.axes[0]
        assert ax.get_ylim() == (0, 50)
        assert ax.get_xlabel() == "Time (ms)"
        plt.close(fig)

    def test_rate_panel(self, small_result):
        fig = plot_raster(small_result, show_rate=True)
        assert len(fig.axes) == 2
        assert fig.axes[1].get_ylabel() == "Rate (Hz)"
        plt.close(fig)

    def test_existing_axes(self, small_result):
        fig, ax = plt.subplots()
        assert plot_raster(small_result, ax=ax) is fig
        plt.close(fig)

    def test_colors(self):
        assert set(POLARITY_COLORS) == {"excitatory", "inhibitory"}


class TestSaveRaster:
    def test_writes_png(self, small_result, tmp_path):
        path = save_raster(small_result, tmp_path / "out" / "spikes.png")
        assert path.exists()
        assert path.stat().st_size > 0
