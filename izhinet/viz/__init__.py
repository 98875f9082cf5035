"""Visualization: matplotlib rasters of simulated spike logs."""

from izhinet.viz.raster import (
    plot_raster,
    save_raster,
    POLARITY_COLORS,
)
