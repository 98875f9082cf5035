"""Spike raster rendering.

Every function *returns* the figure handle or the written path. Nothing is
displayed implicitly; the caller decides when and how to show.
"""

from pathlib import Path

import numpy as np
from matplotlib import pyplot as plt

from izhinet.simulation.analysis import population_rate
from izhinet.utils import get_logger

LOG = get_logger("viz.raster")


POLARITY_COLORS = {
    "excitatory": "#2196F3",   # blue
    "inhibitory": "#F44336",   # red
}
"""Marker colors per source polarity."""


def plot_raster(result, ax=None, show_rate=False, bin_ms=5.0,
                marker_size=1.0, alpha=0.3, figsize=(8, 12)):
    """Draw time against neuron index for every logged spike.

    Parameters
    ----------
    result : SimulationResult
        Simulation output.
    ax : matplotlib.axes.Axes, optional
        Axes to draw into. A new figure is created if None.
    show_rate : bool
        Add a population-rate panel underneath (ignored when `ax` is given).
    bin_ms : float
        Bin width for the population rate (ms).
    marker_size, alpha : float
        Scatter marker size and transparency.
    figsize : tuple
        Figure size for a new figure (inches).

    Returns
    -------
    matplotlib.figure.Figure
    """
    rate_ax = None
    if ax is None:
        if show_rate:
            fig, (ax, rate_ax) = plt.subplots(
                2, 1, figsize=figsize, sharex=True,
                gridspec_kw={"height_ratios": [4, 1]})
        else:
            fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    log = result.spike_log
    exc = log.is_excitatory()
    for label, mask in (("excitatory", exc), ("inhibitory", ~exc)):
        if not np.any(mask):
            continue
        ax.scatter(log.times[mask], log.neurons[mask], s=marker_size,
                   c=POLARITY_COLORS[label], alpha=alpha, linewidths=0,
                   label=label)

    ax.set_xlim(0, max(result.duration, 1))
    ax.set_ylim(0, result.n_neurons)
    ax.set_ylabel("Neuron index")
    if 0 < result.n_excitatory < result.n_neurons:
        ax.axhline(result.n_excitatory, color="0.5", lw=0.5, ls="--")
    ax.set_title(f"{result.n_spikes:,} spikes, {result.n_neurons:,} neurons, "
                 f"{result.mean_rate():.1f} Hz")

    if rate_ax is not None:
        centers, rates = population_rate(result, bin_ms=bin_ms)
        rate_ax.plot(centers, rates, color="k", lw=0.8)
        rate_ax.set_ylabel("Rate (Hz)")
        rate_ax.set_xlabel("Time (ms)")
    else:
        ax.set_xlabel("Time (ms)")

    return fig


def save_raster(result, path, dpi=150, **kwargs):
    """Render the raster to an image file and close the figure.

    Parameters
    ----------
    result : SimulationResult
    path : str or Path
        Output file; the format follows the suffix (png, pdf, svg, ...).
    dpi : int
    **kwargs
        Passed to plot_raster().

    Returns
    -------
    Path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig = plot_raster(result, **kwargs)
    try:
        fig.savefig(path, dpi=dpi)
    finally:
        plt.close(fig)
    LOG.info("Wrote raster to %s", path)
    return path
