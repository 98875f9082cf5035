"""Post-simulation analysis tools.

Functions for firing rates, raster arrays, population activity and its
spectrum, computed from SimulationResult objects. The spectral helpers
quantify the alpha (8-12 Hz) and gamma (30-80 Hz) rhythms the random
network is known for.
"""

import numpy as np
import pandas as pd
from scipy.integrate import trapezoid
from scipy.signal import welch


BANDS = {
    "delta": (1.0, 4.0),
    "theta": (4.0, 8.0),
    "alpha": (8.0, 12.0),
    "beta": (12.0, 30.0),
    "gamma": (30.0, 80.0),
}


def firing_rates(result, time_window=None):
    """Compute per-neuron firing rates.

    Parameters
    ----------
    result : SimulationResult
        Simulation output.
    time_window : tuple of float, optional
        (start_ms, end_ms) to restrict rate computation.

    Returns
    -------
    np.ndarray
        Firing rate per neuron (Hz).
    """
    log = result.spike_log
    if time_window is None:
        t0, t1 = 0.0, float(result.duration)
        mask = slice(None)
    else:
        t0, t1 = time_window
        mask = (log.times >= t0) & (log.times < t1)
    duration_s = (t1 - t0) / 1000.0
    if duration_s <= 0:
        return np.zeros(result.n_neurons)
    counts = np.bincount(log.neurons[mask], minlength=result.n_neurons)
    return counts / duration_s


def rates_by_polarity(result):
    """Mean firing rate (Hz) of the excitatory and inhibitory populations.

    Returns
    -------
    pd.Series
        Indexed by "excitatory" and "inhibitory"; NaN for an empty population.
    """
    rates = firing_rates(result)
    n_exc = result.n_excitatory
    exc, inh = rates[:n_exc], rates[n_exc:]
    return pd.Series({
        "excitatory": exc.mean() if len(exc) else np.nan,
        "inhibitory": inh.mean() if len(inh) else np.nan,
    })


def spike_raster(result, neuron_indices=None, time_window=None):
    """Extract spike raster data for plotting.

    Parameters
    ----------
    result : SimulationResult
        Simulation output.
    neuron_indices : array-like, optional
        Subset of neurons. If None, all neurons.
    time_window : tuple of float, optional
        (start_ms, end_ms) to restrict.

    Returns
    -------
    times : np.ndarray
        Spike times (ms).
    neurons : np.ndarray
        Neuron indices for each spike.
    """
    times = result.spike_log.times
    neurons = result.spike_log.neurons
    keep = np.ones(len(times), dtype=bool)
    if neuron_indices is not None:
        keep &= np.isin(neurons, np.asarray(neuron_indices))
    if time_window is not None:
        t0, t1 = time_window
        keep &= (times >= t0) & (times < t1)
    return times[keep], neurons[keep]


def active_fraction(result, threshold_hz=1.0, time_window=None):
    """Fraction of neurons firing above a threshold rate.

    Parameters
    ----------
    result : SimulationResult
        Simulation output.
    threshold_hz : float
        Minimum rate to count as "active".
    time_window : tuple of float, optional
        Restrict to time window.

    Returns
    -------
    float
        Fraction of neurons active.
    """
    rates = firing_rates(result, time_window=time_window)
    return float(np.mean(rates > threshold_hz))


def population_rate(result, bin_ms=1.0, neuron_indices=None):
    """Compute population-averaged firing rate over time.

    Parameters
    ----------
    result : SimulationResult
        Simulation output.
    bin_ms : float
        Time bin width (ms).
    neuron_indices : array-like, optional
        Restrict to a sub-population. If None, all neurons.

    Returns
    -------
    times : np.ndarray
        Bin centers (ms).
    rates : np.ndarray
        Population rate (Hz) per bin.
    """
    n_bins = max(1, int(result.duration / bin_ms))
    times, neurons = result.spike_log.times, result.spike_log.neurons
    n_pop = result.n_neurons
    if neuron_indices is not None:
        neuron_indices = np.asarray(neuron_indices)
        keep = np.isin(neurons, neuron_indices)
        times = times[keep]
        n_pop = len(neuron_indices)

    bins = np.clip((times / bin_ms).astype(int), 0, n_bins - 1)
    counts = np.bincount(bins, minlength=n_bins).astype(np.float64)

    bin_s = bin_ms / 1000.0
    rates = counts / (n_pop * bin_s) if n_pop > 0 else counts
    centers = np.arange(n_bins) * bin_ms + bin_ms / 2
    return centers, rates


def power_spectrum(result, bin_ms=1.0, nperseg=256):
    """Welch power spectrum of the population rate.

    Parameters
    ----------
    result : SimulationResult
        Simulation output.
    bin_ms : float
        Bin width used for the population rate (ms); sets the sampling rate.
    nperseg : int
        Welch segment length, clipped to the signal length.

    Returns
    -------
    freqs : np.ndarray
        Frequencies (Hz).
    power : np.ndarray
        Power spectral density of the mean-subtracted population rate.
    """
    _, rates = population_rate(result, bin_ms=bin_ms)
    fs = 1000.0 / bin_ms
    signal = rates - rates.mean()
    return welch(signal, fs=fs, nperseg=min(len(signal), nperseg))


def band_power(freqs, power, band):
    """Integrated power within a frequency band.

    Parameters
    ----------
    freqs, power : np.ndarray
        Output of power_spectrum().
    band : str or tuple of float
        A key of BANDS or an explicit (low_hz, high_hz).

    Returns
    -------
    float
    """
    low, high = BANDS[band] if isinstance(band, str) else band
    mask = (freqs >= low) & (freqs <= high)
    if not np.any(mask):
        return 0.0
    if mask.sum() == 1:
        return float(power[mask][0])
    return float(trapezoid(power[mask], freqs[mask]))


def band_powers(result, bin_ms=1.0, nperseg=256):
    """Power in every named band of BANDS, plus the dominant frequency.

    Returns
    -------
    pd.Series
        One entry per band name and "peak_hz".
    """
    freqs, power = power_spectrum(result, bin_ms=bin_ms, nperseg=nperseg)
    out = {name: band_power(freqs, power, name) for name in BANDS}
    out["peak_hz"] = dominant_frequency(freqs, power)
    return pd.Series(out)


def dominant_frequency(freqs, power, min_hz=1.0):
    """Frequency of the largest spectral peak above `min_hz`."""
    mask = freqs >= min_hz
    if not np.any(mask):
        return float("nan")
    return float(freqs[mask][np.argmax(power[mask])])


def ei_balance(result, connectivity):
    """Compute excitatory/inhibitory drive per neuron.

    Parameters
    ----------
    result : SimulationResult
        Simulation output.
    connectivity : ConnectivityMatrix
        The weights that were simulated.

    Returns
    -------
    pd.DataFrame
        Per-neuron: exc_input, inh_input (rate-weighted, positive),
        ei_ratio, firing_rate_hz.
    """
    rates = firing_rates(result)
    w = connectivity.weights
    weighted = w * rates[np.newaxis, :]
    exc_input = np.where(w > 0, weighted, 0.0).sum(axis=1)
    inh_input = np.abs(np.where(w < 0, weighted, 0.0).sum(axis=1))

    with np.errstate(divide="ignore", invalid="ignore"):
        ei_ratio = np.where(inh_input > 0, exc_input / inh_input, np.inf)

    return pd.DataFrame({
        "exc_input": exc_input,
        "inh_input": inh_input,
        "ei_ratio": ei_ratio,
        "firing_rate_hz": rates,
    })
