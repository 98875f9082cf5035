"""Append-only record of network spikes.

A SpikeLog is the only artifact that leaves the engine: an ordered sequence
of (time_ms, neuron_index) pairs, non-decreasing in time.
"""

import numpy as np
import pandas as pd


class SpikeLog:
    """Time-ordered (time_ms, neuron) pairs.

    Spikes are appended one millisecond at a time. Appending a timestamp
    earlier than the last one raises ValueError.

    Parameters
    ----------
    n_neurons : int
        Size of the network; neuron indices must lie in [0, n_neurons).
    n_excitatory : int, optional
        Indices below this are excitatory. Defaults to n_neurons.
    """

    def __init__(self, n_neurons, n_excitatory=None):
        self.n_neurons = int(n_neurons)
        self.n_excitatory = self.n_neurons if n_excitatory is None else int(n_excitatory)
        self._times = []
        self._neurons = []
        self._last_time = -1
        self._cache = None

    def append(self, time_ms, neurons):
        """Record that `neurons` fired at `time_ms`.

        Parameters
        ----------
        time_ms : int
            Timestamp (ms), >= 0 and >= every earlier timestamp.
        neurons : array-like of int
            Indices of the neurons that fired.
        """
        time_ms = int(time_ms)
        if time_ms < 0:
            raise ValueError(f"spike time must be >= 0, got {time_ms}")
        if time_ms < self._last_time:
            raise ValueError(
                f"spike at t={time_ms} ms precedes last logged time {self._last_time} ms")
        neurons = np.asarray(neurons, dtype=np.int64).ravel()
        if neurons.size == 0:
            return
        if neurons.min() < 0 or neurons.max() >= self.n_neurons:
            raise ValueError(f"neuron index out of range [0, {self.n_neurons})")
        self._times.append(np.full(neurons.size, time_ms, dtype=np.int64))
        self._neurons.append(neurons.copy())
        self._last_time = time_ms
        self._cache = None

    def _arrays(self):
        if self._cache is None:
            if self._times:
                self._cache = (np.concatenate(self._times), np.concatenate(self._neurons))
            else:
                self._cache = (np.array([], dtype=np.int64), np.array([], dtype=np.int64))
            for arr in self._cache:
                arr.setflags(write=False)
        return self._cache

    @property
    def times(self):
        """Spike times (ms), read-only."""
        return self._arrays()[0]

    @property
    def neurons(self):
        """Neuron index of each spike, read-only."""
        return self._arrays()[1]

    @property
    def n_spikes(self):
        return sum(len(t) for t in self._times)

    def __len__(self):
        return self.n_spikes

    def __iter__(self):
        times, neurons = self._arrays()
        return zip(times.tolist(), neurons.tolist())

    def __eq__(self, other):
        if not isinstance(other, SpikeLog):
            return NotImplemented
        return (self.n_neurons == other.n_neurons
                and np.array_equal(self.times, other.times)
                and np.array_equal(self.neurons, other.neurons))

    def __repr__(self):
        return f"SpikeLog({self.n_spikes} spikes, {self.n_neurons} neurons)"

    def spike_counts(self):
        """Number of spikes per neuron."""
        return np.bincount(self.neurons, minlength=self.n_neurons)

    def spike_trains(self):
        """Per-neuron spike time arrays: trains[i] holds neuron i's times."""
        times, neurons = self._arrays()
        order = np.argsort(neurons, kind="stable")
        bounds = np.searchsorted(neurons[order], np.arange(self.n_neurons + 1))
        sorted_times = times[order]
        return [sorted_times[bounds[i]:bounds[i + 1]] for i in range(self.n_neurons)]

    def is_excitatory(self):
        """Boolean mask over spikes, True where the source is excitatory."""
        return self.neurons < self.n_excitatory

    def to_frame(self):
        """Spikes as a DataFrame with columns time_ms, neuron, polarity."""
        return pd.DataFrame({
            "time_ms": self.times,
            "neuron": self.neurons,
            "polarity": np.where(self.is_excitatory(), "excitatory", "inhibitory"),
        })
