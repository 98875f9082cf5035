"""Pure-numpy Izhikevich network engine.

Implements the Izhikevich (2003) random cortical network with fixed 1 ms
steps. Each step:

1. Background drive: Gaussian noise, sigma per polarity.
2. Synaptic input: column sum of S over neurons that fired last step.
3. Membrane update: two 0.5 ms Euler half-steps for v, one step for u.
4. Spike detection at v >= 30 mV, logging and reset (v <- c, u <- u + d).
5. The fired set becomes next step's presynaptic buffer.

Synaptic transmission therefore has a delay of exactly one step.
"""

from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from izhinet.simulation.connectivity import build_connectivity
from izhinet.simulation.errors import (
    InvalidConfigurationError,
    require_amplitude,
    require_counts,
    require_duration,
)
from izhinet.simulation.parameters import ParameterSet, build_parameter_set
from izhinet.simulation.spikes import SpikeLog
from izhinet.simulation.state import NeuronState, V_PEAK
from izhinet.utils import get_logger

LOG = get_logger("simulation.engine")


NOISE_EXCITATORY = 5.0
NOISE_INHIBITORY = 2.0
PROGRESS_EVERY_MS = 100


@dataclass
class SimulationResult:
    """Results from a simulation run.

    Attributes
    ----------
    spike_log : SpikeLog
        Every spike, in time order.
    parameters : ParameterSet
        Parameters of the simulated population.
    duration : int
        Number of milliseconds actually simulated.
    v_trace : Optional[np.ndarray]
        Membrane potential, shape (n_recorded, duration). Spiking samples
        read V_PEAK. Only populated when neurons were recorded.
    recorded_idx : Optional[np.ndarray]
        Indices of neurons whose traces were recorded.
    interrupted : bool
        True if the run stopped before its configured duration.
    """
    spike_log: SpikeLog
    parameters: ParameterSet
    duration: int
    v_trace: Optional[np.ndarray] = None
    recorded_idx: Optional[np.ndarray] = None
    interrupted: bool = False

    @property
    def n_neurons(self):
        return self.parameters.n_neurons

    @property
    def n_excitatory(self):
        return self.parameters.n_excitatory

    @property
    def n_spikes(self):
        """Total number of spikes across all neurons."""
        return self.spike_log.n_spikes

    @property
    def spike_times(self):
        """Per-neuron spike time arrays (ms)."""
        return self.spike_log.spike_trains()

    def mean_rate(self):
        """Mean firing rate across all neurons (Hz)."""
        duration_s = self.duration / 1000.0
        if self.n_neurons == 0 or duration_s == 0:
            return 0.0
        return self.n_spikes / (self.n_neurons * duration_s)

    def neuron_rates(self):
        """Per-neuron firing rates (Hz)."""
        duration_s = self.duration / 1000.0
        if duration_s == 0:
            return np.zeros(self.n_neurons)
        return self.spike_log.spike_counts() / duration_s


class SimulationEngine:
    """Owns the network state and advances it one millisecond at a time.

    Parameters
    ----------
    parameters : ParameterSet
        Per-neuron a, b, c, d.
    connectivity : ConnectivityMatrix
        Weights, shape (n_neurons, n_neurons).
    rng : np.random.Generator
        Source of the background drive.
    noise_excitatory, noise_inhibitory : float
        Standard deviation of the Gaussian drive for each polarity.
    record_idx : array-like, optional
        Neurons whose membrane potential is sampled every step.
    """

    def __init__(self, parameters, connectivity, rng,
                 noise_excitatory=NOISE_EXCITATORY,
                 noise_inhibitory=NOISE_INHIBITORY,
                 record_idx=None):
        if connectivity.n_neurons != parameters.n_neurons:
            raise InvalidConfigurationError(
                f"connectivity covers {connectivity.n_neurons} neurons, "
                f"parameters cover {parameters.n_neurons}")
        noise_excitatory = require_amplitude("noise_excitatory", noise_excitatory)
        noise_inhibitory = require_amplitude("noise_inhibitory", noise_inhibitory)

        self.parameters = parameters
        self.connectivity = connectivity
        self.rng = rng
        self.state = NeuronState.initial(parameters)

        n = parameters.n_neurons
        self._noise_sigma = np.where(parameters.is_excitatory,
                                     noise_excitatory, noise_inhibitory)
        self._fired_last = np.zeros(n, dtype=bool)
        self._fired_now = np.zeros(n, dtype=bool)

        self.spike_log = SpikeLog(n, n_excitatory=parameters.n_excitatory)
        self.time_ms = 0

        self.record_idx = (np.array([], dtype=int) if record_idx is None
                           else np.asarray(record_idx, dtype=int))
        self._v_samples = []

    @property
    def fired_last_step(self):
        """Mask of neurons that fired in the most recent completed step."""
        return self._fired_last.copy()

    def input_current(self):
        """Background drive plus delayed synaptic input for the coming step."""
        current = self._noise_sigma * self.rng.standard_normal(self.parameters.n_neurons)
        current += self.connectivity.synaptic_input(self._fired_last)
        return current

    def step(self):
        """Advance the network by one millisecond.

        Returns
        -------
        np.ndarray
            Indices of the neurons that fired during this step.
        """
        p = self.parameters
        current = self.input_current()

        self.state.integrate(current, p.a, p.b)

        fired = self.state.detect()
        self._fired_now[:] = fired
        fired_idx = np.flatnonzero(fired)
        self.spike_log.append(self.time_ms, fired_idx)

        if len(self.record_idx) > 0:
            sample = self.state.v[self.record_idx].copy()
            sample[fired[self.record_idx]] = V_PEAK
            self._v_samples.append(sample)

        self.state.reset(fired, p.c, p.d)

        # the spikes just logged drive the next step, never this one
        self._fired_last, self._fired_now = self._fired_now, self._fired_last
        self.time_ms += 1
        return fired_idx

    def run(self, duration_ms, should_stop: Optional[Callable[[int], bool]] = None):
        """Run for `duration_ms` whole milliseconds.

        Parameters
        ----------
        duration_ms : int
            Number of steps to take.
        should_stop : callable, optional
            Polled with the current time before every step; a truthy return
            ends the run early.

        Returns
        -------
        SimulationResult
        """
        duration_ms = require_duration(duration_ms)
        interrupted = False

        LOG.info("Starting simulation: %d neurons (%d E / %d I), %d ms",
                 self.parameters.n_neurons, self.parameters.n_excitatory,
                 self.parameters.n_inhibitory, duration_ms)

        for _ in range(duration_ms):
            if should_stop is not None and should_stop(self.time_ms):
                interrupted = True
                LOG.warning("Simulation interrupted at t=%d ms", self.time_ms)
                break
            if self.time_ms % PROGRESS_EVERY_MS == 0:
                LOG.info("Time step: %d", self.time_ms)
            self.step()

        result = self.result(interrupted=interrupted)
        LOG.info("Simulation complete: %d spikes, mean rate %.2f Hz",
                 result.n_spikes, result.mean_rate())
        return result

    def result(self, interrupted=False):
        """Package the current log and traces as a SimulationResult."""
        v_trace = None
        if len(self.record_idx) > 0:
            if self._v_samples:
                v_trace = np.stack(self._v_samples, axis=1)
            else:
                v_trace = np.zeros((len(self.record_idx), 0))
        return SimulationResult(
            spike_log=self.spike_log,
            parameters=self.parameters,
            duration=self.time_ms,
            v_trace=v_trace,
            recorded_idx=self.record_idx,
            interrupted=interrupted,
        )


def build_engine(n_excitatory=800, n_inhibitory=200, rng_seed=None,
                 noise_excitatory=NOISE_EXCITATORY,
                 noise_inhibitory=NOISE_INHIBITORY,
                 self_connections=False, record_idx=None):
    """Draw a random network and wrap it in a SimulationEngine.

    Parameters, weights and noise all come from one generator seeded with
    `rng_seed`, so equal seeds give equal networks and equal runs.
    """
    require_counts(n_excitatory, n_inhibitory)
    rng = np.random.default_rng(rng_seed)
    parameters = build_parameter_set(n_excitatory, n_inhibitory, rng)
    connectivity = build_connectivity(parameters, rng, self_connections=self_connections)
    return SimulationEngine(parameters, connectivity, rng,
                            noise_excitatory=noise_excitatory,
                            noise_inhibitory=noise_inhibitory,
                            record_idx=record_idx)


def run_simulation(n_excitatory=800, n_inhibitory=200, duration_ms=1000, rng_seed=None,
                   noise_excitatory=NOISE_EXCITATORY, noise_inhibitory=NOISE_INHIBITORY,
                   self_connections=False, record_idx=None, should_stop=None):
    """Run the random Izhikevich network and keep everything it produced.

    Parameters
    ----------
    n_excitatory : int
        Number of excitatory neurons (indices 0..n_excitatory-1).
    n_inhibitory : int
        Number of inhibitory neurons (the following indices).
    duration_ms : int
        Simulated time (ms).
    rng_seed : int, optional
        Seed for parameters, weights and background drive.
    noise_excitatory, noise_inhibitory : float
        Background drive sigma per polarity.
    self_connections : bool
        Keep the diagonal of the weight matrix.
    record_idx : array-like, optional
        Neurons whose membrane potential is recorded.
    should_stop : callable, optional
        External interruption hook, see SimulationEngine.run.

    Returns
    -------
    SimulationResult
        `result.spike_log` holds the (time_ms, neuron) pairs.
    """
    require_counts(n_excitatory, n_inhibitory)
    require_duration(duration_ms)
    engine = build_engine(n_excitatory, n_inhibitory, rng_seed=rng_seed,
                          noise_excitatory=noise_excitatory,
                          noise_inhibitory=noise_inhibitory,
                          self_connections=self_connections,
                          record_idx=record_idx)
    return engine.run(duration_ms, should_stop=should_stop)


def simulate(n_excitatory=800, n_inhibitory=200, duration_ms=1000, rng_seed=None,
             **kwargs):
    """Run the random Izhikevich network and return its spike log.

    Takes the same keyword arguments as run_simulation(); use that function
    when parameters, traces or the interruption flag are needed.

    Returns
    -------
    SpikeLog
        Time-ordered (time_ms, neuron) pairs.
    """
    return run_simulation(n_excitatory, n_inhibitory, duration_ms,
                          rng_seed=rng_seed, **kwargs).spike_log
