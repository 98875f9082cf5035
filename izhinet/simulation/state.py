"""Membrane state of an Izhikevich population and its update rules.

    dv/dt = 0.04 v^2 + 5 v + 140 - u + I
    du/dt = a (b v - u)

    if v >= 30 mV:  v <- c,  u <- u + d

v is advanced in two 0.5 ms Euler half-steps per millisecond to keep the
quadratic term stable; u takes a single 1 ms step afterwards.
"""

from dataclasses import dataclass

import numpy as np

from izhinet.simulation.errors import ResourceExhaustionError


V_INIT = -65.0
V_PEAK = 30.0
HALF_STEPS = 2


def dv_dt(v, u, current):
    """Right-hand side of the membrane equation (mV/ms)."""
    return 0.04 * v * v + 5.0 * v + 140.0 - u + current


@dataclass
class NeuronState:
    """Mutable per-neuron variables.

    Attributes
    ----------
    v : np.ndarray
        Membrane potential (mV).
    u : np.ndarray
        Recovery variable.
    """
    v: np.ndarray
    u: np.ndarray

    @classmethod
    def initial(cls, parameters, v_init=V_INIT):
        """Resting state: v = v_init everywhere, u = b * v."""
        try:
            v = np.full(parameters.n_neurons, v_init, dtype=np.float64)
            u = parameters.b * v
        except MemoryError as err:
            raise ResourceExhaustionError(
                f"cannot allocate state for {parameters.n_neurons} neurons") from err
        return cls(v=v, u=u)

    @property
    def n_neurons(self):
        return len(self.v)

    def copy(self):
        return NeuronState(v=self.v.copy(), u=self.u.copy())

    def integrate(self, current, a, b):
        """Advance every neuron by one millisecond, in place.

        Parameters
        ----------
        current : np.ndarray
            Input current per neuron, held constant over the millisecond.
        a, b : np.ndarray
            Recovery parameters per neuron.
        """
        dt = 1.0 / HALF_STEPS
        for _ in range(HALF_STEPS):
            self.v += dt * dv_dt(self.v, self.u, current)
        self.u += a * (b * self.v - self.u)

    def detect(self, v_peak=V_PEAK):
        """Boolean mask of neurons at or above the spike peak."""
        return self.v >= v_peak

    def reset(self, fired, c, d):
        """Apply the after-spike reset to the neurons in `fired`."""
        self.v[fired] = c[fired]
        self.u[fired] += d[fired]
