"""Dense random synaptic coupling for the Izhikevich network.

S[i, j] is the jump in input current of neuron i when neuron j fires.
Every column takes the sign of its source neuron: excitatory columns are
uniform in [0, 0.5), inhibitory columns uniform in [-1, 0).
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd

from izhinet.simulation.errors import ResourceExhaustionError, require_counts
from izhinet.simulation.parameters import ParameterSet
from izhinet.utils import get_logger

LOG = get_logger("simulation.connectivity")


EXCITATORY_WEIGHT_SCALE = 0.5
INHIBITORY_WEIGHT_SCALE = 1.0


@dataclass(frozen=True)
class ConnectivityMatrix:
    """An immutable N x N weight matrix.

    Attributes
    ----------
    weights : np.ndarray
        Shape (n_neurons, n_neurons); weights[post, pre]. Read-only.
    n_excitatory : int
        Columns [0, n_excitatory) are excitatory sources, the rest inhibitory.
    self_connections : bool
        Whether the diagonal was drawn or zeroed.
    """
    weights: np.ndarray
    n_excitatory: int
    self_connections: bool = False

    def __post_init__(self):
        w = np.asarray(self.weights, dtype=np.float64)
        if w.ndim != 2 or w.shape[0] != w.shape[1]:
            raise ValueError(f"weights must be square, got shape {w.shape}")
        w.setflags(write=False)
        object.__setattr__(self, "weights", w)

    @property
    def n_neurons(self):
        return self.weights.shape[0]

    @property
    def n_synapses(self):
        """Number of non-zero entries."""
        return int(np.count_nonzero(self.weights))

    def synaptic_input(self, fired):
        """Summed input per neuron from a set of firing sources.

        Parameters
        ----------
        fired : np.ndarray
            Boolean mask or integer indices of presynaptic neurons.

        Returns
        -------
        np.ndarray
            Shape (n_neurons,).
        """
        fired = np.asarray(fired)
        if fired.dtype == bool:
            fired = np.flatnonzero(fired)
        if fired.size == 0:
            return np.zeros(self.n_neurons)
        return self.weights[:, fired].sum(axis=1)

    def to_edges(self):
        """Non-zero entries as an edge table (pre_idx, post_idx, weight)."""
        post, pre = np.nonzero(self.weights)
        return pd.DataFrame({
            "pre_idx": pre.astype(np.int32),
            "post_idx": post.astype(np.int32),
            "weight": self.weights[post, pre],
        })

    def summary(self):
        """Return a summary string."""
        exc = self.weights[:, :self.n_excitatory]
        inh = self.weights[:, self.n_excitatory:]
        lines = [
            f"ConnectivityMatrix: {self.n_neurons:,} neurons, {self.n_synapses:,} synapses",
            f"  self-connections: {self.self_connections}",
        ]
        if exc.size:
            lines.append(f"  excitatory weights: [{exc.min():.3f}, {exc.max():.3f}]")
        if inh.size:
            lines.append(f"  inhibitory weights: [{inh.min():.3f}, {inh.max():.3f}]")
        return "\n".join(lines)


def build_connectivity(parameters, rng, self_connections=False,
                       n_inhibitory=None):
    """Draw the all-to-all weight matrix.

    Parameters
    ----------
    parameters : ParameterSet or int
        Population whose polarity ordering fixes the column signs. An int
        is read as n_excitatory and requires n_inhibitory.
    rng : np.random.Generator
        Source of uniform weights.
    self_connections : bool
        Keep random weights on the diagonal. Off by default.
    n_inhibitory : int, optional
        Only used when `parameters` is an int.

    Returns
    -------
    ConnectivityMatrix
    """
    if isinstance(parameters, ParameterSet):
        n_exc, n_inh = parameters.n_excitatory, parameters.n_inhibitory
    else:
        n_exc, n_inh = parameters, (n_inhibitory or 0)
    n = require_counts(n_exc, n_inh)
    n_exc = int(n_exc)

    try:
        weights = rng.random((n, n))
    except (MemoryError, ValueError) as err:
        raise ResourceExhaustionError(
            f"cannot allocate a {n} x {n} weight matrix: {err}") from err

    weights[:, :n_exc] *= EXCITATORY_WEIGHT_SCALE
    # 1 - r maps [0, 1) onto (0, 1], so inhibitory weights land in [-1, 0)
    weights[:, n_exc:] = -INHIBITORY_WEIGHT_SCALE * (1.0 - weights[:, n_exc:])
    if not self_connections:
        np.fill_diagonal(weights, 0.0)

    matrix = ConnectivityMatrix(weights=weights, n_excitatory=n_exc,
                                self_connections=self_connections)
    LOG.debug("Built connectivity: %d neurons, %d synapses", n, matrix.n_synapses)
    return matrix
