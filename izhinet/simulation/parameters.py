"""Izhikevich neuron parameters for a mixed excitatory/inhibitory population.

The model (Izhikevich 2003) has four parameters per neuron:
    a : time scale of the recovery variable u
    b : sensitivity of u to subthreshold fluctuations of v
    c : after-spike reset value of v (mV)
    d : after-spike increment of u

Heterogeneity follows the paper's random network: each neuron draws one
uniform r in [0, 1). Excitatory cells span regular spiking (r=0) to
chattering (r=1), with r squared to bias the population towards regular
spiking. Inhibitory cells span fast spiking to low-threshold spiking.

References:
    Izhikevich EM (2003). IEEE Trans Neural Netw 14(6):1569-1572.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd

from izhinet.simulation.errors import InvalidConfigurationError, require_counts
from izhinet.utils import get_logger

LOG = get_logger("simulation.parameters")


EXCITATORY = "excitatory"
INHIBITORY = "inhibitory"


@dataclass(frozen=True)
class IzhikevichParams:
    """A named Izhikevich cell type.

    Parameters
    ----------
    name : str
        Preset name (e.g., "regular_spiking").
    a, b, c, d : float
        Model parameters.
    polarity : str
        EXCITATORY or INHIBITORY; sets the sign of outgoing synapses.
    """
    name: str
    a: float
    b: float
    c: float
    d: float
    polarity: str = EXCITATORY

    def to_dict(self):
        return {"name": self.name, "a": self.a, "b": self.b,
                "c": self.c, "d": self.d, "polarity": self.polarity}


IZHIKEVICH_PRESETS = {
    "regular_spiking": IzhikevichParams(
        "regular_spiking", a=0.02, b=0.2, c=-65.0, d=8.0, polarity=EXCITATORY),
    "intrinsically_bursting": IzhikevichParams(
        "intrinsically_bursting", a=0.02, b=0.2, c=-55.0, d=4.0, polarity=EXCITATORY),
    "chattering": IzhikevichParams(
        "chattering", a=0.02, b=0.2, c=-50.0, d=2.0, polarity=EXCITATORY),
    "fast_spiking": IzhikevichParams(
        "fast_spiking", a=0.1, b=0.2, c=-65.0, d=2.0, polarity=INHIBITORY),
    "low_threshold_spiking": IzhikevichParams(
        "low_threshold_spiking", a=0.02, b=0.25, c=-65.0, d=2.0, polarity=INHIBITORY),
}
"""Cell types from Izhikevich (2003), Fig. 2."""


@dataclass(frozen=True)
class ParameterSet:
    """Per-neuron Izhikevich parameters, fixed for the lifetime of a network.

    All arrays are indexed by neuron index [0, n_neurons) and are read-only.
    Excitatory neurons come first, inhibitory neurons follow.

    Attributes
    ----------
    n_excitatory : int
    n_inhibitory : int
    a, b, c, d : np.ndarray
        Model parameters per neuron.
    cell_types : np.ndarray
        Preset name per neuron (object array).
    """
    n_excitatory: int
    n_inhibitory: int
    a: np.ndarray
    b: np.ndarray
    c: np.ndarray
    d: np.ndarray
    cell_types: np.ndarray

    def __post_init__(self):
        n = self.n_excitatory + self.n_inhibitory
        for name in ("a", "b", "c", "d", "cell_types"):
            dtype = object if name == "cell_types" else np.float64
            values = np.array(getattr(self, name), dtype=dtype)
            object.__setattr__(self, name, values)
            if len(values) != n:
                raise InvalidConfigurationError(
                    f"parameter '{name}' has {len(values)} entries, expected {n}")
            values.setflags(write=False)

    @property
    def n_neurons(self):
        return self.n_excitatory + self.n_inhibitory

    @property
    def is_excitatory(self):
        """Boolean mask, True for excitatory neurons."""
        return np.arange(self.n_neurons) < self.n_excitatory

    @property
    def polarity(self):
        """Polarity label per neuron."""
        return np.where(self.is_excitatory, EXCITATORY, INHIBITORY)

    @property
    def excitatory_indices(self):
        return np.arange(self.n_excitatory)

    @property
    def inhibitory_indices(self):
        return np.arange(self.n_excitatory, self.n_neurons)

    def to_frame(self):
        """One row per neuron: polarity, cell_type, a, b, c, d."""
        return pd.DataFrame({
            "polarity": self.polarity,
            "cell_type": self.cell_types,
            "a": self.a,
            "b": self.b,
            "c": self.c,
            "d": self.d,
        })

    def summary(self):
        """Return a summary string."""
        lines = [
            f"ParameterSet: {self.n_neurons:,} neurons "
            f"({self.n_excitatory:,} excitatory, {self.n_inhibitory:,} inhibitory)",
        ]
        for label, mask in ((EXCITATORY, self.is_excitatory),
                            (INHIBITORY, ~self.is_excitatory)):
            if not np.any(mask):
                continue
            lines.append(
                f"  {label}: a [{self.a[mask].min():.3f}, {self.a[mask].max():.3f}]"
                f"  b [{self.b[mask].min():.3f}, {self.b[mask].max():.3f}]"
                f"  c [{self.c[mask].min():.1f}, {self.c[mask].max():.1f}]"
                f"  d [{self.d[mask].min():.2f}, {self.d[mask].max():.2f}]")
        return "\n".join(lines)


def _excitatory_jitter(r):
    """Reset jitter towards chattering: c=-65+15r^2, d=8-6r^2."""
    return -65.0 + 15.0 * r ** 2, 8.0 - 6.0 * r ** 2


def _inhibitory_jitter(r):
    """Fast spiking towards low-threshold spiking: returns (a, b, c, d)."""
    return (0.02 + 0.08 * r, 0.25 - 0.05 * r,
            np.full_like(r, -65.0), np.full_like(r, 2.0))


def build_parameter_set(n_excitatory, n_inhibitory, rng):
    """Draw heterogeneous parameters for the classic random network.

    Parameters
    ----------
    n_excitatory : int
        Number of excitatory (regular spiking family) neurons.
    n_inhibitory : int
        Number of inhibitory (fast spiking family) neurons.
    rng : np.random.Generator
        Source of the per-neuron uniform r.

    Returns
    -------
    ParameterSet
    """
    require_counts(n_excitatory, n_inhibitory)
    n_excitatory, n_inhibitory = int(n_excitatory), int(n_inhibitory)

    r_e = rng.random(n_excitatory)
    r_i = rng.random(n_inhibitory)

    c_e, d_e = _excitatory_jitter(r_e)
    a_i, b_i, c_i, d_i = _inhibitory_jitter(r_i)

    params = ParameterSet(
        n_excitatory=n_excitatory,
        n_inhibitory=n_inhibitory,
        a=np.concatenate([np.full(n_excitatory, 0.02), a_i]),
        b=np.concatenate([np.full(n_excitatory, 0.2), b_i]),
        c=np.concatenate([c_e, c_i]),
        d=np.concatenate([d_e, d_i]),
        cell_types=np.array(["regular_spiking"] * n_excitatory
                            + ["fast_spiking"] * n_inhibitory, dtype=object),
    )
    LOG.debug("Drew parameters for %d excitatory, %d inhibitory neurons",
              n_excitatory, n_inhibitory)
    return params


def build_parameter_set_from_presets(cell_types, rng):
    """Draw parameters for an explicit list of preset cell types.

    Excitatory presets keep their own a and b and jitter the reset values
    like the classic network; inhibitory presets use the fast-spiking
    jitter for all four parameters. Neurons are reordered so that every
    excitatory type precedes every inhibitory type, keeping list order
    within each polarity.

    Parameters
    ----------
    cell_types : sequence of str
        Keys of IZHIKEVICH_PRESETS, one per neuron.
    rng : np.random.Generator

    Returns
    -------
    ParameterSet
    """
    unknown = sorted({t for t in cell_types if t not in IZHIKEVICH_PRESETS})
    if unknown:
        raise InvalidConfigurationError(
            f"Unknown cell types {unknown}; choose from {sorted(IZHIKEVICH_PRESETS)}")

    exc = [IZHIKEVICH_PRESETS[t] for t in cell_types
           if IZHIKEVICH_PRESETS[t].polarity == EXCITATORY]
    inh = [IZHIKEVICH_PRESETS[t] for t in cell_types
           if IZHIKEVICH_PRESETS[t].polarity == INHIBITORY]
    require_counts(len(exc), len(inh))

    r_e = rng.random(len(exc))
    r_i = rng.random(len(inh))
    c_e, d_e = _excitatory_jitter(r_e)
    a_i, b_i, c_i, d_i = _inhibitory_jitter(r_i)

    return ParameterSet(
        n_excitatory=len(exc),
        n_inhibitory=len(inh),
        a=np.concatenate([np.array([p.a for p in exc], dtype=np.float64), a_i]),
        b=np.concatenate([np.array([p.b for p in exc], dtype=np.float64), b_i]),
        c=np.concatenate([c_e, c_i]),
        d=np.concatenate([d_e, d_i]),
        cell_types=np.array([p.name for p in exc + inh], dtype=object),
    )
