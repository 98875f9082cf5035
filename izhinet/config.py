"""Run configuration: defaults, YAML files and command-line overrides.

A configuration file is a flat YAML mapping using the field names of
SimulationConfig, e.g.

    n_excitatory: 800
    n_inhibitory: 200
    duration_ms: 1000
    seed: 42
    noise_excitatory: 5.0
    noise_inhibitory: 2.0
"""

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Optional

import yaml

from izhinet.simulation.engine import NOISE_EXCITATORY, NOISE_INHIBITORY
from izhinet.simulation.errors import (
    InvalidConfigurationError,
    require_amplitude,
    require_counts,
    require_duration,
    require_seed,
)
from izhinet.utils import get_logger

LOG = get_logger("config")


@dataclass(frozen=True)
class SimulationConfig:
    """Everything needed to reproduce a run."""
    n_excitatory: int = 800
    n_inhibitory: int = 200
    duration_ms: int = 1000
    seed: Optional[int] = None
    noise_excitatory: float = NOISE_EXCITATORY
    noise_inhibitory: float = NOISE_INHIBITORY
    self_connections: bool = False
    output: str = "spikes.png"
    spikes_csv: Optional[str] = None

    def validate(self):
        """Raise InvalidConfigurationError if the run cannot be simulated."""
        require_counts(self.n_excitatory, self.n_inhibitory)
        require_duration(self.duration_ms)
        require_amplitude("noise_excitatory", self.noise_excitatory)
        require_amplitude("noise_inhibitory", self.noise_inhibitory)
        require_seed(self.seed)
        if not isinstance(self.self_connections, bool):
            raise InvalidConfigurationError(
                f"self_connections must be true or false, got {self.self_connections!r}")
        if not isinstance(self.output, str) or not self.output:
            raise InvalidConfigurationError(f"output must be a file path, got {self.output!r}")
        if self.spikes_csv is not None and not isinstance(self.spikes_csv, str):
            raise InvalidConfigurationError(
                f"spikes_csv must be a file path or null, got {self.spikes_csv!r}")
        return self

    def with_overrides(self, **overrides):
        """Copy with every override that is not None applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def simulate_kwargs(self):
        """Keyword arguments for izhinet.simulation.run_simulation()."""
        return {
            "n_excitatory": self.n_excitatory,
            "n_inhibitory": self.n_inhibitory,
            "duration_ms": self.duration_ms,
            "rng_seed": self.seed,
            "noise_excitatory": self.noise_excitatory,
            "noise_inhibitory": self.noise_inhibitory,
            "self_connections": self.self_connections,
        }

    def to_dict(self):
        return asdict(self)


def load_config(path):
    """Read a SimulationConfig from a YAML file.

    Parameters
    ----------
    path : str or Path

    Returns
    -------
    SimulationConfig
        Validated; unspecified fields keep their defaults.
    """
    path = Path(path)
    try:
        with open(path, "r") as fptr:
            raw = yaml.safe_load(fptr) or {}
    except (OSError, UnicodeDecodeError) as err:
        raise InvalidConfigurationError(f"{path}: cannot read configuration: {err}") from err
    except yaml.YAMLError as err:
        raise InvalidConfigurationError(f"{path}: not valid YAML: {err}") from err

    if not isinstance(raw, dict):
        raise InvalidConfigurationError(
            f"{path}: expected a mapping at the top level, got {type(raw).__name__}")

    known = {f.name for f in fields(SimulationConfig)}
    unknown = sorted(str(key) for key in set(raw) - known)
    if unknown:
        raise InvalidConfigurationError(
            f"{path}: unknown configuration keys {unknown}; expected some of {sorted(known)}")

    LOG.debug("Loaded configuration from %s: %s", path, raw)
    return SimulationConfig(**raw).validate()
