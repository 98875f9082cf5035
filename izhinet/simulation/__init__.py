"""simulation: Izhikevich random network engine.

Pure-numpy implementation of the Izhikevich (2003) cortical network:
heterogeneous excitatory/inhibitory populations, dense random coupling,
thalamic noise and two half-step Euler integration.

References:
    Izhikevich EM (2003). IEEE Trans Neural Netw 14(6):1569-1572.
"""

from .errors import (
    InvalidConfigurationError,
    ResourceExhaustionError,
)
from .parameters import (
    EXCITATORY,
    INHIBITORY,
    IZHIKEVICH_PRESETS,
    IzhikevichParams,
    ParameterSet,
    build_parameter_set,
    build_parameter_set_from_presets,
)
from .connectivity import (
    ConnectivityMatrix,
    build_connectivity,
)
from .state import NeuronState
from .spikes import SpikeLog
from .engine import (
    SimulationEngine,
    SimulationResult,
    build_engine,
    run_simulation,
    simulate,
)
from .analysis import (
    firing_rates,
    rates_by_polarity,
    spike_raster,
    active_fraction,
    population_rate,
    power_spectrum,
    band_power,
    band_powers,
    dominant_frequency,
    ei_balance,
)
