"""Command-line entry point: simulate the random network and save a raster.

    izhinet --excitatory 800 --inhibitory 200 --milliseconds 1000 --seed 1

Values given on the command line override those of --config, which in turn
override the built-in defaults.
"""
import argparse
import signal
import sys

import matplotlib
matplotlib.use("Agg")

from izhinet import __version__
from izhinet.config import SimulationConfig, load_config
from izhinet.simulation import (
    InvalidConfigurationError,
    ResourceExhaustionError,
    run_simulation,
)
from izhinet.simulation.analysis import band_powers, rates_by_polarity
from izhinet.utils import get_logger, set_log_level
from izhinet.viz import save_raster

LOG = get_logger("cli")


def build_parser():
    """Argument parser with the classic network's defaults."""
    defaults = SimulationConfig()
    parser = argparse.ArgumentParser(
        prog="izhinet",
        description="Simulate a random Izhikevich network and render its spike raster.")
    parser.add_argument("-e", "--excitatory", type=int, dest="n_excitatory",
                        help=f"Number of excitatory neurons (default {defaults.n_excitatory})")
    parser.add_argument("-i", "--inhibitory", type=int, dest="n_inhibitory",
                        help=f"Number of inhibitory neurons (default {defaults.n_inhibitory})")
    parser.add_argument("-m", "--milliseconds", type=int, dest="duration_ms",
                        help=f"Simulation duration in milliseconds (default {defaults.duration_ms})")
    parser.add_argument("-s", "--seed", type=int,
                        help="Random seed; runs with equal seeds are identical")
    parser.add_argument("-c", "--config",
                        help="YAML file with SimulationConfig fields")
    parser.add_argument("-o", "--output",
                        help=f"Raster image path (default {defaults.output})")
    parser.add_argument("--spikes-csv", dest="spikes_csv",
                        help="Also write the spike log as CSV")
    parser.add_argument("--noise-excitatory", type=float, dest="noise_excitatory",
                        help=f"Thalamic noise sigma, excitatory (default {defaults.noise_excitatory})")
    parser.add_argument("--noise-inhibitory", type=float, dest="noise_inhibitory",
                        help=f"Thalamic noise sigma, inhibitory (default {defaults.noise_inhibitory})")
    parser.add_argument("--self-connections", action="store_true", default=None,
                        dest="self_connections",
                        help="Keep random weights on the diagonal")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Only log warnings and errors")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_config(args):
    """Merge defaults, the optional config file and command-line values."""
    config = load_config(args.config) if args.config else SimulationConfig()
    return config.with_overrides(
        n_excitatory=args.n_excitatory,
        n_inhibitory=args.n_inhibitory,
        duration_ms=args.duration_ms,
        seed=args.seed,
        output=args.output,
        spikes_csv=args.spikes_csv,
        noise_excitatory=args.noise_excitatory,
        noise_inhibitory=args.noise_inhibitory,
        self_connections=args.self_connections,
    ).validate()


def main(argv=None):
    """Run the CLI; returns the process exit status."""
    args = build_parser().parse_args(argv)
    if args.quiet:
        set_log_level("WARNING")

    try:
        config = resolve_config(args)
    except InvalidConfigurationError as err:
        LOG.error("Invalid configuration: %s", err)
        return 2

    LOG.info("Configuration: %s", config.to_dict())

    interrupted = {"flag": False}

    def _on_sigint(signum, frame):
        interrupted["flag"] = True

    previous = signal.signal(signal.SIGINT, _on_sigint)
    try:
        result = run_simulation(**config.simulate_kwargs(),
                                should_stop=lambda t: interrupted["flag"])
    except ResourceExhaustionError as err:
        LOG.error("Out of memory: %s", err)
        return 1
    finally:
        signal.signal(signal.SIGINT, previous)

    rates = rates_by_polarity(result)
    LOG.info("Mean rates: excitatory %.2f Hz, inhibitory %.2f Hz",
             rates["excitatory"], rates["inhibitory"])
    if result.n_spikes > 0 and result.duration > 1:
        bands = band_powers(result)
        LOG.info("Population rhythm: peak %.1f Hz, alpha %.3g, gamma %.3g",
                 bands["peak_hz"], bands["alpha"], bands["gamma"])

    save_raster(result, config.output)
    if config.spikes_csv:
        result.spike_log.to_frame().to_csv(config.spikes_csv, index=False)
        LOG.info("Wrote %d spikes to %s", result.n_spikes, config.spikes_csv)

    return 130 if result.interrupted else 0


if __name__ == "__main__":
    sys.exit(main())
