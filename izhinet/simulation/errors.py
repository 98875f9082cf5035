"""Exceptions raised by the simulation core.

Both subclass the builtin the numpy stack would raise anyway, so callers
catching ValueError or MemoryError keep working.
"""
import numbers


class InvalidConfigurationError(ValueError):
    """Neuron counts, duration or noise settings that cannot be simulated."""


class ResourceExhaustionError(MemoryError):
    """Network arrays could not be allocated."""


def _whole_number(label, value):
    """Return `value` as int, or raise if it is not a whole real number."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidConfigurationError(
            f"{label} must be a whole number, got {value!r}")
    try:
        whole = int(value)
    except (ValueError, OverflowError) as err:
        raise InvalidConfigurationError(
            f"{label} must be a whole number, got {value!r}") from err
    if whole != value:
        raise InvalidConfigurationError(
            f"{label} must be a whole number, got {value!r}")
    return whole


def require_counts(n_excitatory, n_inhibitory):
    """Validate a pair of population sizes; return the total."""
    counts = {}
    for label, count in (("n_excitatory", n_excitatory), ("n_inhibitory", n_inhibitory)):
        counts[label] = _whole_number(label, count)
        if counts[label] < 0:
            raise InvalidConfigurationError(f"{label} must be >= 0, got {count}")
    n_total = counts["n_excitatory"] + counts["n_inhibitory"]
    if n_total <= 0:
        raise InvalidConfigurationError(
            "network needs at least one neuron "
            f"(n_excitatory={n_excitatory}, n_inhibitory={n_inhibitory})")
    return n_total


def require_duration(duration_ms):
    """Validate a run length in whole milliseconds; return it as int."""
    duration = _whole_number("duration_ms", duration_ms)
    if duration <= 0:
        raise InvalidConfigurationError(f"duration_ms must be > 0, got {duration_ms}")
    return duration


def require_amplitude(label, value):
    """Validate a non-negative real noise amplitude; return it as float."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidConfigurationError(f"{label} must be a number, got {value!r}")
    if not value >= 0:
        raise InvalidConfigurationError(f"{label} must be >= 0, got {value}")
    return float(value)


def require_seed(seed):
    """Validate an RNG seed: None or a non-negative integer."""
    if seed is None:
        return None
    if isinstance(seed, bool) or not isinstance(seed, numbers.Integral) or seed < 0:
        raise InvalidConfigurationError(
            f"seed must be a non-negative integer or null, got {seed!r}")
    return int(seed)
