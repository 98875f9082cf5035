"""Tests for Izhikevich parameter generation.

Checks population sizes, ordering and the parameter ranges of the classic
random network, plus the preset-based builder.
"""

import numpy as np
import pytest

from izhinet.simulation.errors import InvalidConfigurationError
from izhinet.simulation.parameters import (
    EXCITATORY,
    INHIBITORY,
    IZHIKEVICH_PRESETS,
    ParameterSet,
    build_parameter_set,
    build_parameter_set_from_presets,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def classic(rng):
    return build_parameter_set(80, 20, rng)


# ---------------------------------------------------------------------------
# Classic network
# ---------------------------------------------------------------------------

class TestBuildParameterSet:
    def test_counts(self, classic):
        assert classic.n_excitatory == 80
        assert classic.n_inhibitory == 20
        assert classic.n_neurons == 100
        assert np.sum(classic.polarity == EXCITATORY) == 80
        assert np.sum(classic.polarity == INHIBITORY) == 20

    def test_excitatory_first(self, classic):
        assert np.all(classic.is_excitatory[:80])
        assert not np.any(classic.is_excitatory[80:])
        assert list(classic.excitatory_indices) == list(range(80))
        assert list(classic.inhibitory_indices) == list(range(80, 100))

    def test_excitatory_ranges(self, classic):
        e = classic.is_excitatory
        assert np.all(classic.a[e] == 0.02)
        assert np.all(classic.b[e] == 0.2)
        assert np.all((classic.c[e] >= -65.0) & (classic.c[e] < -50.0))
        assert np.all((classic.d[e] > 2.0) & (classic.d[e] <= 8.0))

    def test_inhibitory_ranges(self, classic):
        i = ~classic.is_excitatory
        assert np.all((classic.a[i] >= 0.02) & (classic.a[i] < 0.1))
        assert np.all((classic.b[i] > 0.2) & (classic.b[i] <= 0.25))
        assert np.all(classic.c[i] == -65.0)
        assert np.all(classic.d[i] == 2.0)

    def test_excitatory_c_and_d_share_r(self, classic):
        """c and d come from the same r: (c + 65) / 15 == (8 - d) / 6."""
        e = classic.is_excitatory
        np.testing.assert_allclose((classic.c[e] + 65.0) / 15.0,
                                   (8.0 - classic.d[e]) / 6.0)

    def test_neurons_are_heterogeneous(self, classic):
        assert len(np.unique(classic.c[classic.is_excitatory])) > 1
        assert len(np.unique(classic.a[~classic.is_excitatory])) > 1

    def test_arrays_are_read_only(self, classic):
        with pytest.raises(ValueError):
            classic.c[0] = 0.0

    def test_same_seed_same_parameters(self):
        p1 = build_parameter_set(10, 5, np.random.default_rng(3))
        p2 = build_parameter_set(10, 5, np.random.default_rng(3))
        np.testing.assert_array_equal(p1.c, p2.c)
        np.testing.assert_array_equal(p1.a, p2.a)

    def test_single_population(self, rng):
        p = build_parameter_set(2, 0, rng)
        assert p.n_neurons == 2
        assert p.n_inhibitory == 0

    @pytest.mark.parametrize("n_exc, n_inh", [(0, 0), (-1, 5), (5, -1)])
    def test_rejects_degenerate_counts(self, rng, n_exc, n_inh):
        with pytest.raises(InvalidConfigurationError):
            build_parameter_set(n_exc, n_inh, rng)

    def test_to_frame(self, classic):
        df = classic.to_frame()
        assert len(df) == 100
        assert set(df.columns) == {"polarity", "cell_type", "a", "b", "c", "d"}
        assert (df["cell_type"][:80] == "regular_spiking").all()
        assert (df["cell_type"][80:] == "fast_spiking").all()

    def test_summary(self, classic):
        s = classic.summary()
        assert "100 neurons" in s
        assert "excitatory" in s and "inhibitory" in s


class TestParameterSetValidation:
    def test_length_mismatch(self):
        with pytest.raises(InvalidConfigurationError):
            ParameterSet(n_excitatory=2, n_inhibitory=0,
                         a=[0.02], b=[0.2, 0.2], c=[-65.0, -65.0],
                         d=[8.0, 8.0], cell_types=["x", "x"])


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

class TestPresets:
    def test_preset_polarities(self):
        assert IZHIKEVICH_PRESETS["regular_spiking"].polarity == EXCITATORY
        assert IZHIKEVICH_PRESETS["chattering"].polarity == EXCITATORY
        assert IZHIKEVICH_PRESETS["fast_spiking"].polarity == INHIBITORY
        assert IZHIKEVICH_PRESETS["low_threshold_spiking"].polarity == INHIBITORY

    def test_to_dict(self):
        d = IZHIKEVICH_PRESETS["chattering"].to_dict()
        assert d["c"] == -50.0
        assert d["polarity"] == EXCITATORY

    def test_build_from_presets_orders_by_polarity(self, rng):
        p = build_parameter_set_from_presets(
            ["fast_spiking", "regular_spiking", "intrinsically_bursting"], rng)
        assert p.n_excitatory == 2
        assert p.n_inhibitory == 1
        assert list(p.cell_types) == [
            "regular_spiking", "intrinsically_bursting", "fast_spiking"]
        assert p.a[0] == 0.02 and p.b[1] == 0.2
        assert -65.0 <= p.c[1] < -50.0
        assert p.c[2] == -65.0 and p.d[2] == 2.0

    def test_unknown_preset(self, rng):
        with pytest.raises(InvalidConfigurationError, match="Unknown cell types"):
            build_parameter_set_from_presets(["pyramidal"], rng)

    def test_empty_preset_list(self, rng):
        with pytest.raises(InvalidConfigurationError):
            build_parameter_set_from_presets([], rng)
