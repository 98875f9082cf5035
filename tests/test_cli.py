"""Tests for the izhinet command-line entry point."""

import pandas as pd
import pytest

from izhinet.cli import build_parser, main, resolve_config
from izhinet.utils import set_log_level


@pytest.fixture(autouse=True)
def restore_log_level():
    yield
    set_log_level("INFO")


class TestParser:
    def test_defaults_come_from_config(self):
        args = build_parser().parse_args([])
        config = resolve_config(args)
        assert (config.n_excitatory, config.n_inhibitory, config.duration_ms) == (800, 200, 1000)
        assert config.output == "spikes.png"

    def test_short_flags(self):
        args = build_parser().parse_args(["-e", "10", "-i", "3", "-m", "50"])
        config = resolve_config(args)
        assert (config.n_excitatory, config.n_inhibitory, config.duration_ms) == (10, 3, 50)

    def test_command_line_beats_config_file(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text("n_excitatory: 40\nduration_ms: 300\n")
        args = build_parser().parse_args(["--config", str(path), "-m", "20"])
        config = resolve_config(args)
        assert config.n_excitatory == 40
        assert config.duration_ms == 20


class TestMain:
    def test_run_writes_outputs(self, tmp_path):
        raster = tmp_path / "raster.png"
        csv = tmp_path / "spikes.csv"
        status = main(["-e", "40", "-i", "10", "-m", "100", "--seed", "3",
                       "-o", str(raster), "--spikes-csv", str(csv)])
        assert status == 0
        assert raster.exists()
        spikes = pd.read_csv(csv)
        assert list(spikes.columns) == ["time_ms", "neuron", "polarity"]
        assert spikes["time_ms"].is_monotonic_increasing

    def test_invalid_configuration_exit_code(self, tmp_path, capsys):
        status = main(["-m", "0", "-o", str(tmp_path / "x.png")])
        assert status == 2
        assert "Invalid configuration" in capsys.readouterr().out
        assert not (tmp_path / "x.png").exists()

    @pytest.mark.parametrize("text", [
        "n_excitatory: abc\n",
        "noise_excitatory: loud\n",
        "seed: abc\n",
        "n_excitatory: [1\n",
    ])
    def test_malformed_config_file_exit_code(self, tmp_path, capsys, text):
        path = tmp_path / "run.yaml"
        path.write_text(text)
        status = main(["--config", str(path), "-o", str(tmp_path / "x.png")])
        assert status == 2
        assert "Invalid configuration" in capsys.readouterr().out
        assert not (tmp_path / "x.png").exists()

    def test_missing_config_file_exit_code(self, tmp_path, capsys):
        status = main(["--config", str(tmp_path / "absent.yaml"),
                       "-o", str(tmp_path / "x.png")])
        assert status == 2
        assert "cannot read configuration" in capsys.readouterr().out

    def test_quiet(self, tmp_path, capsys):
        status = main(["-q", "-e", "5", "-i", "1", "-m", "10", "--seed", "1",
                       "-o", str(tmp_path / "q.png")])
        assert status == 0
        assert "INFO" not in capsys.readouterr().out
