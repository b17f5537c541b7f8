"""
===============================================================================
QUATERNION ALGEBRA - Demonstration CLI Tests
===============================================================================
Tests for config loading, the printed walkthrough, and the argparse entry
point.
===============================================================================
"""

import sys
import os
import io
import math
import subprocess
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest
import yaml

import main
from core.quaternion import Quaternion


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def config_file(tmp_path):
    """Write a small demo config and return its path."""
    path = tmp_path / "demo.yaml"
    path.write_text(yaml.safe_dump({
        'demo': {'name': 'unit test', 'q1': [0, 1, 0, 0], 'q2': [0, 0, 1, 0]},
        'logging': {'level': 'DEBUG'},
    }))
    return str(path)


def _demo_lines(q1, q2):
    out = io.StringIO()
    recovered = main.run_demo(q1, q2, out=out)
    return out.getvalue().splitlines(), recovered


# =============================================================================
# Test: Config loading
# =============================================================================

class TestLoadConfig:
    """Tests for YAML configuration loading."""

    def test_default_config(self):
        shipped = Path(__file__).resolve().parents[3] / "config" / "demo_config.yaml"
        assert main.DEFAULT_CONFIG_PATH == shipped
        assert main.DEFAULT_CONFIG_PATH.exists()

        config = main.load_config()
        assert config['demo']['q1'] == [1.0, 2.0, 3.0, 4.0]
        assert config['demo']['q2'] == [5.0, 6.0, 7.0, 8.0]
        assert config['logging']['level'] == 'INFO'

    def test_explicit_path(self, config_file):
        config = main.load_config(config_file)
        assert config['demo']['q1'] == [0.0, 1.0, 0.0, 0.0]
        assert config['logging']['level'] == 'DEBUG'

    def test_missing_default_falls_back(self, tmp_path, monkeypatch):
        monkeypatch.setattr(main, 'DEFAULT_CONFIG_PATH', tmp_path / 'absent.yaml')
        config = main.load_config()
        assert config == main.DEFAULT_CONFIG
        config['demo']['q1'][0] = 9.0
        assert main.DEFAULT_CONFIG['demo']['q1'][0] == 1.0

    def test_missing_explicit_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            main.load_config(str(tmp_path / 'absent.yaml'))

    def test_logging_level_defaulted(self, tmp_path):
        path = tmp_path / 'nolog.yaml'
        path.write_text("demo:\n  q1: [1, 0, 0, 0]\n  q2: [1, 0, 0, 0]\n")
        assert main.load_config(str(path))['logging']['level'] == 'INFO'

    @pytest.mark.parametrize("body", [
        "{}\n",
        "demo:\n  q2: [1, 0, 0, 0]\n",
        "demo:\n  q1: [1, 0, 0]\n  q2: [1, 0, 0, 0]\n",
        "demo:\n  q1: [1, 0, 0, a]\n  q2: [1, 0, 0, 0]\n",
        "demo:\n  q1: [1, 0, 0, 0]\n  q2: [1, 0, 0, 0]\nlogging:\n",
        "demo:\n  q1: [1, 0, 0, 0]\n  q2: [1, 0, 0, 0]\nlogging: [DEBUG]\n",
        "- 1\n- 2\n",
        "just a string\n",
    ])
    def test_invalid_config_raises(self, tmp_path, body):
        path = tmp_path / 'bad.yaml'
        path.write_text(body)
        with pytest.raises(ValueError):
            main.load_config(str(path))


# =============================================================================
# Test: Demo walkthrough
# =============================================================================

class TestRunDemo:
    """Tests for the printed walkthrough."""

    def test_sample_output(self):
        lines, recovered = _demo_lines(Quaternion(1, 2, 3, 4), Quaternion(5, 6, 7, 8))

        assert lines[0] == "Sum: Quaternion(w=6.0, x=8.0, y=10.0, z=12.0)"
        assert lines[1] == "Difference: Quaternion(w=-4.0, x=-4.0, y=-4.0, z=-4.0)"
        assert lines[2] == "Product: Quaternion(w=-60.0, x=12.0, y=30.0, z=24.0)"
        assert lines[3] == f"Norm of q1: {math.sqrt(30.0)!r}"
        assert lines[4] == "Conjugate of q1: Quaternion(w=1.0, x=-2.0, y=-3.0, z=-4.0)"
        assert lines[5].startswith("Inverse of q1: Quaternion(w=0.0333")
        assert lines[6] == "Are q1 and q2 equal? False"
        assert lines[7] == "Are q1 and q2 not equal? True"
        assert lines[8] == "Rotation Matrix:"
        assert lines[9:12] == [
            "-49.0 4.0 22.0",
            "20.0 -39.0 20.0",
            "10.0 28.0 -25.0",
        ]
        assert lines[12] == "Quaternion from Rotation Matrix: Quaternion(w=1.0, x=2.0, y=3.0, z=4.0)"
        assert recovered == Quaternion(1, 2, 3, 4)

    def test_equal_inputs(self):
        q = Quaternion(1, 0, 0, 0)
        lines, recovered = _demo_lines(q, q)
        assert "Are q1 and q2 equal? True" in lines
        assert "Are q1 and q2 not equal? False" in lines
        assert recovered == q

    def test_zero_q1_reports_inverse_error(self):
        lines, _ = _demo_lines(Quaternion(0, 0, 0, 0), Quaternion(1, 0, 0, 0))
        inverse_line = [line for line in lines if line.startswith("Inverse of q1")][0]
        assert "undefined" in inverse_line
        assert "zero norm" in inverse_line

    def test_defaults_to_stdout(self, capsys):
        main.run_demo(Quaternion(1, 0, 0, 0), Quaternion(0, 1, 0, 0))
        assert "Sum: Quaternion(w=1.0, x=1.0, y=0.0, z=0.0)" in capsys.readouterr().out


# =============================================================================
# Test: Command line entry point
# =============================================================================

class TestMain:
    """Tests for argument parsing and the main() entry point."""

    def test_default_run(self, capsys):
        assert main.main([]) == 0
        out = capsys.readouterr().out
        assert "Product: Quaternion(w=-60.0, x=12.0, y=30.0, z=24.0)" in out

    def test_config_file(self, config_file, capsys):
        assert main.main(['--config', config_file]) == 0
        out = capsys.readouterr().out
        # i * j = k
        assert "Product: Quaternion(w=0.0, x=0.0, y=0.0, z=1.0)" in out

    def test_quaternion_overrides(self, capsys):
        assert main.main(['--q1', '0', '0', '1', '0', '--q2', '0', '1', '0', '0']) == 0
        out = capsys.readouterr().out
        # j * i = -k
        assert "Product: Quaternion(w=0.0, x=0.0, y=0.0, z=-1.0)" in out

    def test_log_level_flag(self, capsys):
        assert main.main(['--log-level', 'WARNING']) == 0
        assert "Sum:" in capsys.readouterr().out

    def test_bad_arguments_exit(self):
        with pytest.raises(SystemExit):
            main.main(['--q1', '1', '2'])
        with pytest.raises(SystemExit):
            main.main(['--log-level', 'LOUD'])

    def test_script_logs_config_load(self, tmp_path):
        """Running the script directly logs the config path to stderr."""
        script = Path(main.__file__).resolve()
        result = subprocess.run(
            [sys.executable, str(script), '--log-level', 'DEBUG'],
            cwd=str(tmp_path), capture_output=True, text=True, timeout=60,
        )
        assert result.returncode == 0, result.stderr
        assert f"Loading configuration from: {main.DEFAULT_CONFIG_PATH}" in result.stderr
        assert "[INFO] QUATERNION_DEMO: Demo: Quaternion algebra walkthrough" in result.stderr
        assert "Product: Quaternion(w=-60.0, x=12.0, y=30.0, z=24.0)" in result.stdout
        assert "Loading configuration" not in result.stdout
