import json
import logging

import pytest

import main


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def write_config(tmp_path, **overrides):
    config = {
        "simulation_parameters": {"seed": 4, "particle_count": 20, "tick_interval": 0.001},
        "run_control": {"max_steps": 3, "log_throttle_steps": 1},
        "visualization": {"window_width": 120, "window_height": 120, "fps": 0},
        "logging": {"level": "DEBUG", "log_file": str(tmp_path / "logs" / "run.log")},
    }
    for section, values in overrides.items():
        config[section].update(values)
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config))
    return path


def test_main_runs_until_max_steps(tmp_path, monkeypatch, restore_root_logger):
    path = write_config(tmp_path)
    monkeypatch.setattr("sys.argv", ["particle-field", str(path)])
    main.main()

    log = (tmp_path / "logs" / "run.log").read_text()
    assert "Reached max_steps (3)" in log
    assert "Simulation step 3" in log
    assert "Shutting Down" in log


def test_main_reports_profile(tmp_path, monkeypatch, restore_root_logger):
    path = write_config(tmp_path, run_control={"max_steps": 1, "profile": True})
    monkeypatch.setattr("sys.argv", ["particle-field", str(path)])
    main.main()

    assert "Performance Profile" in (tmp_path / "logs" / "run.log").read_text()


def test_main_stops_on_invalid_config(tmp_path, monkeypatch, restore_root_logger):
    path = write_config(tmp_path, simulation_parameters={"particle_count": 0})
    monkeypatch.setattr("sys.argv", ["particle-field", str(path)])
    with pytest.raises(SystemExit) as excinfo:
        main.main()
    assert excinfo.value.code == 1

    log = (tmp_path / "logs" / "run.log").read_text()
    assert "Configuration error" in log
    assert "Simulation loop finished" not in log


def test_main_missing_config(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["particle-field", str(tmp_path / "nope.json")])
    with pytest.raises(SystemExit) as excinfo:
        main.main()
    assert excinfo.value.code == 1
    assert "FATAL" in capsys.readouterr().out


def test_main_rejects_zero_log_throttle(tmp_path, monkeypatch, restore_root_logger):
    path = write_config(tmp_path, run_control={"max_steps": 2, "log_throttle_steps": 0})
    monkeypatch.setattr("sys.argv", ["particle-field", str(path)])
    with pytest.raises(SystemExit) as excinfo:
        main.main()
    assert excinfo.value.code == 1
    log = (tmp_path / "logs" / "run.log").read_text()
    assert "log_throttle_steps must be an integer >= 1" in log
    assert "Simulation step" not in log


def test_main_exits_when_the_window_cannot_open(tmp_path, monkeypatch, restore_root_logger):
    import pygame
    import visualization

    def fail(*args, **kwargs):
        raise pygame.error("no display")

    monkeypatch.setattr(visualization.Visualizer, "__init__", fail)
    path = write_config(tmp_path)
    monkeypatch.setattr("sys.argv", ["particle-field", str(path)])
    with pytest.raises(SystemExit) as excinfo:
        main.main()
    assert excinfo.value.code == 1
    assert "Could not create the display window" in (tmp_path / "logs" / "run.log").read_text()
