import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import pytest
import yaml

from config import (
    SimulationConfig, ShaftConfig, MotionConfig, SerialConfig, CrashConfig,
    load_simulation_config, save_simulation_config
)


def test_defaults_match_reference_layout():
    config = SimulationConfig()

    assert config.shaft.sensor_positions == [10.0, 50.0, 90.0]
    assert config.shaft.sensor_tolerance == 5.0
    assert config.motion.speed_per_tick == 0.8
    assert config.motion.tick_interval == 0.016
    assert config.serial.baud_rate == 9600
    assert config.crash.auto_recover is True
    config.validate()


def test_from_dict_fills_missing_sections():
    config = SimulationConfig.from_dict({'simulation': {'motion': {'speed_per_tick': 1.5}}})

    assert config.motion.speed_per_tick == 1.5
    assert config.motion.tick_interval == 0.016
    assert config.shaft.sensor_positions == [10.0, 50.0, 90.0]


@pytest.mark.parametrize("factory", [
    lambda: ShaftConfig(sensor_positions=[]),
    lambda: ShaftConfig(sensor_positions=[50.0, 10.0]),
    lambda: ShaftConfig(sensor_positions=[10.0, 120.0]),
    lambda: ShaftConfig(sensor_positions=[float(i) for i in range(10, 110, 10)]),
    lambda: ShaftConfig(sensor_tolerance=0.0),
    lambda: MotionConfig(speed_per_tick=0.0),
    lambda: MotionConfig(tick_interval=-0.016),
    lambda: SerialConfig(baud_rate=0),
    lambda: CrashConfig(hold_ticks=-1),
    lambda: SimulationConfig(duration=0.0),
])
def test_invalid_values_rejected(factory):
    with pytest.raises(ValueError):
        factory()


def test_validate_cross_checks():
    with pytest.raises(ValueError):
        SimulationConfig(serial=SerialConfig(connect_on_start=True)).validate()

    with pytest.raises(ValueError):
        SimulationConfig(crash=CrashConfig(auto_recover=True, hold_ticks=5)).validate()

    SimulationConfig(crash=CrashConfig(auto_recover=False, hold_ticks=5)).validate()


def test_save_and_load_yaml(tmp_path):
    config = SimulationConfig(
        shaft=ShaftConfig(sensor_positions=[20.0, 80.0], sensor_tolerance=3.0),
        crash=CrashConfig(auto_recover=False, hold_ticks=30),
        duration=4.0
    )
    path = tmp_path / "scenarios" / "custom.yaml"

    save_simulation_config(config, path)
    loaded = load_simulation_config(path)

    assert loaded == config
    assert yaml.safe_load(path.read_text())['simulation']['crash']['hold_ticks'] == 30


def test_load_bundled_scenarios():
    scenarios = project_root / "scenarios"

    default = load_simulation_config(scenarios / "default.yaml")
    hold = load_simulation_config(scenarios / "crash_hold.yaml")

    assert default == SimulationConfig()
    assert hold.crash.auto_recover is False
    assert hold.crash.hold_ticks == 60


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_simulation_config(tmp_path / "nope.yaml")
