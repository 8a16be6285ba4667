"""
Configuration management package

Provides configuration classes for the virtual elevator simulation.
"""

from .simulation import (
    SimulationConfig,
    ShaftConfig,
    MotionConfig,
    SerialConfig,
    CrashConfig,
    SHAFT_BOTTOM,
    SHAFT_TOP,
    MAX_SENSORS
)

from .config_loader import (
    ConfigLoader,
    load_simulation_config,
    save_simulation_config
)

__all__ = [
    # Simulation
    'SimulationConfig',
    'ShaftConfig',
    'MotionConfig',
    'SerialConfig',
    'CrashConfig',
    'SHAFT_BOTTOM',
    'SHAFT_TOP',
    'MAX_SENSORS',

    # Loader
    'ConfigLoader',
    'load_simulation_config',
    'save_simulation_config',
]
