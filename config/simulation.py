"""
Simulation Configuration

Physical layout of the shaft, motion parameters, serial link settings and
crash handling policy for the virtual elevator.
"""

from dataclasses import dataclass, field
from typing import List, Optional


SHAFT_BOTTOM = 0.0
SHAFT_TOP = 100.0
MAX_SENSORS = 9  # one ASCII digit per sensor on the wire


@dataclass
class ShaftConfig:
    """Shaft and floor sensor layout (0-100 scale)"""
    sensor_positions: List[float] = field(default_factory=lambda: [10.0, 50.0, 90.0])
    sensor_tolerance: float = 5.0

    def __post_init__(self):
        if not self.sensor_positions:
            raise ValueError("sensor_positions must contain at least one sensor")
        if len(self.sensor_positions) > MAX_SENSORS:
            raise ValueError(f"at most {MAX_SENSORS} sensors are supported")
        for pos in self.sensor_positions:
            if not (SHAFT_BOTTOM <= pos <= SHAFT_TOP):
                raise ValueError(f"sensor position {pos} must be between {SHAFT_BOTTOM} and {SHAFT_TOP}")
        if any(b <= a for a, b in zip(self.sensor_positions, self.sensor_positions[1:])):
            raise ValueError("sensor_positions must be strictly ascending")
        if self.sensor_tolerance <= 0:
            raise ValueError("sensor_tolerance must be positive")


@dataclass
class MotionConfig:
    """Constant-velocity motion"""
    speed_per_tick: float = 0.8  # shaft percent per tick
    tick_interval: float = 0.016  # seconds (~60 Hz)

    def __post_init__(self):
        if self.speed_per_tick <= 0:
            raise ValueError("speed_per_tick must be positive")
        if self.tick_interval <= 0:
            raise ValueError("tick_interval must be positive")


@dataclass
class SerialConfig:
    """Serial link settings"""
    port: Optional[str] = None
    baud_rate: int = 9600
    connect_on_start: bool = False
    line_terminator: str = "\n"
    read_timeout: float = 0.1  # seconds per blocking read

    def __post_init__(self):
        if self.baud_rate <= 0:
            raise ValueError("baud_rate must be positive")
        if self.read_timeout <= 0:
            raise ValueError("read_timeout must be positive")
        if not self.line_terminator:
            raise ValueError("line_terminator cannot be empty")


@dataclass
class CrashConfig:
    """Crash handling policy"""
    auto_recover: bool = True
    hold_ticks: int = 0  # ticks to stay crashed when auto_recover is off

    def __post_init__(self):
        if self.hold_ticks < 0:
            raise ValueError("hold_ticks cannot be negative")


@dataclass
class SimulationConfig:
    """
    Complete simulation configuration

    Combines shaft, motion, serial and crash settings.
    """
    shaft: ShaftConfig = field(default_factory=ShaftConfig)
    motion: MotionConfig = field(default_factory=MotionConfig)
    serial: SerialConfig = field(default_factory=SerialConfig)
    crash: CrashConfig = field(default_factory=CrashConfig)

    # Simulation control
    duration: float = 10.0  # seconds
    realtime_factor: float = 0.0  # 1.0 = realtime, 0.0 = as fast as possible

    def __post_init__(self):
        if self.duration <= 0:
            raise ValueError("duration must be positive")
        if self.realtime_factor < 0:
            raise ValueError("realtime_factor cannot be negative")

    @classmethod
    def from_dict(cls, data: dict) -> 'SimulationConfig':
        """Create SimulationConfig from dictionary"""
        data = data or {}
        sim_data = data.get('simulation', data)

        shaft_data = sim_data.get('shaft', {})
        shaft = ShaftConfig(
            sensor_positions=[float(p) for p in shaft_data.get('sensor_positions', [10.0, 50.0, 90.0])],
            sensor_tolerance=shaft_data.get('sensor_tolerance', 5.0)
        )

        motion_data = sim_data.get('motion', {})
        motion = MotionConfig(
            speed_per_tick=motion_data.get('speed_per_tick', 0.8),
            tick_interval=motion_data.get('tick_interval', 0.016)
        )

        serial_data = sim_data.get('serial', {})
        serial = SerialConfig(
            port=serial_data.get('port'),
            baud_rate=serial_data.get('baud_rate', 9600),
            connect_on_start=serial_data.get('connect_on_start', False),
            line_terminator=serial_data.get('line_terminator', "\n"),
            read_timeout=serial_data.get('read_timeout', 0.1)
        )

        crash_data = sim_data.get('crash', {})
        crash = CrashConfig(
            auto_recover=crash_data.get('auto_recover', True),
            hold_ticks=crash_data.get('hold_ticks', 0)
        )

        return cls(
            shaft=shaft,
            motion=motion,
            serial=serial,
            crash=crash,
            duration=sim_data.get('duration', 10.0),
            realtime_factor=sim_data.get('realtime_factor', 0.0)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            'simulation': {
                'shaft': {
                    'sensor_positions': list(self.shaft.sensor_positions),
                    'sensor_tolerance': self.shaft.sensor_tolerance
                },
                'motion': {
                    'speed_per_tick': self.motion.speed_per_tick,
                    'tick_interval': self.motion.tick_interval
                },
                'serial': {
                    'port': self.serial.port,
                    'baud_rate': self.serial.baud_rate,
                    'connect_on_start': self.serial.connect_on_start,
                    'line_terminator': self.serial.line_terminator,
                    'read_timeout': self.serial.read_timeout
                },
                'crash': {
                    'auto_recover': self.crash.auto_recover,
                    'hold_ticks': self.crash.hold_ticks
                },
                'duration': self.duration,
                'realtime_factor': self.realtime_factor
            }
        }

    def validate(self):
        """Validate configuration consistency"""
        if self.serial.connect_on_start and not self.serial.port:
            raise ValueError("serial.connect_on_start requires serial.port")

        if self.crash.auto_recover and self.crash.hold_ticks:
            raise ValueError("crash.hold_ticks only applies when crash.auto_recover is false")

        if self.motion.speed_per_tick >= SHAFT_TOP - SHAFT_BOTTOM:
            raise ValueError(f"speed_per_tick ({self.motion.speed_per_tick}) must be smaller than the shaft height")
