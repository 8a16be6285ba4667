from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import numpy as np


class Direction(Enum):
    """Commanded motion of the car"""
    UP = "UP"
    DOWN = "DOWN"
    STOPPED = "STOPPED"


@dataclass(frozen=True)
class SensorLayout:
    """
    Constant table of floor sensors on the 0-100 shaft scale.

    Each sensor triggers inside [position - tolerance, position + tolerance].
    Zones are allowed to overlap; the lowest index wins.
    """
    positions: Tuple[float, ...] = (10.0, 50.0, 90.0)
    tolerance: float = 5.0
    _array: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.positions:
            raise ValueError("SensorLayout needs at least one sensor")
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")
        object.__setattr__(self, 'positions', tuple(float(p) for p in self.positions))
        array = np.asarray(self.positions, dtype=float)
        array.setflags(write=False)
        object.__setattr__(self, '_array', array)

    @classmethod
    def from_config(cls, shaft_config) -> 'SensorLayout':
        """Build the layout from a ShaftConfig"""
        return cls(positions=tuple(shaft_config.sensor_positions), tolerance=shaft_config.sensor_tolerance)

    @property
    def home_position(self) -> float:
        """Safe floor position (first sensor)"""
        return self.positions[0]

    def __len__(self):
        return len(self.positions)

    def touched(self, position: float) -> np.ndarray:
        """Indices of the zones containing position, ascending"""
        return np.flatnonzero(np.abs(position - self._array) < self.tolerance)


DEFAULT_LAYOUT = SensorLayout()


@dataclass
class CarState:
    """
    Mutable state of the single simulated car.

    Only CommandRouter and PhysicsEngine write these fields; everything else
    reads a CarSnapshot.
    """
    position: float = DEFAULT_LAYOUT.home_position
    direction: Direction = Direction.STOPPED
    crashed: bool = False
    last_triggered_sensor: Optional[int] = None

    @classmethod
    def initial(cls, layout: SensorLayout = DEFAULT_LAYOUT) -> 'CarState':
        """Car parked at floor 1 with no latched sensor"""
        return cls(position=layout.home_position)

    def reinitialize(self, layout: SensorLayout = DEFAULT_LAYOUT):
        """Reset every field in place to the startup values"""
        self.position = layout.home_position
        self.direction = Direction.STOPPED
        self.crashed = False
        self.last_triggered_sensor = None

    def snapshot(self) -> 'CarSnapshot':
        return CarSnapshot(
            position=self.position,
            direction=self.direction,
            crashed=self.crashed,
            last_triggered_sensor=self.last_triggered_sensor
        )


@dataclass(frozen=True)
class CarSnapshot:
    """Immutable copy of CarState for rendering"""
    position: float
    direction: Direction
    crashed: bool
    last_triggered_sensor: Optional[int]

    def to_dict(self, layout: Optional[SensorLayout] = None) -> dict:
        data = {
            "position": self.position,
            "direction": self.direction.value,
            "crashed": self.crashed,
            "last_triggered_sensor": self.last_triggered_sensor
        }
        if layout is not None:
            data["sensor_positions"] = list(layout.positions)
            data["sensor_tolerance"] = layout.tolerance
        return data
