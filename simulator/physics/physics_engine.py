from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from ..core.car_state import CarState, Direction, SensorLayout, DEFAULT_LAYOUT, CarSnapshot

ROOF_COLLISION = "ROOF COLLISION"
FLOOR_COLLISION = "FLOOR COLLISION"


@dataclass(frozen=True)
class SensorEvent:
    """A floor sensor fired (0-based index)"""
    index: int


class TickStatus(Enum):
    OK = "OK"
    CRASHED = "CRASHED"


@dataclass(frozen=True)
class TickResult:
    """
    Outcome of one physics tick.

    CRASHED results carry the collision reason and never carry a sensor event.
    """
    status: TickStatus = TickStatus.OK
    event: Optional[SensorEvent] = None
    reason: Optional[str] = None

    @property
    def crashed(self) -> bool:
        return self.status is TickStatus.CRASHED


IDLE_TICK = TickResult()

CrashListener = Callable[[str, CarSnapshot], None]


class PhysicsEngine:
    """
    Fixed-tick, constant-velocity integrator for the single car.

    The engine owns no state of its own besides the constant sensor layout
    and the shaft limits; the CarState is passed in on every call. No I/O
    happens here: crash reasons are handed to registered listeners and
    returned in the TickResult.
    """
    def __init__(self, layout: SensorLayout = DEFAULT_LAYOUT, auto_recover: bool = True,
                 bottom_limit: float = 0.0, top_limit: float = 100.0):
        if bottom_limit >= top_limit:
            raise ValueError("bottom_limit must be below top_limit")
        self.layout = layout
        self.auto_recover = auto_recover
        self.bottom_limit = bottom_limit
        self.top_limit = top_limit
        self._crash_listeners: List[CrashListener] = []

    def add_crash_listener(self, listener: CrashListener):
        """Register a callback invoked with (reason, snapshot) while the car is crashed"""
        self._crash_listeners.append(listener)

    def tick(self, state: CarState, speed_per_tick: float) -> TickResult:
        """
        Advance the car by one tick.

        Args:
            state: CarState to mutate
            speed_per_tick: distance travelled this tick (shaft percent)

        Returns:
            TickResult with at most one SensorEvent, or a CRASHED result
        """
        if state.crashed:
            return IDLE_TICK

        if state.direction is Direction.UP:
            state.position += speed_per_tick
        elif state.direction is Direction.DOWN:
            state.position -= speed_per_tick

        # Limits are checked before clamping
        reason = self._collision_reason(state)
        if reason is not None:
            self.crash(state, reason)
            self._clamp(state)
            return TickResult(status=TickStatus.CRASHED, reason=reason)

        self._clamp(state)

        return TickResult(event=self._scan_sensors(state))

    def _clamp(self, state: CarState):
        state.position = max(self.bottom_limit, min(self.top_limit, state.position))

    def _collision_reason(self, state: CarState) -> Optional[str]:
        if state.direction is Direction.UP and state.position >= self.top_limit:
            return ROOF_COLLISION
        if state.direction is Direction.DOWN and state.position <= self.bottom_limit:
            return FLOOR_COLLISION
        return None

    def _scan_sensors(self, state: CarState) -> Optional[SensorEvent]:
        touched = self.layout.touched(state.position)
        if touched.size == 0:
            # Left every zone: the next visit fires again
            state.last_triggered_sensor = None
            return None

        for index in touched:
            index = int(index)
            if index != state.last_triggered_sensor:
                state.last_triggered_sensor = index
                return SensorEvent(index)
        return None

    def crash(self, state: CarState, reason: str):
        """
        Put the car into the crashed state and notify listeners.

        With auto_recover the car is recovered before this returns, so the
        crashed flag is only visible to the listeners.
        """
        state.crashed = True
        state.direction = Direction.STOPPED

        snapshot = state.snapshot()
        for listener in self._crash_listeners:
            listener(reason, snapshot)

        if self.auto_recover:
            self.recover(state)

    def recover(self, state: CarState):
        """Clear the crash and park the car at the safe floor"""
        state.crashed = False
        state.direction = Direction.STOPPED
        state.position = self.layout.home_position
        state.last_triggered_sensor = None
