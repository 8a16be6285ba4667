import simpy

from .entity import Entity
from .car_state import CarState, CarSnapshot, Direction, SensorLayout, DEFAULT_LAYOUT
from .command_router import Command, CommandRouter, UnknownCommandError, parse_command
from ..physics.physics_engine import PhysicsEngine, TickResult, IDLE_TICK
from ..infrastructure.message_broker import MessageBroker
from ..infrastructure.serial_link import SerialLink
from ..protocol.codec import encode_sensor_index


class ElevatorCar(Entity):
    """
    Fixed-tick runtime for the single car.

    Every tick_interval the car drains the commands queued by the serial
    link, advances the physics by one tick, writes a sensor character if one
    fired and publishes its status. Everything happens on the SimPy
    timeline, so commands and physics never interleave.

    Crash handling:
        - engine.auto_recover: the engine recovers inside the crash tick
        - otherwise, hold_ticks > 0: the car stays crashed that many ticks,
          then recovers on its own
        - otherwise: the car stays crashed until RESET
    """

    STATUS_TOPIC = "car/status"
    SENSOR_TOPIC = "car/sensor"
    CRASH_TOPIC = "car/crash"
    COMMAND_TOPIC = "car/command"
    RX_TOPIC = "serial/rx"
    TX_TOPIC = "serial/tx"

    def __init__(self, env: simpy.Environment, name: str, broker: MessageBroker, link: SerialLink,
                 layout: SensorLayout = DEFAULT_LAYOUT, engine: PhysicsEngine = None,
                 router: CommandRouter = None, speed_per_tick: float = 0.8,
                 tick_interval: float = 0.016, hold_ticks: int = 0, car_state: CarState = None):
        self.broker = broker
        self.link = link
        self.layout = layout
        self.engine = engine if engine is not None else PhysicsEngine(layout)
        self.router = router if router is not None else CommandRouter(layout)
        self.speed_per_tick = speed_per_tick
        self.tick_interval = tick_interval
        self.hold_ticks = hold_ticks

        self.car = car_state if car_state is not None else CarState.initial(layout)
        self.latest_snapshot: CarSnapshot = self.car.snapshot()
        self.tick_count = 0
        self.crash_count = 0
        self._hold_remaining = 0

        self.engine.add_crash_listener(self._on_crash)

        super().__init__(env, name)
        self.set_state(self._derive_state())

    @property
    def monitor(self):
        return self.link.monitor

    def run(self):
        while True:
            yield self.env.timeout(self.tick_interval)
            self.advance()

    def advance(self) -> TickResult:
        """Run one tick: inbound commands, physics, outbound event, status"""
        self._process_inbound()

        result = self._tick_physics()
        self.tick_count += 1

        if result.event is not None:
            self._emit_sensor_event(result.event.index)

        self.latest_snapshot = self.car.snapshot()
        self.set_state(self._derive_state())
        self.broker.put(self.STATUS_TOPIC, {
            "timestamp": self.env.now,
            "tick": self.tick_count,
            **self.latest_snapshot.to_dict()
        })
        return result

    def snapshot(self) -> CarSnapshot:
        """Snapshot taken at the end of the last tick"""
        return self.latest_snapshot

    # --- Inbound ---

    def _process_inbound(self):
        if self.link.resync_requested.is_set():
            self.link.resync_requested.clear()
            self.router.resync(self.car)

        for token in self.link.drain():
            self.handle_token(token)

    def handle_token(self, token: str) -> bool:
        """
        Apply one inbound token on the simulation timeline.

        Returns:
            True if the command changed the car, False if rejected or locked out
        """
        self.broker.put(self.RX_TOPIC, token)
        self.monitor.log(f"RX: {token}")

        try:
            command = parse_command(token)
        except UnknownCommandError:
            print(f"{self.env.now:.2f} [{self.name}] Ignoring unrecognized command '{token}'")
            self._report_command(token, accepted=False, reason="unrecognized")
            return False

        if not self.router.apply(self.car, command):
            print(f"{self.env.now:.2f} [{self.name}] Control locked out (crashed), ignoring {command.value}")
            self._report_command(token, accepted=False, reason="locked_out")
            return False

        if command is Command.RESET:
            self._hold_remaining = 0
            self.monitor.log("System Reset.")
        self._report_command(token, accepted=True)
        return True

    def _report_command(self, token: str, accepted: bool, reason: str = None):
        self.broker.put(self.COMMAND_TOPIC, {
            "timestamp": self.env.now,
            "token": token,
            "accepted": accepted,
            "reason": reason
        })

    # --- Physics ---

    def _tick_physics(self) -> TickResult:
        if self.car.crashed:
            if self._hold_remaining > 0:
                self._hold_remaining -= 1
                if self._hold_remaining == 0:
                    self.engine.recover(self.car)
                    self.monitor.log("Crash hold elapsed. System recovered.")
            return IDLE_TICK

        result = self.engine.tick(self.car, self.speed_per_tick)
        if result.crashed and self.car.crashed:
            # Engine left recovery to us
            self._hold_remaining = self.hold_ticks
        return result

    def _on_crash(self, reason: str, snapshot: CarSnapshot):
        self.crash_count += 1
        self.monitor.log(f"CRITICAL: {reason}!")
        if self.engine.auto_recover:
            self.monitor.log("Resetting System...")
        print(f"{self.env.now:.2f} [{self.name}] Crash: {reason}")
        self.broker.put(self.CRASH_TOPIC, {
            "timestamp": self.env.now,
            "reason": reason,
            "position": snapshot.position,
            "auto_recover": self.engine.auto_recover
        })

    # --- Outbound ---

    def _emit_sensor_event(self, index: int):
        written = self.link.write_event(index)
        self.broker.put(self.SENSOR_TOPIC, {
            "timestamp": self.env.now,
            "sensor": index,
            "floor": index + 1,
            "position": self.car.position,
            "transmitted": written
        })
        if written:
            self.broker.put(self.TX_TOPIC, encode_sensor_index(index))

    def _derive_state(self) -> str:
        if self.car.crashed:
            return "CRASHED"
        if self.car.direction is Direction.UP:
            return "MOVING_UP"
        if self.car.direction is Direction.DOWN:
            return "MOVING_DOWN"
        return "IDLE"
