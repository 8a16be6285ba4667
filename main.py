import sys
import threading

import simpy

# Configuration
from config import SimulationConfig, load_simulation_config

# Simulator components
from simulator.core.car_state import SensorLayout
from simulator.core.command_router import CommandRouter
from simulator.core.elevator_car import ElevatorCar
from simulator.physics.physics_engine import PhysicsEngine
from simulator.infrastructure.message_broker import MessageBroker
from simulator.infrastructure.realtime_env import RealtimeEnvironment
from simulator.infrastructure.serial_link import SerialLink, MemoryPort
from simulator.infrastructure.serial_monitor import SerialMonitor
from simulator.infrastructure.serial_port import connect_serial

# Analyzer
from analyzer.trip_recorder import TripRecorder

# (time in seconds, token) pairs sent by the scripted controller
DEMO_SCRIPT = [
    (0.5, "M_UP"),      # passes floors 2 and 3, then hits the roof
    (3.0, "M_UP"),
    (3.9, "M_STOP"),    # parks near floor 2
    (4.5, "m_down "),   # tokens are case-insensitive
    (4.6, "OPEN_DOOR"), # not part of the protocol, ignored
    (6.5, "RESET"),
]

# Recorder entries kept while serving, where the run has no end time
SERVE_HISTORY_LIMIT = 10000


def build_simulation(sim_config: SimulationConfig, env=None, echo=True, history_limit=None):
    """
    Wire broker, serial link, car and recorder together.

    With serial.connect_on_start the configured port is opened with pySerial
    and read on a background thread.

    Returns:
        (env, broker, link, car, recorder)
    """
    if env is None:
        if sim_config.realtime_factor > 0:
            env = RealtimeEnvironment(speed_factor=sim_config.realtime_factor)
        else:
            env = simpy.Environment()

    broker = MessageBroker(env, verbose=echo)

    recorder = TripRecorder(env, broker.get_broadcast_pipe(),
                            sensor_positions=sim_config.shaft.sensor_positions,
                            history_limit=history_limit)
    recorder.set_simulation_metadata(sim_config.to_dict()['simulation'])
    env.process(recorder.start_listening())

    layout = SensorLayout.from_config(sim_config.shaft)
    engine = PhysicsEngine(layout, auto_recover=sim_config.crash.auto_recover)
    router = CommandRouter(layout)

    monitor = SerialMonitor(echo=echo)
    link = SerialLink(monitor=monitor, line_terminator=sim_config.serial.line_terminator)
    if sim_config.serial.connect_on_start:
        connect_serial(link, sim_config.serial.port, sim_config.serial.baud_rate,
                       timeout=sim_config.serial.read_timeout)

    car = ElevatorCar(
        env, "Car_1", broker, link,
        layout=layout,
        engine=engine,
        router=router,
        speed_per_tick=sim_config.motion.speed_per_tick,
        tick_interval=sim_config.motion.tick_interval,
        hold_ticks=sim_config.crash.hold_ticks
    )

    return env, broker, link, car, recorder


def controller_script(env, link, script):
    """Scripted external controller writing command lines to the link"""
    for at, token in sorted(script, key=lambda item: item[0]):
        if at > env.now:
            yield env.timeout(at - env.now)
        print(f"{env.now:.2f} [Controller] Sending '{token.strip()}'")
        link.feed(token + link.line_terminator)


def run_simulation(config_path=None, script=None, log_path="simulation_log.jsonl", plot=False):
    """
    Set up and run the entire simulation

    Args:
        config_path: Path to simulation configuration YAML file (defaults if None)
        script: List of (time, token) controller commands (DEMO_SCRIPT if None)
        log_path: JSON Lines output path (None to skip)
        plot: Show the trajectory plot at the end
    """
    print("--- Loading Configuration ---")
    if config_path:
        sim_config = load_simulation_config(config_path)
        print(f"Simulation Config: {config_path}")
    else:
        sim_config = SimulationConfig()
        print("Simulation Config: defaults")

    print("\n--- Simulation Setup ---")
    env, broker, link, car, recorder = build_simulation(sim_config)
    if not link.connected:
        link.connect(MemoryPort("LOOPBACK"))

    env.process(controller_script(env, link, DEMO_SCRIPT if script is None else script))

    print("\n--- Simulation Start ---")
    env.run(until=sim_config.duration)
    print("--- Simulation End ---")

    recorder.print_summary()
    if isinstance(link.port, MemoryPort):
        print(f"Wire output: '{link.port.read_all()}'")

    if log_path:
        recorder.save_event_log(log_path)
    if plot:
        recorder.plot_trajectory()

    return car, recorder


def serve(config_path=None, host='localhost', port=5000):
    """Run the car in real time on a background thread and serve the render API"""
    from visualizer.http_server import run_server

    sim_config = load_simulation_config(config_path) if config_path else SimulationConfig()
    if sim_config.realtime_factor == 0:
        sim_config.realtime_factor = 1.0

    # Without a configured port the car runs disconnected and drops its events
    env, broker, link, car, recorder = build_simulation(sim_config, echo=False,
                                                        history_limit=SERVE_HISTORY_LIMIT)

    # The simulation thread is the only writer of the car state
    sim_thread = threading.Thread(target=env.run, daemon=True)
    sim_thread.start()

    run_server(car, host=host, port=port)


def main(argv=None):
    """Usage: main.py [config.yaml] [--serve] [--plot]"""
    argv = sys.argv[1:] if argv is None else argv
    args = [a for a in argv if not a.startswith('--')]
    config_path = args[0] if args else None
    if '--serve' in argv:
        serve(config_path)
    else:
        run_simulation(config_path=config_path, plot='--plot' in argv)


if __name__ == '__main__':
    main()
