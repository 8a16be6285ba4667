import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import json

import simpy

from analyzer.trip_recorder import TripRecorder
from simulator.core.elevator_car import ElevatorCar
from simulator.infrastructure.message_broker import MessageBroker
from simulator.infrastructure.serial_link import SerialLink, MemoryPort
from simulator.infrastructure.serial_monitor import SerialMonitor


def run_trip(until=3.0, tokens=("M_UP",), connect=True):
    env = simpy.Environment()
    broker = MessageBroker(env, verbose=False)
    recorder = TripRecorder(env, broker.get_broadcast_pipe(), sensor_positions=[10.0, 50.0, 90.0])
    recorder.set_simulation_metadata({'speed_per_tick': 0.8})
    env.process(recorder.start_listening())

    link = SerialLink(monitor=SerialMonitor(echo=False))
    if connect:
        link.connect(MemoryPort())
    ElevatorCar(env, "Car_R", broker, link)
    for token in tokens:
        link.submit(token)

    env.run(until=until)
    return recorder


def test_summary_counts_floors_crashes_and_commands():
    recorder = run_trip(tokens=("M_UP", "WARP"))

    summary = recorder.get_summary()

    assert summary["sensor_events"] == 4
    assert summary["sensor_events_by_floor"] == {1: 2, 2: 1, 3: 1}
    assert summary["transmitted"] == "1231"
    assert summary["dropped_events"] == 0
    assert summary["crashes"] == 1
    assert summary["crashes_by_reason"] == {"ROOF COLLISION": 1}
    assert summary["commands_accepted"] == 1
    assert summary["commands_rejected"] == 1
    assert summary["ticks"] > 150


def test_disconnected_trip_counts_dropped_events():
    recorder = run_trip(until=1.0, connect=False)

    summary = recorder.get_summary()

    assert summary["transmitted"] == ""
    assert summary["dropped_events"] == 2


def test_trajectory_skips_standing_still():
    recorder = run_trip(until=1.0, tokens=())

    assert len(recorder.trajectory) == 1
    assert recorder.trajectory[0][1] == 10.0


def test_event_log_written_as_json_lines(tmp_path):
    recorder = run_trip()

    path = recorder.save_event_log(tmp_path / "logs" / "trip.jsonl")

    lines = [json.loads(line) for line in path.read_text().splitlines()]
    assert lines[0]["type"] == "metadata"
    assert lines[0]["data"]["config"] == {'speed_per_tick': 0.8}
    types = {line["type"] for line in lines[1:]}
    assert {"car_status", "sensor", "crash", "command"} <= types


def test_plot_trajectory_saves_figure(tmp_path):
    recorder = run_trip()
    path = tmp_path / "trajectory.png"

    recorder.plot_trajectory(save_path=path, show=False)

    assert path.exists()
    assert path.stat().st_size > 0
