import json
from collections import Counter, deque
from datetime import datetime
from pathlib import Path

import matplotlib
import matplotlib.pyplot as plt


class TripRecorder:
    """
    Receives all broker traffic and records what the car did as an
    independent "recorder".

    Keeps the position trajectory, sensor events, crashes and command
    outcomes, and collects every event in JSON Lines format for offline
    playback.

    history_limit keeps only the most recent entries of each history, for
    runs without an end time. None keeps everything.
    """
    def __init__(self, env, broadcast_pipe, sensor_positions=None, history_limit=None):
        self.env = env
        self.broadcast_pipe = broadcast_pipe
        self.sensor_positions = list(sensor_positions or [])
        self.history_limit = history_limit

        self.trajectory = deque(maxlen=history_limit)  # [(timestamp, position)]
        self.sensor_events = deque(maxlen=history_limit)
        self.crashes = deque(maxlen=history_limit)
        self.commands = deque(maxlen=history_limit)
        self.transmitted = deque(maxlen=history_limit)  # characters actually written to the wire
        self.tick_count = 0

        self.event_log = deque(maxlen=history_limit)
        self.simulation_metadata = {}

    def _add_event_log(self, event_type, event_data):
        self.event_log.append({
            "time": self.env.now,
            "type": event_type,
            "data": event_data
        })

    def set_simulation_metadata(self, metadata):
        """
        Set simulation metadata (called before simulation starts).

        Args:
            metadata (dict): Simulation configuration
        """
        self.simulation_metadata = {
            "format_version": "1.0",
            "timestamp": datetime.now().isoformat(),
            "config": metadata
        }

    def start_listening(self):
        """
        Main process intercepting global broadcasts.
        """
        while True:
            data = yield self.broadcast_pipe.get()
            self.record(data.get('topic', ''), data.get('message', {}))

    def record(self, topic, message):
        """Dispatch one broker message to the matching history"""
        if topic == 'car/status':
            self.tick_count = message.get('tick', self.tick_count)
            point = (message.get('timestamp'), message.get('position'))
            # Skip points while the car is standing still
            if not self.trajectory or self.trajectory[-1][1] != point[1]:
                self.trajectory.append(point)
                self._add_event_log('car_status', message)

        elif topic == 'car/sensor':
            self.sensor_events.append(message)
            self._add_event_log('sensor', message)

        elif topic == 'car/crash':
            self.crashes.append(message)
            self._add_event_log('crash', message)

        elif topic == 'car/command':
            self.commands.append(message)
            self._add_event_log('command', message)

        elif topic == 'serial/tx':
            self.transmitted.append(message)

    def get_summary(self) -> dict:
        floors = Counter(event['floor'] for event in self.sensor_events)
        reasons = Counter(crash['reason'] for crash in self.crashes)
        accepted = sum(1 for c in self.commands if c.get('accepted'))
        return {
            "ticks": self.tick_count,
            "sensor_events": len(self.sensor_events),
            "sensor_events_by_floor": dict(sorted(floors.items())),
            "transmitted": "".join(self.transmitted),
            "dropped_events": sum(1 for e in self.sensor_events if not e.get('transmitted')),
            "crashes": len(self.crashes),
            "crashes_by_reason": dict(reasons),
            "commands_accepted": accepted,
            "commands_rejected": len(self.commands) - accepted
        }

    def print_summary(self):
        summary = self.get_summary()
        print("\n--- Trip Summary ---")
        print(f"Ticks simulated: {summary['ticks']}")
        print(f"Sensor events: {summary['sensor_events']} {summary['sensor_events_by_floor']}")
        print(f"Transmitted: '{summary['transmitted']}' (dropped: {summary['dropped_events']})")
        print(f"Crashes: {summary['crashes']} {summary['crashes_by_reason']}")
        print(f"Commands: {summary['commands_accepted']} accepted, {summary['commands_rejected']} rejected")

    def save_event_log(self, file_path):
        """
        Write metadata and events as JSON Lines.

        Returns:
            Path of the written file
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            if self.simulation_metadata:
                f.write(json.dumps({"type": "metadata", "data": self.simulation_metadata}) + "\n")
            for event in self.event_log:
                f.write(json.dumps(event) + "\n")
        print(f"Event log saved: {file_path} ({len(self.event_log)} events)")
        return file_path

    def plot_trajectory(self, save_path=None, show=True):
        """
        Plot car position against time with sensor zones and crash markers.
        """
        if not show:
            matplotlib.use('Agg')

        fig = plt.figure(figsize=(12, 6))

        if self.trajectory:
            times, positions = zip(*self.trajectory)
            plt.plot(times, positions, label="Car position", color="#843B97")

        for i, pos in enumerate(self.sensor_positions):
            plt.axhline(pos, color='silver', linestyle='--', linewidth=1)
            plt.annotate(f"FLOOR {i + 1}", (0, pos), textcoords="offset points", xytext=(4, 4), color='gray')

        for event in self.sensor_events:
            plt.scatter(event['timestamp'], event['position'], color="#FF8C3C", marker='o', zorder=3)

        for crash in self.crashes:
            plt.scatter(crash['timestamp'], crash['position'], color='red', marker='x', s=80, zorder=4)
            plt.annotate(crash['reason'], (crash['timestamp'], crash['position']),
                         textcoords="offset points", xytext=(5, -12), color='red', fontsize=8)

        plt.title("Car Trajectory")
        plt.xlabel("Time (s)")
        plt.ylabel("Position (% of shaft)")
        plt.ylim(-5, 105)
        plt.grid(True, linestyle='--', alpha=0.7)

        if save_path:
            plt.savefig(save_path, dpi=100, bbox_inches='tight')
            print(f"Trajectory plot saved: {save_path}")
        if show:
            plt.show()
        plt.close(fig)
