#!/usr/bin/env python3
"""
HTTP Server for the virtual elevator
Read-only car snapshots for renderers, a command inbox and saved event logs
"""
import json
from pathlib import Path

from flask import Flask, jsonify, request
from flask_cors import CORS

from simulator.core.command_router import UnknownCommandError, parse_command


def create_app(car, log_dir=None):
    """
    Build the Flask app around a running ElevatorCar.

    Handlers only read car.snapshot() and hand tokens to the serial link;
    they never touch the car state directly.

    Args:
        car: ElevatorCar instance
        log_dir: Directory holding saved JSONL event logs
    """
    app = Flask(__name__)
    CORS(app)  # Enable CORS for all routes

    log_dir = Path(log_dir) if log_dir is not None else Path.cwd()

    @app.route('/api/state')
    def state():
        """Current car snapshot plus the sensor table"""
        data = car.snapshot().to_dict(car.layout)
        data['tick'] = car.tick_count
        data['entity_state'] = car.state
        data['link_connected'] = car.link.connected
        return jsonify(data)

    @app.route('/api/sensors')
    def sensors():
        return jsonify({
            'sensor_positions': list(car.layout.positions),
            'sensor_tolerance': car.layout.tolerance
        })

    @app.route('/api/command', methods=['POST'])
    def command():
        """
        Queue a command token as if it arrived on the serial line
        Body: {"command": "M_UP"}
        """
        payload = request.get_json(silent=True) or {}
        token = payload.get('command')
        if not isinstance(token, str):
            return jsonify({'error': "Missing 'command'"}), 400
        try:
            parsed = parse_command(token)
        except UnknownCommandError as e:
            return jsonify({'error': str(e)}), 400

        car.link.submit(parsed.value)
        return jsonify({'queued': parsed.value}), 202

    @app.route('/api/logs/<filename>')
    def get_log_file(filename):
        """Get a saved event log (for replay)"""
        file_path = log_dir / filename

        if not file_path.name.endswith('.jsonl') or file_path.parent.resolve() != log_dir.resolve() \
                or not file_path.exists():
            return jsonify({'error': 'File not found'}), 404

        events = []
        with open(file_path, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if line:
                    try:
                        events.append(json.loads(line))
                    except json.JSONDecodeError:
                        continue

        return jsonify(events)

    @app.route('/api/status')
    def status():
        """Server status endpoint"""
        return jsonify({
            'status': 'ok',
            'server': 'Virtual Elevator HTTP Server',
            'version': '1.0'
        })

    return app


def run_server(car, host='localhost', port=5000, log_dir=None, debug=False):
    """Run the Flask server (blocking)"""
    print(f"Starting HTTP server on http://{host}:{port}")
    print("API endpoints:")
    print("  - GET  /api/state")
    print("  - GET  /api/sensors")
    print("  - POST /api/command")
    print("  - GET  /api/logs/<filename>")
    print("  - GET  /api/status")

    app = create_app(car, log_dir=log_dir)
    app.run(host=host, port=port, debug=debug, threaded=True, use_reloader=False)
