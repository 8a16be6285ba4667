"""
Virtual Elevator Simulator - Core simulation engine

This package provides the car state, fixed-tick physics, command protocol
and serial transport for a single simulated elevator car.
"""

__version__ = "0.1.0"

from .core.car_state import CarState, CarSnapshot, Direction, SensorLayout
from .core.command_router import Command, CommandRouter, UnknownCommandError, parse_command
from .core.elevator_car import ElevatorCar
from .core.entity import Entity

from .physics.physics_engine import PhysicsEngine, SensorEvent, TickResult, TickStatus

from .protocol.codec import encode_sensor_event

from .infrastructure.message_broker import MessageBroker
from .infrastructure.realtime_env import RealtimeEnvironment
from .infrastructure.serial_link import SerialLink, MemoryPort
from .infrastructure.serial_monitor import SerialMonitor

__all__ = [
    'CarState',
    'CarSnapshot',
    'Direction',
    'SensorLayout',
    'Command',
    'CommandRouter',
    'UnknownCommandError',
    'parse_command',
    'ElevatorCar',
    'Entity',
    'PhysicsEngine',
    'SensorEvent',
    'TickResult',
    'TickStatus',
    'encode_sensor_event',
    'MessageBroker',
    'RealtimeEnvironment',
    'SerialLink',
    'MemoryPort',
    'SerialMonitor',
]
