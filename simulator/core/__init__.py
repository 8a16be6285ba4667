"""Core simulation entities"""

from .entity import Entity
from .car_state import CarState, CarSnapshot, Direction, SensorLayout, DEFAULT_LAYOUT
from .command_router import Command, CommandRouter, UnknownCommandError, parse_command
from .elevator_car import ElevatorCar

__all__ = [
    'Entity',
    'CarState',
    'CarSnapshot',
    'Direction',
    'SensorLayout',
    'DEFAULT_LAYOUT',
    'Command',
    'CommandRouter',
    'UnknownCommandError',
    'parse_command',
    'ElevatorCar',
]
