"""Infrastructure components for simulation"""

from .message_broker import MessageBroker
from .realtime_env import RealtimeEnvironment
from .serial_link import SerialLink, MemoryPort
from .serial_monitor import SerialMonitor
from .serial_port import SerialReader, connect_serial, open_serial_port

__all__ = [
    'MessageBroker',
    'RealtimeEnvironment',
    'SerialLink',
    'MemoryPort',
    'SerialMonitor',
    'SerialReader',
    'connect_serial',
    'open_serial_port',
]
