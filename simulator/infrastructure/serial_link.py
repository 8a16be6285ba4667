import queue
import threading
from typing import Optional

from ..protocol.codec import encode_sensor_index, normalize_line, split_lines
from .serial_monitor import SerialMonitor


class MemoryPort:
    """
    In-memory stand-in for a serial port.

    Anything with write(bytes) and close() can be connected to a SerialLink.
    Real devices are opened with serial_port.connect_serial; this one just
    collects written bytes.
    """
    def __init__(self, name: str = "MEMORY"):
        self.name = name
        self.is_open = True
        self.written = bytearray()

    def write(self, data: bytes) -> int:
        if not self.is_open:
            raise OSError(f"Port {self.name} is closed")
        self.written.extend(data)
        return len(data)

    def read_all(self) -> str:
        """Drain and return everything written so far"""
        data = self.written.decode('ascii')
        self.written.clear()
        return data

    def close(self):
        self.is_open = False


class SerialLink:
    """
    Transport adapter between a serial port and the simulation timeline.

    Received bytes may arrive on any thread. Complete lines are normalized
    into tokens and queued; the car drains the queue on its own tick so
    commands never run concurrently with physics. Outbound sensor events are
    written as single characters while a port is connected and dropped
    otherwise.
    """
    def __init__(self, monitor: Optional[SerialMonitor] = None, line_terminator: str = "\n",
                 encoding: str = "ascii"):
        self.monitor = monitor if monitor is not None else SerialMonitor()
        self.line_terminator = line_terminator
        self.encoding = encoding
        self.port = None
        self.inbound = queue.Queue()
        self.resync_requested = threading.Event()
        self.dropped_events = 0
        self._buffer = ""
        self._lock = threading.Lock()

    @property
    def connected(self) -> bool:
        return self.port is not None and getattr(self.port, 'is_open', True)

    @property
    def port_name(self) -> Optional[str]:
        if self.port is None:
            return None
        return getattr(self.port, 'name', None) or getattr(self.port, 'port', None)

    def connect(self, port):
        """
        Attach an open port.

        The sensor latch is cleared on the next tick so the current floor is
        broadcast to the new peer immediately.
        """
        if self.connected:
            self.disconnect()
        self.port = port
        self.resync_requested.set()
        self.monitor.log(f"Connected to {self.port_name}")

    def disconnect(self):
        if self.port is None:
            return
        close = getattr(self.port, 'close', None)
        if close is not None:
            close()
        self.port = None
        with self._lock:
            self._buffer = ""
        self.monitor.log("Disconnected.")

    def feed(self, data) -> int:
        """
        Accept received data (bytes or str). Thread-safe.

        Returns:
            Number of tokens queued
        """
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode(self.encoding, errors='replace')

        with self._lock:
            lines, self._buffer = split_lines(self._buffer + data, self.line_terminator)

        queued = 0
        for line in lines:
            token = normalize_line(line)
            if token is not None:
                self.inbound.put(token)
                queued += 1
        return queued

    def submit(self, token: str):
        """Queue a single token as if it had arrived as one line"""
        self.feed(token + self.line_terminator)

    def drain(self):
        """Yield queued tokens; called from the simulation timeline only"""
        while True:
            try:
                yield self.inbound.get_nowait()
            except queue.Empty:
                return

    def write_event(self, index: int) -> bool:
        """
        Write one sensor character.

        Returns:
            True if written, False if dropped because no port is connected
        """
        char = encode_sensor_index(index)
        port = self.port
        if port is None or not getattr(port, 'is_open', True):
            self.dropped_events += 1
            return False

        try:
            port.write(char.encode(self.encoding))
        except OSError as e:
            self.monitor.log(f"TX failed: {e}")
            self.dropped_events += 1
            if self.port is port:
                self.port = None
            return False

        self.monitor.log(f"TX: {char}")
        return True
