from collections import deque
from datetime import datetime


class SerialMonitor:
    """
    Timestamped console of serial traffic and system messages.

    Lines look like "[14:03:22] RX: M_UP" and are kept in a bounded buffer
    for display or inspection.
    """
    def __init__(self, echo: bool = True, max_lines: int = 1000, clock=datetime.now):
        self.echo = echo
        self.clock = clock
        self.lines = deque(maxlen=max_lines)

    def log(self, message: str) -> str:
        line = f"[{self.clock().strftime('%H:%M:%S')}] {message}"
        self.lines.append(line)
        if self.echo:
            print(line)
        return line

    def messages(self):
        """Logged messages without their timestamp prefix"""
        return [line.split('] ', 1)[1] for line in self.lines]

    def clear(self):
        self.lines.clear()
