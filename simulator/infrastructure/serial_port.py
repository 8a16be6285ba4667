import threading

import serial

from .serial_link import SerialLink


def open_serial_port(port: str, baud_rate: int, timeout: float = 0.1) -> serial.SerialBase:
    """
    Open a serial device with pySerial.

    port may be a device path (/dev/ttyACM0, COM3) or a pySerial URL
    such as loop:// or socket://host:port.
    """
    return serial.serial_for_url(port, baudrate=baud_rate, timeout=timeout)


class SerialReader(threading.Thread):
    """
    Background reader feeding received bytes into a SerialLink.

    Runs until stop() is called or the port is closed. A read error
    detaches the port from the link.
    """
    def __init__(self, link: SerialLink, port):
        super().__init__(name=f"serial-reader-{getattr(port, 'name', 'port')}", daemon=True)
        self.link = link
        self.port = port
        self._stop_event = threading.Event()

    def run(self):
        while not self._stop_event.is_set() and self.port.is_open:
            try:
                data = self.port.read(self.port.in_waiting or 1)
            except serial.SerialException as e:
                if self._stop_event.is_set() or not self.port.is_open:
                    break
                self.link.monitor.log(f"RX failed: {e}")
                if self.link.port is self.port:
                    self.link.disconnect()
                break
            if data:
                self.link.feed(data)

    def stop(self, timeout: float = 1.0):
        self._stop_event.set()
        if self.is_alive():
            self.join(timeout)


def connect_serial(link: SerialLink, port: str, baud_rate: int, timeout: float = 0.1) -> SerialReader:
    """
    Open port, attach it to link and start reading from it.

    Returns:
        The running SerialReader
    """
    ser = open_serial_port(port, baud_rate, timeout=timeout)
    link.connect(ser)
    reader = SerialReader(link, ser)
    reader.start()
    return reader
