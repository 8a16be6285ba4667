"""
Wire format of the serial protocol.

Outbound: one ASCII digit per sensor event, sensor 0 -> '1', no terminator.
Inbound: newline-delimited tokens, trimmed and upper-cased.
"""

from typing import List, Optional, Tuple

MAX_SENSOR_INDEX = 8  # '1'..'9'


def encode_sensor_index(index: int) -> str:
    """Encode a 0-based sensor index as its wire character"""
    if not 0 <= index <= MAX_SENSOR_INDEX:
        raise ValueError(f"Sensor index {index} cannot be encoded as a single digit")
    return chr(ord('1') + index)


def encode_sensor_event(event) -> str:
    """Encode a SensorEvent as its wire character"""
    return encode_sensor_index(event.index)


def decode_sensor_char(char: str) -> int:
    """Inverse of encode_sensor_index, for controller-side tooling"""
    if len(char) != 1 or not '1' <= char <= '9':
        raise ValueError(f"Not a sensor character: {char!r}")
    return ord(char) - ord('1')


def normalize_line(line: str) -> Optional[str]:
    """Trim and upper-case an inbound line; blank lines yield None"""
    token = line.strip().upper()
    return token or None


def split_lines(buffer: str, terminator: str = "\n") -> Tuple[List[str], str]:
    """
    Split received text into complete lines.

    Returns:
        (complete lines, unterminated remainder)
    """
    *lines, remainder = buffer.split(terminator)
    return lines, remainder
