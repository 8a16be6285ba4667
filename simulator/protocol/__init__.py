"""Serial protocol wire format"""

from .codec import (
    encode_sensor_index,
    encode_sensor_event,
    decode_sensor_char,
    normalize_line,
    split_lines,
)

__all__ = [
    'encode_sensor_index',
    'encode_sensor_event',
    'decode_sensor_char',
    'normalize_line',
    'split_lines',
]
