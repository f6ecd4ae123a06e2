"""
Minimal FIT (Flexible and Interoperable Data Transfer) file encoder.

Covers the message types needed to write a course file: file_id, course,
lap, event, record and course_point. Field numbers, base types, scales and
enum values follow the published FIT profile.
"""

import math
import struct
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

FIT_EPOCH = datetime(1989, 12, 31, tzinfo=timezone.utc)

HEADER_SIZE = 14
PROTOCOL_VERSION = 0x20  # 2.0
PROFILE_VERSION = 2140   # 21.40

DEFINITION_FLAG = 0x40
LITTLE_ENDIAN = 0


@dataclass(frozen=True)
class BaseType:
    code: int
    size: int
    fmt: str
    invalid: int
    minimum: int = 0
    maximum: int = 0


ENUM = BaseType(0x00, 1, 'B', 0xFF, 0, 0xFE)
UINT8 = BaseType(0x02, 1, 'B', 0xFF, 0, 0xFE)
UINT16 = BaseType(0x84, 2, 'H', 0xFFFF, 0, 0xFFFE)
SINT32 = BaseType(0x85, 4, 'i', 0x7FFFFFFF, -0x80000000, 0x7FFFFFFE)
UINT32 = BaseType(0x86, 4, 'I', 0xFFFFFFFF, 0, 0xFFFFFFFE)
UINT32Z = BaseType(0x8C, 4, 'I', 0x00000000, 1, 0xFFFFFFFF)
STRING = BaseType(0x07, 1, 's', 0x00)


@dataclass(frozen=True)
class FieldDef:
    num: int
    base_type: BaseType
    scale: float = 1
    offset: float = 0
    enum: Optional[Dict[str, int]] = None


FILE_TYPES = {'activity': 4, 'workout': 5, 'course': 6}
MANUFACTURERS = {'garmin': 1, 'development': 255}
SPORTS = {'generic': 0, 'running': 1, 'cycling': 2}
EVENTS = {'timer': 0}
EVENT_TYPES = {'start': 0, 'stop': 1, 'marker': 3, 'stop_all': 4}
COURSE_POINT_TYPES = {
    'generic': 0, 'summit': 1, 'valley': 2, 'water': 3, 'food': 4, 'danger': 5,
    'left': 6, 'right': 7, 'straight': 8, 'first_aid': 9,
    'fourth_category': 10, 'third_category': 11, 'second_category': 12,
    'first_category': 13, 'hors_category': 14, 'sprint': 15,
    'left_fork': 16, 'right_fork': 17, 'middle_fork': 18,
    'slight_left': 19, 'sharp_left': 20, 'slight_right': 21, 'sharp_right': 22,
    'u_turn': 23, 'segment_start': 24, 'segment_end': 25,
    'campsite': 27, 'aid_station': 28, 'rest_area': 29,
}

MESSAGES: Dict[str, Tuple[int, Dict[str, FieldDef]]] = {
    'file_id': (0, {
        'type': FieldDef(0, ENUM, enum=FILE_TYPES),
        'manufacturer': FieldDef(1, UINT16, enum=MANUFACTURERS),
        'product': FieldDef(2, UINT16),
        'serial_number': FieldDef(3, UINT32Z),
        'time_created': FieldDef(4, UINT32),
    }),
    'lap': (19, {
        'timestamp': FieldDef(253, UINT32),
        'start_time': FieldDef(2, UINT32),
        'start_position_lat': FieldDef(3, SINT32),
        'start_position_long': FieldDef(4, SINT32),
        'end_position_lat': FieldDef(5, SINT32),
        'end_position_long': FieldDef(6, SINT32),
        'total_elapsed_time': FieldDef(7, UINT32, scale=1000),
        'total_timer_time': FieldDef(8, UINT32, scale=1000),
        'total_distance': FieldDef(9, UINT32, scale=100),
    }),
    'record': (20, {
        'timestamp': FieldDef(253, UINT32),
        'position_lat': FieldDef(0, SINT32),
        'position_long': FieldDef(1, SINT32),
        'altitude': FieldDef(2, UINT16, scale=5, offset=500),
        'distance': FieldDef(5, UINT32, scale=100),
    }),
    'event': (21, {
        'timestamp': FieldDef(253, UINT32),
        'event': FieldDef(0, ENUM, enum=EVENTS),
        'event_type': FieldDef(1, ENUM, enum=EVENT_TYPES),
        'event_group': FieldDef(4, UINT8),
    }),
    'course': (31, {
        'sport': FieldDef(4, ENUM, enum=SPORTS),
        'name': FieldDef(5, STRING),
    }),
    'course_point': (32, {
        'message_index': FieldDef(254, UINT16),
        'timestamp': FieldDef(1, UINT32),
        'position_lat': FieldDef(2, SINT32),
        'position_long': FieldDef(3, SINT32),
        'distance': FieldDef(4, UINT32, scale=100),
        'type': FieldDef(5, ENUM, enum=COURSE_POINT_TYPES),
        'name': FieldDef(6, STRING),
    }),
}

_CRC_TABLE = (
    0x0000, 0xCC01, 0xD801, 0x1400, 0xF001, 0x3C00, 0x2800, 0xE401,
    0xA001, 0x6C00, 0x7800, 0xB401, 0x5000, 0x9C01, 0x8801, 0x4400,
)


def crc16(data: bytes, crc: int = 0) -> int:
    """FIT CRC-16 over ``data``."""
    for byte in data:
        tmp = _CRC_TABLE[crc & 0xF]
        crc = (crc >> 4) & 0x0FFF
        crc = crc ^ tmp ^ _CRC_TABLE[byte & 0xF]

        tmp = _CRC_TABLE[crc & 0xF]
        crc = (crc >> 4) & 0x0FFF
        crc = crc ^ tmp ^ _CRC_TABLE[(byte >> 4) & 0xF]
    return crc


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def to_fit_timestamp(value: datetime) -> int:
    """Seconds since the FIT epoch (1989-12-31T00:00:00Z)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return round_half_up((value - FIT_EPOCH).total_seconds())


class FitEncoder:
    """
    Writes FIT messages into an in-memory file.

    A definition message is written the first time a message type is used
    and again whenever its field layout changes (fields omitted or strings of
    a different length).
    """

    def __init__(self):
        self._data = bytearray()
        self._local_types: Dict[str, int] = {}
        self._layouts: Dict[int, tuple] = {}

    def _encode_value(self, field: FieldDef, value) -> bytes:
        base = field.base_type

        if base is STRING:
            raw = str(value).encode('utf-8')
            return raw + b'\x00'

        if isinstance(value, datetime):
            value = to_fit_timestamp(value)
        elif isinstance(value, str):
            if not field.enum or value not in field.enum:
                raise ValueError(f"Unknown enum value {value!r} for field {field.num}")
            value = field.enum[value]
        elif field.scale != 1 or field.offset != 0:
            value = round_half_up((value + field.offset) * field.scale)
        else:
            value = round_half_up(value)

        value = min(max(value, base.minimum), base.maximum)
        return struct.pack('<' + base.fmt, value)

    def write_message(self, name: str, values: Dict) -> None:
        """
        Append one data message, preceded by a definition when needed.

        Args:
            name: Message name from ``MESSAGES``
            values: Field values in profile units; None values are omitted
        """
        global_num, fields = MESSAGES[name]

        encoded: List[Tuple[FieldDef, bytes]] = []
        for field_name, value in values.items():
            if value is None:
                continue
            if field_name not in fields:
                raise KeyError(f"Field {field_name!r} is not defined for message {name!r}")
            field = fields[field_name]
            encoded.append((field, self._encode_value(field, value)))

        layout = (global_num, tuple((f.num, len(raw), f.base_type.code) for f, raw in encoded))

        if name not in self._local_types:
            if len(self._local_types) >= 16:
                raise ValueError("FIT files support at most 16 local message types")
            self._local_types[name] = len(self._local_types)
        local_type = self._local_types[name]

        if self._layouts.get(local_type) != layout:
            self._write_definition(local_type, layout)

        self._data.append(local_type)
        for _, raw in encoded:
            self._data.extend(raw)

    def _write_definition(self, local_type: int, layout: tuple) -> None:
        global_num, field_layout = layout
        self._data.append(DEFINITION_FLAG | local_type)
        self._data.extend(struct.pack('<BBHB', 0, LITTLE_ENDIAN, global_num, len(field_layout)))
        for num, size, code in field_layout:
            self._data.extend(struct.pack('<BBB', num, size, code))
        self._layouts[local_type] = layout

    def close(self) -> bytes:
        """Return the complete file: header, messages and trailing CRC."""
        header = struct.pack('<BBHI4s', HEADER_SIZE, PROTOCOL_VERSION, PROFILE_VERSION,
                             len(self._data), b'.FIT')
        header += struct.pack('<H', crc16(header))

        body = header + bytes(self._data)
        return body + struct.pack('<H', crc16(body))
