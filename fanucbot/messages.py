"""Packets of the industrial "simple message" protocol used by the robot controller."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum

PREFIX_SIZE = 4
HEADER_SIZE = 12
JOINT_COUNT = 10


class MsgType(IntEnum):
    INVALID = 0
    PING = 1
    GET_VERSION = 2
    JOINT_POSITION = 10
    JOINT_TRAJ_PT = 11
    JOINT_TRAJ = 12
    STATUS = 13
    JOINT_TRAJ_PT_FULL = 14
    JOINT_FEEDBACK = 15
    READ_INPUT = 20
    READ_OUTPUT = 21
    XYZWPR_TRAJ_PT = 65010


class CommType(IntEnum):
    INVALID = 0
    TOPIC = 1
    SERVICE_REQUEST = 2
    SERVICE_REPLY = 3


class ReplyCode(IntEnum):
    INVALID = 0
    SUCCESS = 1
    FAILURE = 2


class SequenceCode(IntEnum):
    START_TRAJECTORY_DOWNLOAD = -1
    START_TRAJECTORY_STREAMING = -2
    END_TRAJECTORY = -3
    STOP_TRAJECTORY = -4


class TriState(IntEnum):
    UNKNOWN = -1
    ON = 0
    OFF = 1


class Mode(IntEnum):
    UNKNOWN = -1
    MANUAL = 1
    AUTO = 2


class MessageError(ValueError):
    """Raised for a packet that is too short or has an invalid length."""


_HEADER = struct.Struct("<iii")
_JOINT_POSITION = struct.Struct("<i iii i 10f")
_JOINT_TRAJ_PT = struct.Struct("<i iii i 10f ff")
_XYZWPR_TRAJ_PT = struct.Struct("<i iii i 10f ff ii 6f i")
_STATUS = struct.Struct("<i iii 7i")


@dataclass
class Header:
    msg_type: int = MsgType.INVALID
    comm_type: int = CommType.INVALID
    reply_code: int = ReplyCode.INVALID

    def fields(self) -> tuple[int, int, int]:
        return int(self.msg_type), int(self.comm_type), int(self.reply_code)


def _joints(values) -> tuple[float, ...]:
    joints = tuple(float(v) for v in values)[:JOINT_COUNT]
    return joints + (0.0,) * (JOINT_COUNT - len(joints))


@dataclass
class JointPosition:
    header: Header = field(default_factory=lambda: Header(MsgType.JOINT_POSITION))
    sequence: int = 0
    joint_data: tuple[float, ...] = (0.0,) * JOINT_COUNT

    def pack(self) -> bytes:
        return _JOINT_POSITION.pack(
            _JOINT_POSITION.size - PREFIX_SIZE,
            MsgType.JOINT_POSITION, *self.header.fields()[1:],
            self.sequence, *_joints(self.joint_data),
        )


@dataclass
class JointTrajPoint:
    header: Header = field(default_factory=lambda: Header(MsgType.JOINT_TRAJ_PT))
    sequence: int = 0
    joint_data: tuple[float, ...] = (0.0,) * JOINT_COUNT
    velocity: float = 0.0
    duration: float = 0.0

    def pack(self) -> bytes:
        return _JOINT_TRAJ_PT.pack(
            _JOINT_TRAJ_PT.size - PREFIX_SIZE,
            MsgType.JOINT_TRAJ_PT, *self.header.fields()[1:],
            self.sequence, *_joints(self.joint_data), self.velocity, self.duration,
        )


@dataclass
class XyzwprTrajPoint:
    header: Header = field(default_factory=lambda: Header(MsgType.XYZWPR_TRAJ_PT))
    sequence: int = 0
    joint_data: tuple[float, ...] = (0.0,) * JOINT_COUNT
    velocity: float = 0.0
    duration: float = 0.0
    prefix1: int = 0
    prefix2: int = 0
    xyzwpr: tuple[float, ...] = (0.0,) * 6
    config: int = 0

    def pack(self) -> bytes:
        if len(self.xyzwpr) != 6:
            raise MessageError("xyzwpr needs exactly six values")
        return _XYZWPR_TRAJ_PT.pack(
            _XYZWPR_TRAJ_PT.size - PREFIX_SIZE,
            MsgType.XYZWPR_TRAJ_PT, *self.header.fields()[1:],
            self.sequence, *_joints(self.joint_data), self.velocity, self.duration,
            self.prefix1, self.prefix2, *(float(v) for v in self.xyzwpr), self.config,
        )


@dataclass
class Status:
    header: Header = field(default_factory=lambda: Header(MsgType.STATUS))
    drives_powered: int = TriState.UNKNOWN
    e_stopped: int = TriState.UNKNOWN
    error_code: int = 0
    in_error: int = TriState.UNKNOWN
    in_motion: int = TriState.UNKNOWN
    mode: int = Mode.UNKNOWN
    motion_possible: int = TriState.UNKNOWN

    def pack(self) -> bytes:
        return _STATUS.pack(
            _STATUS.size - PREFIX_SIZE,
            MsgType.STATUS, *self.header.fields()[1:],
            self.drives_powered, self.e_stopped, self.error_code, self.in_error,
            self.in_motion, self.mode, self.motion_possible,
        )


Message = JointPosition | JointTrajPoint | XyzwprTrajPoint | Status


def swap_words(data: bytes) -> bytes:
    """Reverse the byte order of every whole 32-bit word; trailing bytes stay."""
    whole = len(data) // 4 * 4
    out = bytearray(data)
    for start in range(0, whole, 4):
        out[start:start + 4] = data[start:start + 4][::-1]
    return bytes(out)


def peek_header(packet: bytes) -> tuple[int, Header]:
    """Return the length prefix and header of a little-endian packet."""
    if len(packet) < PREFIX_SIZE + HEADER_SIZE:
        raise MessageError("packet shorter than prefix and header")
    (length,) = struct.unpack_from("<i", packet)
    msg_type, comm_type, reply_code = _HEADER.unpack_from(packet, PREFIX_SIZE)
    return length, Header(msg_type, comm_type, reply_code)


def _keep_config(packet: bytes, message_is_xyzwpr: bool) -> bytes:
    # the configuration word is sent in controller order regardless of endianness
    if message_is_xyzwpr and len(packet) >= _XYZWPR_TRAJ_PT.size:
        end = _XYZWPR_TRAJ_PT.size
        return packet[:end - 4] + packet[end - 4:end][::-1] + packet[end:]
    return packet


def encode(message: Message, bigendian: bool = False) -> bytes:
    """Serialise a message, word-swapped when the peer is big-endian."""
    packet = message.pack()
    if bigendian:
        packet = _keep_config(swap_words(packet), isinstance(message, XyzwprTrajPoint))
    return packet


_LAYOUTS = {
    MsgType.JOINT_POSITION: _JOINT_POSITION,
    MsgType.JOINT_TRAJ_PT: _JOINT_TRAJ_PT,
    MsgType.XYZWPR_TRAJ_PT: _XYZWPR_TRAJ_PT,
    MsgType.STATUS: _STATUS,
}


def decode(packet: bytes, bigendian: bool = False) -> Message | Header:
    """Parse a packet; message types without a layout come back as their Header."""
    if len(packet) < PREFIX_SIZE + HEADER_SIZE:
        raise MessageError("packet shorter than prefix and header")
    if bigendian:
        packet = swap_words(packet)
    length, header = peek_header(packet)
    layout = _LAYOUTS.get(header.msg_type)
    if layout is None:
        return header
    if length + PREFIX_SIZE != layout.size or len(packet) < layout.size:
        raise MessageError(f"invalid length {length} for message type {header.msg_type}")
    if bigendian:
        packet = _keep_config(packet, header.msg_type == MsgType.XYZWPR_TRAJ_PT)
    values = layout.unpack_from(packet)[4:]
    if header.msg_type == MsgType.STATUS:
        return Status(header, *values)
    sequence, joints, rest = values[0], tuple(values[1:11]), values[11:]
    if header.msg_type == MsgType.JOINT_POSITION:
        return JointPosition(header, sequence, joints)
    if header.msg_type == MsgType.JOINT_TRAJ_PT:
        return JointTrajPoint(header, sequence, joints, *rest)
    velocity, duration, prefix1, prefix2 = rest[:4]
    return XyzwprTrajPoint(header, sequence, joints, velocity, duration,
                           prefix1, prefix2, tuple(rest[4:10]), rest[10])