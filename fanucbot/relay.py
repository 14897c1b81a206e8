"""Motion relay channel: streams trajectory points to the robot controller."""

from __future__ import annotations

import asyncio
import logging
import math
import struct
from typing import Sequence

from .config import XyzwprData, make_config
from .connection import Signal
from .messages import (
    PREFIX_SIZE,
    CommType,
    Header,
    JointTrajPoint,
    MessageError,
    MsgType,
    ReplyCode,
    SequenceCode,
    XyzwprTrajPoint,
    decode,
    encode,
    peek_header,
    swap_words,
)

log = logging.getLogger(__name__)

_SEQUENCED = {MsgType.JOINT_POSITION, MsgType.JOINT_TRAJ_PT, MsgType.XYZWPR_TRAJ_PT}
_JOINTS = 6


class RelayChannel(asyncio.Protocol):
    """Sends trajectory points one at a time, each after the previous was accepted."""

    def __init__(self, bigendian: bool = False, prefix1: int = 0, prefix2: int = 0) -> None:
        self.bigendian = bigendian
        self.prefix1 = prefix1
        self.prefix2 = prefix2

        self.trajectory_xyzwpr_point_enqueued = Signal()
        self.trajectory_xyzwpr_point_enqueue_fail = Signal()
        self.trajectory_joint_point_enqueued = Signal()
        self.trajectory_joint_point_enqueue_fail = Signal()
        self.trajectory_enqueue_finished = Signal()
        self.connection_state_changed = Signal()

        self._transport: asyncio.BaseTransport | None = None
        self._buffer = bytearray()
        self._path_joint: list[Sequence[float]] = []
        self._path_xyzwpr: list[XyzwprData] = []
        self._path_idx = 0

    # connection

    def connection_made(self, transport) -> None:
        self._transport = transport
        self._buffer.clear()
        self.connection_state_changed.emit(True)

    def connection_lost(self, exc) -> None:
        if exc is not None:
            log.error("relay connection lost: %s", exc)
        self._transport = None
        self.connection_state_changed.emit(False)

    def connected(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    def disconnect(self) -> None:
        if self._transport is not None:
            self._transport.close()

    # incoming

    def data_received(self, data: bytes) -> None:
        self._buffer.extend(data)
        for packet in self._packets():
            self._handle(packet)

    def _packets(self):
        fmt = ">i" if self.bigendian else "<i"
        while len(self._buffer) >= PREFIX_SIZE:
            (length,) = struct.unpack_from(fmt, self._buffer)
            if length < 0:
                log.error("negative packet length %d, dropping buffer", length)
                self._buffer.clear()
                return
            total = PREFIX_SIZE + length
            if len(self._buffer) < total:
                return
            packet = bytes(self._buffer[:total])
            del self._buffer[:total]
            yield packet

    def _handle(self, packet: bytes) -> None:
        view = swap_words(packet) if self.bigendian else packet
        try:
            length, header = peek_header(view)
        except MessageError:
            log.error("packet of %d bytes is too short", len(packet))
            return

        if header.comm_type == CommType.SERVICE_REQUEST:
            log.error("service request received, no support")
            reply = bytearray(view)
            struct.pack_into("<ii", reply, PREFIX_SIZE + 4,
                             CommType.SERVICE_REPLY, ReplyCode.FAILURE)
            out = bytes(reply)
            self._write(swap_words(out) if self.bigendian else out)
            return
        if header.comm_type == CommType.TOPIC:
            log.warning("topic received, ignoring")
            return
        if header.comm_type != CommType.SERVICE_REPLY:
            log.error("unknown comm_type %d", header.comm_type)
            return
        if header.msg_type not in _SEQUENCED:
            log.info("received l=%d msg=%d comm=%d reply=%d", length, header.msg_type,
                     header.comm_type, header.reply_code)
            return
        try:
            message = decode(packet, self.bigendian)
        except MessageError as exc:
            log.error("received message type %d with invalid length: %s", header.msg_type, exc)
            return

        sequence = message.sequence
        if header.reply_code == ReplyCode.SUCCESS:
            self._on_success(sequence)
        elif header.reply_code == ReplyCode.FAILURE:
            self._on_failure(sequence)
        else:
            log.warning("unexpected reply_code %d", header.reply_code)

    def _on_success(self, sequence: int) -> None:
        if sequence < 0:
            if sequence == SequenceCode.STOP_TRAJECTORY and sequence == self._path_idx:
                log.info("stop trajectory completed")
            else:
                log.warning("unexpected sequence_id %d", sequence)
            return
        if sequence != self._path_idx:
            log.warning("unexpected sequence_id %d, expected %d", sequence, self._path_idx)
            return

        log.info("trajectory point enqueued %d", self._path_idx)
        idx = self._path_idx
        if idx < len(self._path_joint):
            self.trajectory_joint_point_enqueued.emit(self._path_joint[idx], idx)
            self._path_idx += 1
            if self._path_idx < len(self._path_joint):
                self._move_joint(self._path_joint[self._path_idx], self._path_idx)
            else:
                self.trajectory_enqueue_finished.emit()
        elif idx < len(self._path_xyzwpr):
            self.trajectory_xyzwpr_point_enqueued.emit(self._path_xyzwpr[idx], idx)
            self._path_idx += 1
            if self._path_idx < len(self._path_xyzwpr):
                self._move_xyzwpr(self._path_xyzwpr[self._path_idx], self._path_idx)
            else:
                self.trajectory_enqueue_finished.emit()
        else:
            log.error("unknown path index %d", idx)

    def _on_failure(self, sequence: int) -> None:
        if sequence < 0 and sequence == self._path_idx:
            if sequence == SequenceCode.STOP_TRAJECTORY:
                log.error("stop trajectory failed")
            else:
                log.error("unexpected sequence_id %d", sequence)
            return

        log.error("trajectory point enqueue fail, stopping %d", self._path_idx)
        idx = self._path_idx
        if idx < len(self._path_joint):
            self.trajectory_joint_point_enqueue_fail.emit(self._path_joint[idx], idx)
        elif idx < len(self._path_xyzwpr):
            self.trajectory_xyzwpr_point_enqueue_fail.emit(self._path_xyzwpr[idx], idx)
        else:
            log.error("unknown path index %d", idx)
        self.stop()

    # outgoing

    def _write(self, data: bytes) -> None:
        if self._transport is not None:
            self._transport.write(data)

    def _send(self, message: JointTrajPoint | XyzwprTrajPoint) -> bool:
        if not self.connected():
            return False
        self._path_idx = message.sequence
        self._write(encode(message, self.bigendian))
        return True

    def stop(self) -> None:
        """Drop the pending path and ask the controller to stop."""
        self._path_xyzwpr.clear()
        self._path_joint.clear()
        self._send(JointTrajPoint(
            header=Header(MsgType.JOINT_TRAJ_PT, CommType.SERVICE_REQUEST),
            sequence=int(SequenceCode.STOP_TRAJECTORY),
        ))

    def move_point(self, pos: XyzwprData) -> None:
        self.move_trajectory([pos])

    def move_trajectory(self, path: Sequence[XyzwprData]) -> None:
        if not path:
            raise ValueError("trajectory has no points")
        self._path_joint = []
        self._path_xyzwpr = list(path)
        self._move_xyzwpr(self._path_xyzwpr[0], 0)

    def move_joint_point(self, pos: Sequence[float]) -> None:
        self.move_joint_trajectory([pos])

    def move_joint_trajectory(self, path: Sequence[Sequence[float]]) -> None:
        if not path:
            raise ValueError("trajectory has no points")
        self._path_xyzwpr = []
        self._path_joint = list(path)
        self._move_joint(self._path_joint[0], 0)

    def _move_joint(self, pos: Sequence[float], sequence: int) -> None:
        if len(pos) < _JOINTS:
            raise ValueError(f"joint position needs {_JOINTS} values")
        message = JointTrajPoint(
            header=Header(MsgType.JOINT_TRAJ_PT, CommType.SERVICE_REQUEST),
            sequence=sequence,
            joint_data=tuple(math.radians(v) for v in pos[:_JOINTS]),
        )
        log.info("joint traj pt: i=%d J=%s", sequence, list(pos[:_JOINTS]))
        if not self._send(message):
            self.trajectory_joint_point_enqueue_fail.emit(pos, sequence)

    def _move_xyzwpr(self, pos: XyzwprData, sequence: int) -> None:
        message = XyzwprTrajPoint(
            header=Header(MsgType.XYZWPR_TRAJ_PT, CommType.SERVICE_REQUEST),
            sequence=sequence,
            prefix1=self.prefix1,
            prefix2=self.prefix2,
            xyzwpr=tuple(pos.xyzwpr[:6]),
            config=make_config(pos),
        )
        log.info("xyzwpr traj pt: i=%d XYZWPR=%s", sequence, list(pos.xyzwpr[:6]))
        if not self._send(message):
            self.trajectory_xyzwpr_point_enqueue_fail.emit(pos, sequence)