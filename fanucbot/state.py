"""State channel: receives robot positions and status from the controller."""

from __future__ import annotations

import asyncio
import logging
import math
import struct
from typing import Sequence

from .config import XyzwprData, parse_config
from .connection import Signal
from .messages import (
    PREFIX_SIZE,
    CommType,
    MessageError,
    MsgType,
    ReplyCode,
    Status,
    TriState,
    XyzwprTrajPoint,
    decode,
    peek_header,
    swap_words,
)

log = logging.getLogger(__name__)

DEFAULT_WATCHDOG_INTERVAL = 5.0
_JOINTS = 6
_HANDLED = {MsgType.JOINT_POSITION, MsgType.JOINT_TRAJ_PT, MsgType.XYZWPR_TRAJ_PT, MsgType.STATUS}


class StateChannel(asyncio.Protocol):
    """Decodes position and status packets and drops silent connections."""

    def __init__(self, bigendian: bool = False, prefix1: int = 0, prefix2: int = 0,
                 watchdog_interval: float = DEFAULT_WATCHDOG_INTERVAL) -> None:
        self.bigendian = bigendian
        self.prefix1 = prefix1
        self.prefix2 = prefix2
        self.watchdog_interval = watchdog_interval

        self.joint_position_received = Signal()
        self.xyzwpr_position_received = Signal()
        self.connection_state_changed = Signal()
        self.status_received = Signal()

        self._transport: asyncio.BaseTransport | None = None
        self._buffer = bytearray()
        self._watchdog_armed = True
        self._timer: asyncio.TimerHandle | None = None

    # connection

    def connection_made(self, transport) -> None:
        self._transport = transport
        self._buffer.clear()
        self._watchdog_armed = True
        self._start_timer()
        self.connection_state_changed.emit(True)

    def connection_lost(self, exc) -> None:
        if exc is not None:
            log.error("state connection lost: %s", exc)
        self._stop_timer()
        self._transport = None
        self.connection_state_changed.emit(False)

    def connected(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    def _start_timer(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._timer = loop.call_later(self.watchdog_interval, self._on_timer)

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        if not self.connected():
            return
        self.watchdog_tick()
        if self.connected():
            self._start_timer()

    def watchdog_tick(self) -> None:
        """Disconnect if nothing arrived since the previous tick, else re-arm."""
        if self._watchdog_armed:
            log.warning("watchdog: no data from controller, disconnecting")
            if self._transport is not None:
                self._transport.close()
        else:
            self._watchdog_armed = True

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

        self._watchdog_armed = False

        if header.comm_type == CommType.SERVICE_REQUEST:
            log.error("service request received, no support")
            reply = bytearray(view)
            struct.pack_into("<ii", reply, PREFIX_SIZE + 4,
                             CommType.SERVICE_REPLY, ReplyCode.FAILURE)
            out = bytes(reply)
            if self._transport is not None:
                self._transport.write(swap_words(out) if self.bigendian else out)
            return
        if header.comm_type not in (CommType.TOPIC, CommType.SERVICE_REPLY):
            log.error("unknown comm_type %d", header.comm_type)
            return
        if header.msg_type not in _HANDLED:
            log.info("received l=%d msg=%d comm=%d reply=%d", length, header.msg_type,
                     header.comm_type, header.reply_code)
            return
        try:
            message = decode(packet, self.bigendian)
        except MessageError as exc:
            log.error("received message type %d with invalid length: %s", header.msg_type, exc)
            return

        if isinstance(message, Status):
            self._status_received(message)
            return
        self._joint_data_received(message.joint_data)
        if isinstance(message, XyzwprTrajPoint):
            if message.prefix1 != self.prefix1:
                log.debug("prefix1: received %d, expected %d", message.prefix1, self.prefix1)
            if message.prefix2 != self.prefix2:
                log.debug("prefix2: received %d, expected %d", message.prefix2, self.prefix2)
            self._xyzwpr_data_received(message.xyzwpr, message.config)

    def _status_received(self, msg: Status) -> None:
        log.info("status: in_motion=%d drives_powered=%d motion_possible=%d mode=%d "
                 "e_stopped=%d in_error=%d error_code=%d", msg.in_motion, msg.drives_powered,
                 msg.motion_possible, msg.mode, msg.e_stopped, msg.in_error, msg.error_code)
        self.status_received.emit(
            msg.in_motion == TriState.ON,
            msg.drives_powered == TriState.ON and msg.motion_possible == TriState.ON,
            msg.in_error == TriState.ON or msg.e_stopped == TriState.ON,
        )

    def _joint_data_received(self, joints: Sequence[float]) -> None:
        pos = [math.degrees(v) for v in joints[:_JOINTS]]
        log.debug("joint position: %s", pos)
        self.joint_position_received.emit(pos)

    def _xyzwpr_data_received(self, xyzwpr: Sequence[float], config: int) -> None:
        pos = parse_config(config, XyzwprData(xyzwpr=[float(v) for v in xyzwpr[:6]]))
        log.debug("xyzwpr position: %s flip=%d up=%d top=%d t=(%d,%d,%d)", pos.xyzwpr,
                  pos.flip, pos.up, pos.top, pos.t1, pos.t2, pos.t3)
        self.xyzwpr_position_received.emit(pos)