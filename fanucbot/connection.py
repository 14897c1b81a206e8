"""Callback signals and a reconnecting TCP client loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

log = logging.getLogger(__name__)

DEFAULT_RETRY_DELAY = 1.0


class Signal:
    """A list of callables that are all called, in order, on emit."""

    def __init__(self) -> None:
        self._slots: list[Callable[..., Any]] = []

    def connect(self, slot: Callable[..., Any]) -> None:
        self._slots.append(slot)

    def disconnect(self, slot: Callable[..., Any]) -> None:
        self._slots.remove(slot)

    def emit(self, *args: Any) -> None:
        for slot in list(self._slots):
            slot(*args)


async def keep_connected(protocol: asyncio.Protocol, host: str, port: int,
                         retry_delay: float = DEFAULT_RETRY_DELAY) -> None:
    """Keep protocol connected to host:port until cancelled.

    The protocol must carry a ``connection_state_changed`` Signal that is
    emitted with False when its connection is lost; a failed attempt emits
    it with False too. Each loss or failure is followed by retry_delay seconds
    of waiting before the next attempt.
    """
    loop = asyncio.get_running_loop()
    lost = asyncio.Event()

    def on_state(connected: bool) -> None:
        if not connected:
            lost.set()

    protocol.connection_state_changed.connect(on_state)
    transport = None
    try:
        while True:
            lost.clear()
            log.info("connecting to %s:%d", host, port)
            try:
                transport, _ = await loop.create_connection(lambda: protocol, host, port)
            except OSError as exc:
                log.error("connection to %s:%d failed: %s", host, port, exc)
                protocol.connection_state_changed.emit(False)
            else:
                await lost.wait()
                transport = None
            await asyncio.sleep(retry_delay)
    finally:
        protocol.connection_state_changed.disconnect(on_state)
        if transport is not None:
            transport.close()