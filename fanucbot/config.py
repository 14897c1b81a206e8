"""Cartesian robot pose with the controller's configuration word."""

from __future__ import annotations

from dataclasses import dataclass, field

FLIP = 0x80000000
LEFT = 0x40000000
UP = 0x20000000
TOP = 0x10000000


@dataclass
class XyzwprData:
    xyzwpr: list[float] = field(default_factory=lambda: [0.0] * 6)
    flip: bool = False
    left: bool = False
    up: bool = True
    top: bool = True
    t1: int = 0
    t2: int = 0
    t3: int = 0


def _int8(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value >= 0x80 else value


def make_config(data: XyzwprData) -> int:
    """Pack the turn counters and arm flags into a signed 32-bit word."""
    config = (data.t1 & 0xFF) | ((data.t2 & 0xFF) << 8) | ((data.t3 & 0xFF) << 16)
    if data.flip:
        config |= FLIP
    if data.left:
        config |= LEFT
    if data.up:
        config |= UP
    if data.top:
        config |= TOP
    return config - (1 << 32) if config >= 1 << 31 else config


def parse_config(config: int, data: XyzwprData) -> XyzwprData:
    """Store a configuration word's flags and turns in data and return it."""
    data.flip = bool(config & FLIP)
    data.left = bool(config & LEFT)
    data.up = bool(config & UP)
    data.top = bool(config & TOP)
    data.t1 = _int8(config)
    data.t2 = _int8(config >> 8)
    data.t3 = _int8(config >> 16)
    return data