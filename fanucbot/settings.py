"""Connection and robot settings read from the controller INI file."""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .geometry import Transform

log = logging.getLogger(__name__)

DEFAULT_PATH = "fanuc.ini"
_SECTION = "General"
_TRANSFORM_VALUES = 12


@dataclass
class FanucSettings:
    bigendian: bool = False
    server_ip: str = "127.0.0.1"
    server_relay_port: int = 11000
    server_state_port: int = 11002
    prefix1: int = 0
    prefix2: int = 0
    world2user: Transform = field(default_factory=Transform)
    user2world: Transform = field(default_factory=Transform)
    flip: bool = False
    up: bool = True
    top: bool = True
    cam_delay: int = 3000


def _unquote(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return text[1:-1]
    return text


def _parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None, strict=False)
    parser.optionxform = str
    return parser


def _read_values(path: str | Path) -> dict[str, str]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    parser = _parser()
    try:
        parser.read_string(text)
    except configparser.MissingSectionHeaderError:
        # keys before any section belong to the general section
        parser = _parser()
        parser.read_string(f"[{_SECTION}]\n{text}")
    if not parser.has_section(_SECTION):
        return {}
    return dict(parser[_SECTION])


def _to_bool(text: str) -> bool:
    return _unquote(text).lower() not in ("", "0", "false")


def _to_int(text: str) -> int:
    try:
        return int(_unquote(text))
    except ValueError:
        return 0


def _to_float(text: str) -> float:
    try:
        return float(_unquote(text))
    except ValueError:
        return 0.0


def _to_floats(text: str) -> list[float]:
    return [_to_float(part) for part in text.split(",") if part.strip()]


def load_settings(path: str | Path = DEFAULT_PATH) -> FanucSettings:
    """Read the settings file; a missing file or key keeps its default."""
    values = _read_values(path)
    settings = FanucSettings()

    if "bigendian" in values:
        settings.bigendian = _to_bool(values["bigendian"])
    if "server_ip" in values:
        settings.server_ip = _unquote(values["server_ip"])
    for key in ("server_relay_port", "server_state_port", "prefix1", "prefix2", "cam_delay"):
        if key in values:
            setattr(settings, key, _to_int(values[key]))
    for key in ("flip", "up", "top"):
        if key in values:
            setattr(settings, key, _to_bool(values[key]))

    if "world2user" in values and "user2world" in values:
        w2u = _to_floats(values["world2user"])
        u2w = _to_floats(values["user2world"])
        if len(w2u) >= _TRANSFORM_VALUES and len(u2w) >= _TRANSFORM_VALUES:
            settings.world2user = Transform.from_values(w2u[:_TRANSFORM_VALUES])
            settings.user2world = Transform.from_values(u2w[:_TRANSFORM_VALUES])
        else:
            log.warning("transforms need %d values, keeping identity", _TRANSFORM_VALUES)
    return settings