"""Value types exchanged between the user interface and the robot connection."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class BotState(Enum):
    FALL = 0
    NOT_ATTACHED = 1
    ATTACHED = 2


class CalibResult(Enum):
    OK = 0
    FALL = 1


class PrepareResult(Enum):
    OK = 0
    ERROR = 1


class WorkResult(Enum):
    OK = 0
    ERROR = 1


class ShapeType(Enum):
    DESK = 0
    PART = 1
    LSRHEAD = 2
    GRIP = 3


class TaskType(Enum):
    MOVE = 0
    DRILL = 1
    MARK = 2


@dataclass
class Vertex:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def is_equal(self, other: Vertex, precision: float = 0.0) -> bool:
        return (abs(self.x - other.x) <= precision and abs(self.y - other.y) <= precision
                and abs(self.z - other.z) <= precision)


@dataclass
class RotationAngle:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def is_equal(self, other: RotationAngle, precision: float = 0.0) -> bool:
        return (abs(self.x - other.x) <= precision and abs(self.y - other.y) <= precision
                and abs(self.z - other.z) <= precision)


@dataclass
class BotPosition:
    global_pos: Vertex = field(default_factory=Vertex)
    global_rotation: RotationAngle = field(default_factory=RotationAngle)

    @classmethod
    def of(cls, x: float, y: float, z: float, alpha: float, beta: float, gamma: float) -> BotPosition:
        return cls(Vertex(x, y, z), RotationAngle(alpha, beta, gamma))

    def is_equal(self, other: BotPosition, dist_precision: float = 0.0,
                 rot_precision: float = 0.0) -> bool:
        return (self.global_pos.is_equal(other.global_pos, dist_precision)
                and self.global_rotation.is_equal(other.global_rotation, rot_precision))


@dataclass
class CalibPoint:
    global_pos: Vertex = field(default_factory=Vertex)
    bot_pos: Vertex = field(default_factory=Vertex)


@dataclass
class HomePoint:
    global_pos: Vertex = field(default_factory=Vertex)
    angle: RotationAngle = field(default_factory=RotationAngle)
    normal: Vertex = field(default_factory=lambda: Vertex(0.0, 0.0, 1.0))


@dataclass
class TaskPoint:
    task_type: TaskType = TaskType.MOVE
    global_pos: Vertex = field(default_factory=Vertex)
    angle: RotationAngle = field(default_factory=RotationAngle)
    normal: Vertex = field(default_factory=lambda: Vertex(0.0, 0.0, 1.0))
    need_calib: bool = False
    z_simmetry: bool = False
    delay: float = 0.0
    use_home_point: bool = False