"""Tables of path (home) points and of task points, in robot execution order."""

from __future__ import annotations

from typing import Iterable

from .calib_table import PointsOrderTable, format_vertex
from .types import HomePoint, RotationAngle, TaskPoint, TaskType, Vertex

_TASK_NAMES = {
    TaskType.MOVE: "Перемещение",
    TaskType.DRILL: "Отверстие",
    TaskType.MARK: "Маркировка",
}


def _number(value: float) -> str:
    return f"{float(value):012.2f}"


def format_angle(alpha: float, beta: float, gamma: float) -> str:
    """Rotation angles as zero-padded, 12 wide, two decimals."""
    return f"α:{_number(alpha)} β:{_number(beta)} γ:{_number(gamma)}"


def task_name(task_type: TaskType) -> str:
    """Human-readable name of a task type; empty for an unknown one."""
    return _TASK_NAMES.get(task_type, "")


def _vertex(v: Vertex) -> str:
    return format_vertex(v.x, v.y, v.z)


def _angle(a: RotationAngle) -> str:
    return format_angle(a.x, a.y, a.z)


class PathPointsTable(PointsOrderTable):
    """Home points of a path: coordinates and rotation angle."""

    def __init__(self, points: Iterable[HomePoint] = ()) -> None:
        super().__init__("P", (
            ("Координаты", lambda p: _vertex(p.global_pos)),
            ("Угол поворота", lambda p: _angle(p.angle)),
        ), points)


class TaskPointsTable(PointsOrderTable):
    """Task points: task kind, part coordinates and rotation angle."""

    def __init__(self, points: Iterable[TaskPoint] = ()) -> None:
        super().__init__("T", (
            ("Задание", lambda p: task_name(p.task_type)),
            ("Координаты заготовки", lambda p: _vertex(p.global_pos)),
            ("Угол поворота", lambda p: _angle(p.angle)),
        ), points)