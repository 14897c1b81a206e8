"""Reorderable, editable tables of points, and the calibration point table."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence

from .types import CalibPoint, Vertex

NAME_HEADER = "Название"

Column = tuple[str, Callable[[Any], str]]


def _number(value: float) -> str:
    return f"{float(value):012.2f}"


def format_vertex(x: float, y: float, z: float) -> str:
    """Coordinates as zero-padded, 12 wide, two decimals."""
    return f"X:{_number(x)} Y:{_number(y)} Z:{_number(z)}"


def _vertex(v: Vertex) -> str:
    return format_vertex(v.x, v.y, v.z)


@dataclass
class _Row:
    name: str
    point: Any


class PointsOrderTable:
    """Rows of points named prefix1, prefix2, ...; names follow their rows when moved."""

    def __init__(self, prefix: str, columns: Sequence[Column], points: Iterable[Any] = ()) -> None:
        self._prefix = prefix
        self._columns: tuple[Column, ...] = tuple(columns)
        self._rows: list[_Row] = []
        self.set_points(points)

    def set_points(self, points: Iterable[Any]) -> None:
        self._rows = [_Row(f"{self._prefix}{number}", copy.deepcopy(point))
                      for number, point in enumerate(points, 1)]

    def points(self) -> list[Any]:
        return [copy.deepcopy(row.point) for row in self._rows]

    def row_count(self) -> int:
        return len(self._rows)

    def column_count(self) -> int:
        return 1 + len(self._columns)

    def header(self, section: int) -> str | None:
        if section == 0:
            return NAME_HEADER
        if 1 <= section < self.column_count():
            return self._columns[section - 1][0]
        return None

    def display(self, row: int, column: int) -> str:
        if not 0 <= row < self.row_count():
            return ""
        entry = self._rows[row]
        if column == 0:
            return entry.name
        if 1 <= column < self.column_count():
            return self._columns[column - 1][1](entry.point)
        return ""

    def move_row(self, source_row: int, destination: int) -> bool:
        """Move a row so that it lands before the row now at destination."""
        count = self.row_count()
        if (source_row < 0 or source_row >= count or destination > count or destination < 0
                or source_row == destination - 1 or source_row == destination):
            return False
        row = self._rows.pop(source_row)
        if source_row <= destination:
            destination -= 1
        self._rows.insert(destination, row)
        return True

    def drop(self, top_row: int, parent_row: int | None = None) -> bool:
        """Move a dragged row onto parent_row, or to the end when dropped on no row."""
        destination = self.row_count() if parent_row is None else parent_row
        return self.move_row(top_row, destination)

    def edit(self, row: int, editor: Callable[[Any], Any]) -> bool:
        """Let editor change a row's point; it returns the new point or None to cancel."""
        if not 0 <= row < self.row_count():
            return False
        points = self.points()
        changed = editor(points[row])
        if changed is None:
            return False
        points[row] = changed
        self.set_points(points)
        return True


class CalibPointsTable(PointsOrderTable):
    """Calibration points: part coordinates and the matching robot coordinates."""

    def __init__(self, points: Iterable[CalibPoint] = ()) -> None:
        super().__init__("C", (
            ("Координаты заготовки", lambda p: _vertex(p.global_pos)),
            ("Координаты робота", lambda p: _vertex(p.bot_pos)),
        ), points)