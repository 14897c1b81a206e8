import pytest

from fanucbot.calib_table import CalibPointsTable, format_vertex
from fanucbot.types import CalibPoint, Vertex


def _points():
    return [CalibPoint(Vertex(i, i + 0.5, -i), Vertex(10 * i, 0, 1)) for i in range(3)]


def test_format_vertex_zero_padded():
    assert format_vertex(1.5, -2, 0) == "X:000000001.50 Y:-00000002.00 Z:000000000.00"


def test_headers_and_counts():
    table = CalibPointsTable(_points())
    assert table.column_count() == 3
    assert table.row_count() == 3
    assert table.header(0) == "Название"
    assert table.header(1) == "Координаты заготовки"
    assert table.header(2) == "Координаты робота"
    assert table.header(3) is None


def test_display_names_and_coordinates():
    pts = _points()
    table = CalibPointsTable(pts)
    assert [table.display(r, 0) for r in range(3)] == ["C1", "C2", "C3"]
    g = pts[1].global_pos
    b = pts[1].bot_pos
    assert table.display(1, 1) == format_vertex(g.x, g.y, g.z)
    assert table.display(1, 2) == format_vertex(b.x, b.y, b.z)
    assert table.display(5, 0) == ""
    assert table.display(0, 7) == ""


def test_points_round_trip():
    pts = _points()
    assert CalibPointsTable(pts).points() == pts


def test_move_row_to_end_keeps_names():
    pts = _points()
    table = CalibPointsTable(pts)
    assert table.move_row(0, 3) is True
    assert table.points() == [pts[1], pts[2], pts[0]]
    assert table.display(2, 0) == "C1"


def test_move_row_up():
    pts = _points()
    table = CalibPointsTable(pts)
    assert table.move_row(2, 0) is True
    assert table.points() == [pts[2], pts[0], pts[1]]


@pytest.mark.parametrize("source, destination", [(0, 1), (-1, 0), (3, 0), (0, 4), (1, 1), (0, -1)])
def test_move_row_rejected(source, destination):
    pts = _points()
    table = CalibPointsTable(pts)
    assert table.move_row(source, destination) is False
    assert table.points() == pts


def test_drop_without_parent_moves_to_end():
    pts = _points()
    table = CalibPointsTable(pts)
    assert table.drop(1) is True
    assert table.points() == [pts[0], pts[2], pts[1]]


def test_drop_on_row():
    pts = _points()
    table = CalibPointsTable(pts)
    assert table.drop(2, 0) is True
    assert table.points()[0] == pts[2]


def test_edit_accepted_renumbers():
    pts = _points()
    table = CalibPointsTable(pts)
    table.move_row(0, 3)
    replacement = CalibPoint(Vertex(7, 7, 7), Vertex(8, 8, 8))
    assert table.edit(0, lambda p: replacement) is True
    assert table.points()[0] == replacement
    assert [table.display(r, 0) for r in range(3)] == ["C1", "C2", "C3"]


def test_edit_cancelled_or_out_of_range():
    pts = _points()
    table = CalibPointsTable(pts)
    assert table.edit(0, lambda p: None) is False
    assert table.edit(9, lambda p: p) is False
    assert table.points() == pts


def test_edit_receives_copy():
    pts = _points()
    table = CalibPointsTable(pts)

    def mutate(point):
        point.global_pos.x = 99
        return None

    table.edit(0, mutate)
    assert table.points()[0] == pts[0]