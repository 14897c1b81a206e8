import math

import pytest

from fanucbot.geometry import Quaternion, Transform


def test_euler_round_trip():
    q = Quaternion.from_euler_xyz(0.3, -0.4, 1.2)
    assert q.to_euler_xyz() == pytest.approx((0.3, -0.4, 1.2))


def test_rotate_about_z():
    q = Quaternion.from_euler_xyz(0, 0, math.pi / 2)
    assert q.rotate((1, 0, 0)) == pytest.approx((0, 1, 0), abs=1e-12)


def test_between_maps_source_to_target():
    for target in [(0, 1, 0), (1, 1, 1), (0, 0, -1), (0, 0, 1)]:
        q = Quaternion.between((0, 0, 1), target)
        n = math.sqrt(sum(t * t for t in target))
        assert q.rotate((0, 0, 1)) == pytest.approx([t / n for t in target], abs=1e-9)


def test_product_composes():
    a = Quaternion.from_euler_xyz(0.1, 0.2, 0.3)
    b = Quaternion.from_euler_xyz(-0.5, 0.4, 0.0)
    v = (1.0, 2.0, 3.0)
    assert (a * b).rotate(v) == pytest.approx(a.rotate(b.rotate(v)))


def test_transform_inverse_and_values():
    t = Transform.from_pose(Quaternion.from_euler_xyz(0.2, 0.1, -0.3), (1, 2, 3))
    p = (4.0, -5.0, 6.0)
    assert t.inverted().apply(t.apply(p)) == pytest.approx(p)
    assert Transform.from_values(t.values()).values() == pytest.approx(t.values())
    assert (t * t.inverted()).values() == pytest.approx(Transform().values(), abs=1e-12)


def test_rotation_ignores_scale():
    q = Quaternion.from_euler_xyz(0.2, 0.3, 0.4)
    scaled = Transform([[2 * v for v in row] for row in q.matrix()], (0, 0, 0))
    assert scaled.rotation().to_euler_xyz() == pytest.approx(q.to_euler_xyz())


def test_from_values_needs_twelve():
    with pytest.raises(ValueError):
        Transform.from_values([1.0] * 11)