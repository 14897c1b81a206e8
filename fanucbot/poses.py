"""Conversions between controller XYZWPR poses and user-frame positions."""

from __future__ import annotations

import copy
import math

from .config import XyzwprData
from .geometry import Quaternion, Transform
from .types import BotPosition, RotationAngle, Vertex


def transform_xyzwpr(pos: XyzwprData, trsf: Transform) -> XyzwprData:
    """Return a copy of pos moved by trsf; angles are degrees, extrinsic XYZ."""
    w, p, r = (math.radians(a) for a in pos.xyzwpr[3:6])
    source = Transform.from_pose(Quaternion.from_euler_xyz(w, p, r), pos.xyzwpr[0:3])
    result = trsf * source
    out = copy.deepcopy(pos)
    angles = result.rotation().normalized().to_euler_xyz()
    out.xyzwpr = [*result.translation(), *(math.degrees(a) for a in angles)]
    return out


def xyzwpr_to_bot_position(pos: XyzwprData, world2user: Transform) -> BotPosition:
    p = transform_xyzwpr(pos, world2user).xyzwpr
    return BotPosition.of(*p[:6])


def bot_position_to_xyzwpr(global_pos: Vertex, angle: RotationAngle, normal: Vertex,
                           user2world: Transform) -> XyzwprData:
    """Orient the tool Z axis along normal, then apply the extra rotation angle."""
    normal_q = Quaternion.between((0.0, 0.0, 1.0), (normal.x, normal.y, normal.z))
    delta = Quaternion.from_euler_xyz(math.radians(angle.x), math.radians(angle.y),
                                      math.radians(angle.z))
    ax, ay, az = (normal_q * delta).to_euler_xyz()
    data = XyzwprData(xyzwpr=[global_pos.x, global_pos.y, global_pos.z,
                              math.degrees(ax), math.degrees(ay), math.degrees(az)])
    return transform_xyzwpr(data, user2world)


def point_to_xyzwpr(point, user2world: Transform) -> XyzwprData:
    """Convert a task or home point (global_pos, angle, normal) to a controller pose."""
    return bot_position_to_xyzwpr(point.global_pos, point.angle, point.normal, user2world)