"""Rotations and rigid (optionally scaled) transforms in 3D."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass(frozen=True)
class Quaternion:
    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_euler_xyz(cls, alpha: float, beta: float, gamma: float) -> Quaternion:
        """Extrinsic rotation about X, then Y, then Z (radians)."""
        qx = cls(math.cos(alpha / 2), math.sin(alpha / 2), 0.0, 0.0)
        qy = cls(math.cos(beta / 2), 0.0, math.sin(beta / 2), 0.0)
        qz = cls(math.cos(gamma / 2), 0.0, 0.0, math.sin(gamma / 2))
        return qz * qy * qx

    @classmethod
    def between(cls, source: Sequence[float], target: Sequence[float]) -> Quaternion:
        """Shortest rotation taking the direction source onto target."""
        a = np.asarray(source, float)
        b = np.asarray(target, float)
        a = a / np.linalg.norm(a)
        b = b / np.linalg.norm(b)
        dot = float(a @ b)
        if dot < -1.0 + 1e-12:
            axis = np.cross(a, (1.0, 0.0, 0.0))
            if np.linalg.norm(axis) < 1e-6:
                axis = np.cross(a, (0.0, 1.0, 0.0))
            axis = axis / np.linalg.norm(axis)
            return cls(0.0, *map(float, axis))
        cross = np.cross(a, b)
        return cls(1.0 + dot, *map(float, cross)).normalized()

    @classmethod
    def from_matrix(cls, m) -> Quaternion:
        m = np.asarray(m, float)
        trace = m[0, 0] + m[1, 1] + m[2, 2]
        if trace > 0:
            s = math.sqrt(trace + 1.0) * 2
            q = cls(0.25 * s, (m[2, 1] - m[1, 2]) / s, (m[0, 2] - m[2, 0]) / s, (m[1, 0] - m[0, 1]) / s)
        elif m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
            s = math.sqrt(1.0 + m[0, 0] - m[1, 1] - m[2, 2]) * 2
            q = cls((m[2, 1] - m[1, 2]) / s, 0.25 * s, (m[0, 1] + m[1, 0]) / s, (m[0, 2] + m[2, 0]) / s)
        elif m[1, 1] > m[2, 2]:
            s = math.sqrt(1.0 + m[1, 1] - m[0, 0] - m[2, 2]) * 2
            q = cls((m[0, 2] - m[2, 0]) / s, (m[0, 1] + m[1, 0]) / s, 0.25 * s, (m[1, 2] + m[2, 1]) / s)
        else:
            s = math.sqrt(1.0 + m[2, 2] - m[0, 0] - m[1, 1]) * 2
            q = cls((m[1, 0] - m[0, 1]) / s, (m[0, 2] + m[2, 0]) / s, (m[1, 2] + m[2, 1]) / s, 0.25 * s)
        return q.normalized()

    def matrix(self) -> np.ndarray:
        w, x, y, z = self.normalized()._parts()
        return np.array([
            [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
            [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
            [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
        ])

    def to_euler_xyz(self) -> tuple[float, float, float]:
        """Inverse of from_euler_xyz: (alpha, beta, gamma) in radians."""
        m = self.matrix()
        beta = math.asin(max(-1.0, min(1.0, -m[2, 0])))
        if abs(m[2, 0]) < 1.0 - 1e-12:
            alpha = math.atan2(m[2, 1], m[2, 2])
            gamma = math.atan2(m[1, 0], m[0, 0])
        else:
            alpha = 0.0
            gamma = math.atan2(-m[0, 1], m[1, 1])
        return alpha, beta, gamma

    def _parts(self) -> tuple[float, float, float, float]:
        return self.w, self.x, self.y, self.z

    def normalized(self) -> Quaternion:
        n = math.sqrt(sum(p * p for p in self._parts()))
        if n == 0.0:
            return Quaternion()
        return Quaternion(self.w / n, self.x / n, self.y / n, self.z / n)

    def rotate(self, vector: Sequence[float]) -> tuple[float, float, float]:
        return tuple(float(v) for v in self.matrix() @ np.asarray(vector, float))

    def __mul__(self, other: Quaternion) -> Quaternion:
        w1, x1, y1, z1 = self._parts()
        w2, x2, y2, z2 = other._parts()
        return Quaternion(
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        )


class Transform:
    """Affine transform: 3x3 linear part and a translation."""

    def __init__(self, linear=None, translation=None):
        self._linear = np.eye(3) if linear is None else np.asarray(linear, float).reshape(3, 3)
        self._translation = np.zeros(3) if translation is None else np.asarray(translation, float).reshape(3)

    @classmethod
    def from_values(cls, values: Sequence[float]) -> Transform:
        """Build from the twelve row-major values of a 3x4 matrix."""
        if len(values) != 12:
            raise ValueError("a transform needs twelve values")
        m = np.asarray(values, float).reshape(3, 4)
        return cls(m[:, :3], m[:, 3])

    @classmethod
    def from_pose(cls, rotation: Quaternion, translation: Sequence[float]) -> Transform:
        return cls(rotation.matrix(), translation)

    def rotation(self) -> Quaternion:
        det = np.linalg.det(self._linear)
        scale = abs(det) ** (1.0 / 3.0) if det != 0 else 1.0
        return Quaternion.from_matrix(self._linear / scale)

    def translation(self) -> tuple[float, float, float]:
        return tuple(float(v) for v in self._translation)

    def values(self) -> tuple[float, ...]:
        return tuple(float(v) for v in np.hstack([self._linear, self._translation[:, None]]).ravel())

    def inverted(self) -> Transform:
        inv = np.linalg.inv(self._linear)
        return Transform(inv, -inv @ self._translation)

    def apply(self, point: Sequence[float]) -> tuple[float, float, float]:
        return tuple(float(v) for v in self._linear @ np.asarray(point, float) + self._translation)

    def __mul__(self, other: Transform) -> Transform:
        return Transform(self._linear @ other._linear,
                         self._linear @ other._translation + self._translation)